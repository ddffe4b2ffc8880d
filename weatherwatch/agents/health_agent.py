"""상태 감시 에이전트 (HealthAgent)

모니터링 에이전트의 working 여부(기대 주기 내 이벤트 생성 & 최근 오류 없음)를
주기적으로 평가하고, 정상 → 비정상 전환 시 경고를 발행한다.

스킬 구성: AgentMetrics + AlertAgentCore.working
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Optional

from weatherwatch.agents.base import BaseAgent
from weatherwatch.agents.monitor_agent import AlertMonitorAgent, utc_now
from weatherwatch.models.events import AgentEvent

logger = logging.getLogger("weatherwatch.agent.health")

# 상태 점검 주기 (초)
HEALTH_CHECK_INTERVAL = 60.0
# 느린 응답 경고 임계값 (ms)
SLOW_RESPONSE_THRESHOLD_MS = 10_000.0


class HealthAgent(BaseAgent):
    """상태 감시 에이전트 (항상 활성)

    - HEALTH_WARNING(not_working): working 상태가 False로 바뀜
    - HEALTH_WARNING(slow_response): 조회 응답이 임계값 초과
    """

    def __init__(
        self,
        monitor: AlertMonitorAgent,
        event_bus: Optional[asyncio.Queue] = None,  # type: ignore[type-arg]
        check_interval: float = HEALTH_CHECK_INTERVAL,
    ) -> None:
        super().__init__("health_agent", event_bus)
        self._monitor = monitor
        self._check_interval = check_interval
        self._last_working: Optional[bool] = None

    @property
    def last_working(self) -> Optional[bool]:
        return self._last_working

    async def setup(self) -> None:
        logger.info("HealthAgent 초기화 완료 (점검 주기: %.0fs)", self._check_interval)

    async def run(self) -> None:
        """주기적 상태 점검 루프"""
        while not await self._wait_for_stop(self._check_interval):
            await self.check_health()

    async def teardown(self) -> None:
        logger.info("HealthAgent 정리 완료\n%s", self._monitor.metrics.summary())

    async def record_check(self, success: bool, elapsed_ms: float) -> None:
        """조회 결과 관찰 (Orchestrator 경유)"""
        if success and elapsed_ms > SLOW_RESPONSE_THRESHOLD_MS:
            logger.warning("느린 응답 감지: %.0fms", elapsed_ms)
            await self.emit(AgentEvent.HEALTH_WARNING, "orchestrator", {
                "reason": "slow_response",
                "elapsed_ms": elapsed_ms,
            })

    async def check_health(self, now: Optional[datetime] = None) -> bool:
        """working 여부 평가. 정상 → 비정상 전환 시 경고 발행."""
        now = now or utc_now()
        working = self._monitor.is_working(now)
        metrics = self._monitor.metrics

        logger.info(
            "상태 점검 [%s]: working=%s, 조회 %d회, 이벤트 %d회",
            self._monitor.agent_id, working,
            metrics.total_checks, metrics.events_emitted,
        )

        if self._last_working and not working:
            await self.emit(AgentEvent.HEALTH_WARNING, "orchestrator", {
                "reason": "not_working",
                "agent_id": self._monitor.agent_id,
                "last_event_at": metrics.last_event_at,
                "last_error_at": metrics.last_error_at,
            })
        self._last_working = working
        return working
