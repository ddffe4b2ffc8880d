"""특보 모니터링 에이전트 (AlertMonitorAgent)

에이전트 1개(agent_id)의 호스트 측 실행기. 저장소에서 메모리를 읽어 코어를 호출하고,
결과 메모리를 다시 저장한 뒤 메모리의 current_interval만큼 대기한다.

상태 머신: CALM / WATCHING / ALERTED / SEVERE (AlertState 참조)
스킬 구성: AlertAgentCore + AlertSource + TokenBucketRateLimiter (+ EventSink)
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from time import monotonic
from typing import Callable, Optional

from weatherwatch.agent.core import AlertAgentCore
from weatherwatch.agent.metrics import AgentMetrics
from weatherwatch.agent.state import Trigger, state_of, validate_transition
from weatherwatch.agents.base import BaseAgent
from weatherwatch.models.alerts import CheckOutcome, InboundSignal
from weatherwatch.models.config import AgentConfig
from weatherwatch.models.errors import (
    InvalidSignal,
    MissingLocation,
    NotReady,
    UpstreamFailure,
)
from weatherwatch.models.events import AgentEvent, AlertEvent
from weatherwatch.models.memory import AgentMemory
from weatherwatch.skills.alert_source import WundergroundAlertSource
from weatherwatch.skills.base import AlertSource, EventSink
from weatherwatch.store.memory_store import InMemoryMemoryStore, MemoryStore
from weatherwatch.utils.rate_limiter import TokenBucketRateLimiter

logger = logging.getLogger("weatherwatch.agent.monitor")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AlertMonitorAgent(BaseAgent):
    """특보 모니터링 에이전트

    같은 에이전트에 대한 receive()/check_once()는 asyncio.Lock으로 직렬화한다.
    sink가 주어지면 특보 이벤트를 직접 전달하고, 없으면 이벤트 버스에
    ALERTS_EMITTED로 발행한다 (orchestrator가 NotifierAgent에 위임).
    """

    def __init__(
        self,
        agent_id: str,
        config: AgentConfig,
        store: Optional[MemoryStore] = None,
        source: Optional[AlertSource] = None,
        sink: Optional[EventSink] = None,
        event_bus: Optional[asyncio.Queue] = None,  # type: ignore[type-arg]
        metrics: Optional[AgentMetrics] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        super().__init__("monitor_agent", event_bus)
        self._agent_id = agent_id
        self._config = config
        self._store = store or InMemoryMemoryStore()
        self._sink = sink
        self._metrics = metrics or AgentMetrics()
        self._clock = clock
        self._lock = asyncio.Lock()
        self._reschedule = asyncio.Event()
        self._consecutive_errors = 0

        self._core = AlertAgentCore(
            config,
            source or WundergroundAlertSource(
                request_timeout=config.request_timeout,
                connect_timeout=config.connect_timeout,
                max_connections=config.max_connections,
            ),
        )
        self._rate_limiter = TokenBucketRateLimiter.per_minute(
            config.max_requests_per_minute,
        )

    @property
    def agent_id(self) -> str:
        return self._agent_id

    @property
    def core(self) -> AlertAgentCore:
        return self._core

    @property
    def metrics(self) -> AgentMetrics:
        return self._metrics

    @property
    def memory(self) -> AgentMemory:
        return self._store.get(self._agent_id, self._config)

    @property
    def consecutive_errors(self) -> int:
        return self._consecutive_errors

    def is_working(self, now: Optional[datetime] = None) -> bool:
        now = now or self._clock()
        recent_event = self._core.event_created_within(self._metrics.last_event_at, now)
        return self._core.working(recent_event, self._metrics.recent_errors())

    async def setup(self) -> None:
        memory = self.memory
        logger.info(
            "AlertMonitorAgent 초기화 완료 [%s] (위치: %s, 간격: %.0fs)",
            self._agent_id, memory.location or "-", memory.current_interval,
        )

    async def run(self) -> None:
        """폴링 루프 실행"""
        while not self._stop_event.is_set():
            await self.check_once()
            if await self._sleep_until_due(monotonic()):
                break

    async def teardown(self) -> None:
        await self._core.source.close()
        logger.info(
            "AlertMonitorAgent 정리 완료 [%s] (총 %d회 조회)",
            self._agent_id, self._metrics.total_checks,
        )

    # ── Receive ──

    async def receive(self, signal: InboundSignal) -> AgentMemory:
        """예보 신호 1건 반영. 오류는 로그만 남기고 삼킨다."""
        async with self._lock:
            before = self.memory
            after = before
            try:
                after = self._core.on_receive(signal, before)
            except InvalidSignal as e:
                logger.warning("신호 무시 [%s]: %s", self._agent_id, e)
                return before
            except MissingLocation as e:
                logger.warning("위치 없음 [%s]: %s", self._agent_id, e)
                if e.memory is not None:
                    after = e.memory
            finally:
                self._metrics.record_signal()

            self._store.put(self._agent_id, after)

        self._log_transition(before, after, Trigger.RECEIVE)
        if after.current_interval != before.current_interval:
            self._reschedule.set()
        return after

    # ── Check ──

    async def check_once(self) -> Optional[CheckOutcome]:
        """단일 조회 사이클. 건너뛰거나 실패하면 None."""
        async with self._lock:
            now = self._clock()
            before = self.memory

            if self._core.is_ready(before):
                await self._rate_limiter.acquire()
                await self.emit(AgentEvent.CHECK_START, "orchestrator", {
                    "agent_id": self._agent_id,
                    "location": before.location,
                })

            t0 = monotonic()
            try:
                outcome = await self._core.on_check(before, now)
            except NotReady as e:
                self._metrics.record_skip()
                logger.info("조회 건너뜀 [%s]: %s", self._agent_id, e)
                self._store.put(self._agent_id, before)
                await self.emit(AgentEvent.CHECK_SKIPPED, "orchestrator", {
                    "agent_id": self._agent_id,
                    "reason": str(e),
                })
                return None
            except UpstreamFailure as e:
                elapsed_ms = (monotonic() - t0) * 1000
                self._consecutive_errors += 1
                self._metrics.record_check(False, elapsed_ms)
                self._metrics.record_error(now)
                logger.warning(
                    "조회 실패 [%s] (%d회 연속): %s",
                    self._agent_id, self._consecutive_errors, e,
                )
                await self.emit(AgentEvent.CHECK_RESULT, "orchestrator", {
                    "agent_id": self._agent_id,
                    "success": False,
                    "elapsed_ms": elapsed_ms,
                    "error": str(e),
                })
                return None

            elapsed_ms = (monotonic() - t0) * 1000
            self._consecutive_errors = 0
            self._metrics.record_check(True, elapsed_ms)
            self._store.put(self._agent_id, outcome.memory)

        self._log_transition(before, outcome.memory, Trigger.CHECK)
        await self.emit(AgentEvent.CHECK_RESULT, "orchestrator", {
            "agent_id": self._agent_id,
            "success": True,
            "elapsed_ms": elapsed_ms,
            "alert_count": outcome.alert_count,
        })

        if outcome.emitted:
            await self._publish(AlertEvent(
                agent_id=self._agent_id,
                alerts=outcome.payload,
                created_at=now,
            ))
        else:
            logger.info("특보 없음 [%s] (%.0fms)", self._agent_id, elapsed_ms)

        return outcome

    async def _publish(self, event: AlertEvent) -> None:
        """특보 이벤트 1건 전달 (조회 1회당 정확히 1번)"""
        self._metrics.record_event(event.created_at)
        logger.info(
            "특보 %d건 발령 [%s]: %s",
            len(event.alerts), self._agent_id,
            ", ".join(a.description or a.alert_type for a in event.alerts),
        )

        if self._sink is None:
            await self.emit(AgentEvent.ALERTS_EMITTED, "orchestrator", event)
            return

        try:
            await self._sink.emit(event.agent_id, event.alerts)
            self._metrics.record_notification()
        except Exception as e:
            self._metrics.record_error(self._clock())
            logger.warning("이벤트 전달 실패 [%s]: %s", self._agent_id, e)

    # ── Scheduling ──

    async def _sleep_until_due(self, last_check: float) -> bool:
        """다음 조회 시점까지 대기. 중지 요청 시 True.

        대기 중 신호로 간격이 바뀌면 마지막 조회 시점 기준으로 다시 계산한다.
        """
        while True:
            remaining = last_check + self.memory.current_interval - monotonic()
            if remaining <= 0:
                return self._stop_event.is_set()

            logger.debug("다음 조회까지 %.1f초 대기", remaining)
            self._reschedule.clear()
            stopper = asyncio.ensure_future(self._stop_event.wait())
            waker = asyncio.ensure_future(self._reschedule.wait())
            done, pending = await asyncio.wait(
                {stopper, waker},
                timeout=remaining,
                return_when=asyncio.FIRST_COMPLETED,
            )
            for task in pending:
                task.cancel()

            if stopper in done:
                return True
            if not done:
                return False

    def _log_transition(
        self,
        before: AgentMemory,
        after: AgentMemory,
        trigger: Trigger,
    ) -> None:
        old, new = state_of(before), state_of(after)
        if old is new:
            return
        if not validate_transition(old, new, trigger):
            logger.warning(
                "잘못된 상태 전이 [%s]: %s → %s (%s)",
                self._agent_id, old.name, new.name, trigger.value,
            )
            return
        logger.info(
            "상태 [%s]: %s → %s (간격 %.0fs)",
            self._agent_id, old.name, new.name, after.current_interval,
        )
