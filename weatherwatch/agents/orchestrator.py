"""오케스트레이터 에이전트 (OrchestratorAgent)

호스트 파이프라인 전체를 제어한다:
  InputAgent → AlertMonitorAgent → NotifierAgent
  HealthAgent (상시 감시)

이벤트 기반 통신:
  - 중앙 event_bus (asyncio.Queue) 통해 모든 에이전트 메시지 수신
  - SIGNAL_READY   → AlertMonitorAgent.receive
  - ALERTS_EMITTED → NotifierAgent 위임
  - 종료는 stop() 호출 (Ctrl+C) 또는 AlertMonitorAgent 종료로만

라이프사이클: IDLE → RUNNING → STOPPING → STOPPED
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum, auto
from time import monotonic
from typing import Any, Iterable, Mapping, Optional

from weatherwatch.agent.metrics import AgentMetrics
from weatherwatch.agents.health_agent import HealthAgent
from weatherwatch.agents.input_agent import InputAgent
from weatherwatch.agents.monitor_agent import AlertMonitorAgent, utc_now
from weatherwatch.agents.notifier_agent import NotifierAgent
from weatherwatch.models.alerts import InboundSignal
from weatherwatch.models.config import AgentConfig
from weatherwatch.models.events import AgentEvent, AgentMessage, AlertEvent
from weatherwatch.skills.base import AlertSource, EventSink
from weatherwatch.store.memory_store import MemoryStore

logger = logging.getLogger("weatherwatch.agent.orchestrator")


class OrchestratorState(Enum):
    IDLE = auto()
    RUNNING = auto()
    STOPPING = auto()
    STOPPED = auto()


class OrchestratorAgent:
    """멀티 에이전트 파이프라인 총괄 오케스트레이터

    단일 세션 = 단일 특보 에이전트(agent_id) = 단일 OrchestratorAgent 인스턴스.
    모든 에이전트 간 통신은 Orchestrator를 경유한다.
    """

    GRACEFUL_SHUTDOWN_TIMEOUT = 10.0  # 초

    def __init__(
        self,
        config: Optional[AgentConfig] = None,
        agent_id: str = "weather_alert",
        store: Optional[MemoryStore] = None,
        source: Optional[AlertSource] = None,
        sink: Optional[EventSink] = None,
        health_check_interval: Optional[float] = None,
    ) -> None:
        self._config = config or AgentConfig()
        self._state = OrchestratorState.IDLE
        self._metrics = AgentMetrics()

        # 중앙 이벤트 버스
        self._event_bus: asyncio.Queue[AgentMessage] = asyncio.Queue()

        # 서브 에이전트 생성
        self._input_agent = InputAgent(event_bus=self._event_bus)
        self._monitor_agent = AlertMonitorAgent(
            agent_id,
            self._config,
            store=store,
            source=source,
            event_bus=self._event_bus,
            metrics=self._metrics,
        )
        self._notifier_agent = NotifierAgent(
            config=self._config,
            event_bus=self._event_bus,
            sink=sink,
        )
        health_kwargs = {}
        if health_check_interval is not None:
            health_kwargs["check_interval"] = health_check_interval
        self._health_agent = HealthAgent(
            self._monitor_agent,
            event_bus=self._event_bus,
            **health_kwargs,
        )

        self._tasks: list[asyncio.Task] = []  # type: ignore[type-arg]

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def metrics(self) -> AgentMetrics:
        return self._metrics

    @property
    def monitor(self) -> AlertMonitorAgent:
        return self._monitor_agent

    def stop(self) -> None:
        """외부에서 안전 종료 요청 (Ctrl+C 등)"""
        if self._state == OrchestratorState.RUNNING:
            logger.info("종료 요청 수신")
            self._state = OrchestratorState.STOPPING
            self._monitor_agent.request_stop()
            self._notifier_agent.request_stop()
            self._health_agent.request_stop()

    async def submit(self, payload: Mapping[str, Any]) -> InboundSignal:
        """상위 날씨 에이전트 이벤트 페이로드 투입 (이벤트 버스 경유로 반영)"""
        return await self._input_agent.process_payload(payload)

    async def run(
        self,
        initial_signals: Iterable[InboundSignal] = (),
    ) -> AgentMetrics:
        """전체 파이프라인 실행 (blocking)

        Returns:
            AgentMetrics: 세션 종료 후 메트릭 요약
        """
        self._state = OrchestratorState.RUNNING
        start_time = monotonic()

        logger.info("오케스트레이터 시작 [%s]", self._monitor_agent.agent_id)
        logger.info(
            "설정: 기본 간격=%.0fs, 특보 간격=%.0fs, 알림=%s",
            self._config.default_interval,
            self._config.alerted_interval,
            ",".join(self._config.notification_methods),
        )

        # 첫 조회 전에 초기 신호 반영
        for signal in initial_signals:
            await self._monitor_agent.receive(signal)

        try:
            monitor_task = asyncio.create_task(
                self._monitor_agent.start(),
                name="monitor_agent",
            )
            notifier_task = asyncio.create_task(
                self._notifier_agent.start(),
                name="notifier_agent",
            )
            health_task = asyncio.create_task(
                self._health_agent.start(),
                name="health_agent",
            )
            self._tasks = [monitor_task, notifier_task, health_task]

            # 이벤트 버스 처리 루프
            await self._event_loop(monitor_task)

        finally:
            await self._shutdown()
            elapsed = monotonic() - start_time
            logger.info("오케스트레이터 종료 (%.1f분 경과)", elapsed / 60)
            self._state = OrchestratorState.STOPPED

        return self._metrics

    async def _event_loop(self, monitor_task: asyncio.Task) -> None:  # type: ignore[type-arg]
        """중앙 이벤트 처리 루프"""
        while self._state == OrchestratorState.RUNNING:
            # AlertMonitorAgent가 종료되면 세션 종료
            if monitor_task.done():
                logger.info("AlertMonitorAgent 종료 → 세션 종료")
                break

            try:
                msg = await asyncio.wait_for(
                    self._event_bus.get(),
                    timeout=1.0,
                )
            except asyncio.TimeoutError:
                continue
            await self._dispatch(msg)

        # 종료 직전까지 쌓인 메시지 처리
        while not self._event_bus.empty():
            await self._dispatch(self._event_bus.get_nowait())

    async def _dispatch(self, msg: AgentMessage) -> None:
        """이벤트 타입별 라우팅"""
        event = msg.event
        payload = msg.payload
        logger.debug("이벤트 수신: %s from %s", event, msg.source)

        if event == AgentEvent.SIGNAL_READY:
            if isinstance(payload, InboundSignal):
                await self._monitor_agent.receive(payload)

        elif event == AgentEvent.CHECK_RESULT:
            if isinstance(payload, dict):
                await self._health_agent.record_check(
                    payload.get("success", False),
                    payload.get("elapsed_ms", 0.0),
                )

        elif event == AgentEvent.CHECK_SKIPPED:
            if isinstance(payload, dict):
                logger.debug("조회 건너뜀: %s", payload.get("reason", "unknown"))

        elif event == AgentEvent.ALERTS_EMITTED:
            # 특보 이벤트 → Notifier에게 위임
            if isinstance(payload, AlertEvent):
                await self._notifier_agent.notify(payload)

        elif event == AgentEvent.NOTIFY_COMPLETE:
            self._metrics.record_notification()
            if isinstance(payload, dict):
                logger.info(
                    "알림 완료: 특보 %d건, 누적 %d회",
                    payload.get("alerts_count", 0),
                    payload.get("notification_number", 0),
                )

        elif event == AgentEvent.HEALTH_WARNING:
            # 경고 로그만 (모니터링 계속), 전달 실패는 최근 오류로 기록
            if isinstance(payload, dict):
                reason = payload.get("reason", "unknown")
                logger.warning("상태 경고: %s", reason)
                if reason == "delivery_error":
                    self._metrics.record_error(utc_now())

    async def _shutdown(self) -> None:
        """Graceful shutdown: 모든 에이전트 종료 대기"""
        self._state = OrchestratorState.STOPPING

        self._monitor_agent.request_stop()
        self._notifier_agent.request_stop()
        self._health_agent.request_stop()

        if not self._tasks:
            return

        try:
            await asyncio.wait_for(
                asyncio.gather(*self._tasks, return_exceptions=True),
                timeout=self.GRACEFUL_SHUTDOWN_TIMEOUT,
            )
            logger.debug("모든 에이전트 정상 종료")
        except asyncio.TimeoutError:
            logger.warning("강제 종료 (%.0fs 타임아웃)", self.GRACEFUL_SHUTDOWN_TIMEOUT)
            for task in self._tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*self._tasks, return_exceptions=True)
