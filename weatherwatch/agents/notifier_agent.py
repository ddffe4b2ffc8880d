"""알림 에이전트 (NotifierAgent)

특보 이벤트(AlertEvent)를 수신하여 EventSink로 전달한다.
이벤트마다 정확히 한 번 전달하며, 중복 제거나 쿨다운은 하지 않는다.

상태: IDLE → SENDING → IDLE
스킬 구성: NotifierSkill (Log / Desktop / Sound / Webhook)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from weatherwatch.agents.base import BaseAgent
from weatherwatch.models.config import AgentConfig
from weatherwatch.models.events import AgentEvent, AlertEvent
from weatherwatch.skills.base import EventSink
from weatherwatch.skills.notifier import NotifierSkill

logger = logging.getLogger("weatherwatch.agent.notifier")


class NotifierAgent(BaseAgent):
    """알림 에이전트

    ALERTS_EMITTED 이벤트 수신 → 다채널 병렬 알림 발송
    전달 실패는 HEALTH_WARNING(delivery_error)으로 보고한다.
    """

    def __init__(
        self,
        config: AgentConfig,
        event_bus: Optional[asyncio.Queue] = None,  # type: ignore[type-arg]
        sink: Optional[EventSink] = None,  # 테스트용 의존성 주입
    ) -> None:
        super().__init__("notifier_agent", event_bus)
        self._config = config
        self._notifications_sent: int = 0
        self._inbox: asyncio.Queue[AlertEvent] = asyncio.Queue()

        self._sink = sink or NotifierSkill(
            methods=config.notification_methods,
            webhook_url=config.webhook_url,
        )

    @property
    def notifications_sent(self) -> int:
        return self._notifications_sent

    @property
    def inbox(self) -> asyncio.Queue[AlertEvent]:
        return self._inbox

    async def setup(self) -> None:
        logger.info(
            "NotifierAgent 초기화 완료 (채널: %s)",
            ",".join(self._config.notification_methods),
        )

    async def run(self) -> None:
        """알림 요청 처리 루프"""
        while not self._stop_event.is_set():
            try:
                event = await asyncio.wait_for(
                    self._inbox.get(),
                    timeout=1.0,
                )
            except asyncio.TimeoutError:
                continue
            await self._handle_event(event)

    async def teardown(self) -> None:
        # 남은 이벤트도 전달
        while not self._inbox.empty():
            await self._handle_event(self._inbox.get_nowait())
        logger.info("NotifierAgent 정리 완료 (알림 %d회 발송)", self._notifications_sent)

    async def notify(self, event: AlertEvent) -> None:
        """Orchestrator가 직접 호출하는 알림 요청"""
        await self._inbox.put(event)

    async def _handle_event(self, event: AlertEvent) -> None:
        if not event.alerts:
            return

        logger.info("알림 발송 시작 [%s]: 특보 %d건", event.agent_id, len(event.alerts))

        try:
            await self._sink.emit(event.agent_id, event.alerts)
        except Exception as e:
            logger.warning("알림 발송 실패 [%s]: %s", event.agent_id, e)
            await self.emit(AgentEvent.HEALTH_WARNING, "orchestrator", {
                "reason": "delivery_error",
                "agent_id": event.agent_id,
                "error": str(e),
            })
            return

        self._notifications_sent += 1
        logger.info("알림 발송 완료 (#%d)", self._notifications_sent)

        await self.emit(AgentEvent.NOTIFY_COMPLETE, "orchestrator", {
            "agent_id": event.agent_id,
            "alerts_count": len(event.alerts),
            "notification_number": self._notifications_sent,
        })
