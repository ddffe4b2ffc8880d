"""NotifierAgent 단위 테스트"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from weatherwatch.agents.notifier_agent import NotifierAgent
from weatherwatch.models.config import AgentConfig
from weatherwatch.models.events import AgentEvent, AlertEvent
from weatherwatch.skills.base import EventSink


@pytest.fixture
def notifier_config() -> AgentConfig:
    return AgentConfig(notification_methods=["desktop"])


@pytest.fixture
def alert_event(two_alerts, now) -> AlertEvent:
    return AlertEvent(agent_id="a1", alerts=tuple(two_alerts), created_at=now)


def make_mock_sink(error: Exception | None = None) -> MagicMock:
    """EventSink를 MagicMock으로 대체"""
    mock = MagicMock(spec=EventSink)
    mock.emit = AsyncMock(side_effect=error)
    return mock


class TestNotifierAgentDelivery:
    """전달 동작 테스트"""

    @pytest.mark.asyncio
    async def test_event_delivered(
        self,
        notifier_config: AgentConfig,
        alert_event: AlertEvent,
    ) -> None:
        sink = make_mock_sink()
        agent = NotifierAgent(notifier_config, sink=sink)

        await agent._handle_event(alert_event)

        sink.emit.assert_awaited_once_with("a1", alert_event.alerts)
        assert agent.notifications_sent == 1

    @pytest.mark.asyncio
    async def test_repeated_events_not_deduplicated(
        self,
        notifier_config: AgentConfig,
        alert_event: AlertEvent,
    ) -> None:
        sink = make_mock_sink()
        agent = NotifierAgent(notifier_config, sink=sink)

        await agent._handle_event(alert_event)
        await agent._handle_event(alert_event)

        assert sink.emit.await_count == 2

    @pytest.mark.asyncio
    async def test_empty_event_skipped(
        self,
        notifier_config: AgentConfig,
        now,
    ) -> None:
        sink = make_mock_sink()
        agent = NotifierAgent(notifier_config, sink=sink)

        await agent._handle_event(AlertEvent(agent_id="a1", alerts=(), created_at=now))

        sink.emit.assert_not_called()
        assert agent.notifications_sent == 0

    @pytest.mark.asyncio
    async def test_notify_complete_emitted(
        self,
        notifier_config: AgentConfig,
        alert_event: AlertEvent,
    ) -> None:
        bus: asyncio.Queue = asyncio.Queue()  # type: ignore[type-arg]
        agent = NotifierAgent(notifier_config, event_bus=bus, sink=make_mock_sink())

        await agent._handle_event(alert_event)

        msg = bus.get_nowait()
        assert msg.event == AgentEvent.NOTIFY_COMPLETE
        assert msg.payload["alerts_count"] == 2
        assert msg.payload["notification_number"] == 1

    @pytest.mark.asyncio
    async def test_delivery_error_reported(
        self,
        notifier_config: AgentConfig,
        alert_event: AlertEvent,
    ) -> None:
        bus: asyncio.Queue = asyncio.Queue()  # type: ignore[type-arg]
        sink = make_mock_sink(error=RuntimeError("모든 알림 채널 실패"))
        agent = NotifierAgent(notifier_config, event_bus=bus, sink=sink)

        await agent._handle_event(alert_event)

        msg = bus.get_nowait()
        assert msg.event == AgentEvent.HEALTH_WARNING
        assert msg.payload["reason"] == "delivery_error"
        assert agent.notifications_sent == 0


class TestNotifierAgentLifecycle:
    @pytest.mark.asyncio
    async def test_queued_events_drained_on_stop(
        self,
        notifier_config: AgentConfig,
        alert_event: AlertEvent,
    ) -> None:
        sink = make_mock_sink()
        agent = NotifierAgent(notifier_config, sink=sink)

        await agent.notify(alert_event)
        agent.request_stop()
        await agent.start()

        sink.emit.assert_awaited_once()
        assert agent.inbox.empty()

    @pytest.mark.asyncio
    async def test_run_loop_delivers(
        self,
        notifier_config: AgentConfig,
        alert_event: AlertEvent,
    ) -> None:
        sink = make_mock_sink()
        agent = NotifierAgent(notifier_config, sink=sink)

        task = asyncio.create_task(agent.start())
        await agent.notify(alert_event)
        for _ in range(100):
            if agent.notifications_sent:
                break
            await asyncio.sleep(0.01)
        agent.request_stop()
        await asyncio.wait_for(task, timeout=3.0)

        assert agent.notifications_sent == 1
