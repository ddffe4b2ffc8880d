"""통합 테스트: 모니터링 플로우

AlertMonitorAgent → 이벤트 버스 흐름과 신호에 따른 재스케줄을 검증한다.
실제 HTTP 호출은 가짜 특보 제공자로 대체한다.
"""

from __future__ import annotations

import asyncio

import pytest

from weatherwatch.agents.monitor_agent import AlertMonitorAgent
from weatherwatch.models.alerts import InboundSignal
from weatherwatch.models.config import AgentConfig
from weatherwatch.models.events import AgentEvent
from weatherwatch.store.memory_store import JsonFileMemoryStore


@pytest.fixture
def fast_config() -> AgentConfig:
    return AgentConfig(
        api_key="test-key",
        default_interval=0.05,
        alerted_interval=0.05,
        max_requests_per_minute=6000.0,
        notification_methods=[],
    )


async def wait_for_calls(source, count: int, timeout: float = 2.0) -> None:
    async def _poll() -> None:
        while len(source.calls) < count:
            await asyncio.sleep(0.01)
    await asyncio.wait_for(_poll(), timeout=timeout)


class TestMonitorFlow:
    """AlertMonitorAgent → 이벤트 버스 통합 테스트"""

    @pytest.mark.asyncio
    async def test_one_event_per_alerting_check(
        self,
        fast_config: AgentConfig,
        make_source,
        two_alerts,
    ) -> None:
        """특보가 있는 조회마다 ALERTS_EMITTED가 정확히 한 번 발행되어야 한다"""
        bus: asyncio.Queue = asyncio.Queue()  # type: ignore[type-arg]
        source = make_source(alerts=two_alerts)
        agent = AlertMonitorAgent("a1", fast_config, source=source, event_bus=bus)
        await agent.receive(InboundSignal(location="94103"))

        task = asyncio.create_task(agent.start())
        await wait_for_calls(source, 3)
        agent.request_stop()
        await asyncio.wait_for(task, timeout=2.0)

        events = []
        while not bus.empty():
            events.append((await bus.get()).event)

        emitted = events.count(AgentEvent.ALERTS_EMITTED)
        assert emitted == len(source.calls)
        assert emitted == agent.metrics.events_emitted
        assert agent.memory.have_alerts is True
        assert agent.is_working() is True

    @pytest.mark.asyncio
    async def test_skips_until_location_arrives(
        self,
        fast_config: AgentConfig,
        make_source,
    ) -> None:
        source = make_source(alerts=[])
        agent = AlertMonitorAgent("a1", fast_config, source=source)

        task = asyncio.create_task(agent.start())
        await asyncio.sleep(0.15)
        assert source.calls == []
        assert agent.metrics.skipped_checks >= 1

        await agent.receive(InboundSignal(location="94103"))
        await wait_for_calls(source, 1)
        agent.request_stop()
        await asyncio.wait_for(task, timeout=2.0)

        assert source.calls[0] == ("test-key", "94103")

    @pytest.mark.asyncio
    async def test_watch_signal_shortens_wait(self, make_source) -> None:
        """대기 중 주시 신호가 오면 짧아진 간격으로 다시 계산한다"""
        config = AgentConfig(
            api_key="test-key",
            default_interval=60.0,
            alerted_interval=0.05,
            max_requests_per_minute=6000.0,
        )
        source = make_source(alerts=[])
        agent = AlertMonitorAgent("a1", config, source=source)
        await agent.receive(InboundSignal(location="94103"))

        task = asyncio.create_task(agent.start())
        await wait_for_calls(source, 1)
        await agent.receive(InboundSignal(conditions="Scattered Thunderstorms"))
        await wait_for_calls(source, 2)
        agent.request_stop()
        await asyncio.wait_for(task, timeout=2.0)

        assert agent.memory.current_interval == 0.05

    @pytest.mark.asyncio
    async def test_memory_survives_restart(
        self,
        fast_config: AgentConfig,
        make_source,
        two_alerts,
        tmp_path,
    ) -> None:
        path = tmp_path / "memory.json"
        first = AlertMonitorAgent(
            "a1", fast_config, store=JsonFileMemoryStore(path),
            source=make_source(alerts=two_alerts),
        )
        await first.receive(InboundSignal(location="94103", conditions="Hail"))
        await first.check_once()

        second = AlertMonitorAgent(
            "a1", fast_config, store=JsonFileMemoryStore(path),
            source=make_source(),
        )
        memory = second.memory
        assert memory.location == "94103"
        assert memory.watch_alerts is True
        assert memory.have_alerts is True
