"""입력 처리 에이전트 (InputAgent)

상위 날씨 에이전트의 이벤트 페이로드를 InboundSignal로 변환해 발행한다.
CLI 인자는 main에서 ParserSkill.parse_cli로 직접 변환한다.
스킬 구성: ParserSkill
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional

from weatherwatch.agents.base import BaseAgent
from weatherwatch.models.alerts import InboundSignal
from weatherwatch.models.events import AgentEvent
from weatherwatch.skills.parser import ParserSkill

logger = logging.getLogger("weatherwatch.agent.input")


class InputAgent(BaseAgent):
    """입력 처리 에이전트 (Stateless: 요청-응답 방식)

    페이로드 dict → InboundSignal (SIGNAL_READY 발행)
    빈 신호 판정은 코어가 한다.
    """

    def __init__(
        self,
        event_bus: Optional[asyncio.Queue] = None,  # type: ignore[type-arg]
    ) -> None:
        super().__init__("input_agent", event_bus)
        self._parser = ParserSkill()

    async def setup(self) -> None:
        logger.debug("InputAgent 초기화 완료")

    async def run(self) -> None:
        """InputAgent는 stateless: process_payload() 직접 호출 방식으로 동작"""

    async def teardown(self) -> None:
        logger.debug("InputAgent 정리 완료")

    async def process_payload(self, payload: Mapping[str, Any]) -> InboundSignal:
        """날씨 이벤트 페이로드 → InboundSignal"""
        if not isinstance(payload, Mapping):
            raise TypeError("payload는 Mapping 이어야 합니다")

        signal = self._parser.parse_payload(payload)
        logger.info("신호 수신: %s", signal.summary())
        await self.emit(AgentEvent.SIGNAL_READY, "orchestrator", signal)
        return signal

