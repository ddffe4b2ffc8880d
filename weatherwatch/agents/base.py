"""호스트 에이전트 기본 인터페이스

호스트 측 에이전트는 BaseAgent를 상속하여 공통 라이프사이클을 따른다.
라이프사이클: INIT → READY → ACTIVE → DRAINING → (RECOVERING) → OFF
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Any, Optional

from weatherwatch.models.events import AgentMessage


class AgentLifecycle(Enum):
    """에이전트 라이프사이클 상태"""
    INIT = auto()
    READY = auto()
    ACTIVE = auto()
    DRAINING = auto()
    RECOVERING = auto()
    OFF = auto()


class BaseAgent(ABC):
    """호스트 에이전트 기본 추상 클래스

    하위 클래스 구현 항목:
    - setup(): 초기화 작업
    - run(): 메인 실행 루프
    - teardown(): 정리 작업
    """

    def __init__(
        self,
        name: str,
        event_bus: Optional[asyncio.Queue[AgentMessage]] = None,
    ) -> None:
        self._name = name
        self._event_bus = event_bus
        self._lifecycle = AgentLifecycle.INIT
        self._stop_event = asyncio.Event()
        self._logger = logging.getLogger(f"weatherwatch.host.{name}")

    @property
    def name(self) -> str:
        return self._name

    @property
    def lifecycle(self) -> AgentLifecycle:
        return self._lifecycle

    def _set_lifecycle(self, state: AgentLifecycle) -> None:
        self._logger.debug("라이프사이클: %s → %s", self._lifecycle.name, state.name)
        self._lifecycle = state

    async def emit(self, event: str, target: str, payload: Any = None) -> None:
        """이벤트 버스에 메시지 발송 (버스가 없으면 무시)"""
        if self._event_bus is None:
            return
        await self._event_bus.put(AgentMessage(
            event=event,
            source=self._name,
            target=target,
            payload=payload,
        ))

    def request_stop(self) -> None:
        """외부에서 에이전트 중지 요청"""
        self._stop_event.set()

    async def _wait_for_stop(self, timeout: float) -> bool:
        """timeout 동안 중지 요청 대기. 중지 요청이 오면 True."""
        try:
            await asyncio.wait_for(
                asyncio.shield(self._stop_event.wait()),
                timeout=max(timeout, 0.0),
            )
            return True
        except asyncio.TimeoutError:
            return False

    @abstractmethod
    async def setup(self) -> None:
        """초기화: 의존성 준비"""

    @abstractmethod
    async def run(self) -> None:
        """메인 실행 루프"""

    @abstractmethod
    async def teardown(self) -> None:
        """정리: 리소스 해제"""

    async def start(self) -> None:
        """에이전트 전체 라이프사이클 실행"""
        try:
            self._set_lifecycle(AgentLifecycle.INIT)
            await self.setup()
            self._set_lifecycle(AgentLifecycle.READY)
            self._set_lifecycle(AgentLifecycle.ACTIVE)
            await self.run()
        except Exception as e:
            self._logger.error("에이전트 실행 오류: %s", e)
            self._set_lifecycle(AgentLifecycle.RECOVERING)
            raise
        finally:
            self._set_lifecycle(AgentLifecycle.DRAINING)
            await self.teardown()
            self._set_lifecycle(AgentLifecycle.OFF)
