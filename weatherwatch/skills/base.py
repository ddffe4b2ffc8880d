"""스킬 기본 인터페이스

코어가 의존하는 외부 협력자(특보 제공자, 이벤트 싱크)를 추상 클래스로 정의한다.
코어는 상속 대신 주입받은 구현체를 사용한다.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from weatherwatch.models.alerts import AlertRecord


class AlertSource(ABC):
    """상위 특보 제공자

    규칙:
    - 실패 시 예외 발생 (코어가 UpstreamFailure로 변환)
    - 특보가 없으면 빈 리스트 반환
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """제공자 고유 이름"""

    @abstractmethod
    async def fetch_alerts(self, api_key: str, location: str) -> list[AlertRecord]:
        """위치의 현재 특보 목록 조회"""

    async def close(self) -> None:
        """리소스 해제 (선택적 오버라이드)"""


class EventSink(ABC):
    """특보 이벤트 수신자 (저장 및 하위 에이전트 전파)"""

    @abstractmethod
    async def emit(self, agent_id: str, payload: Sequence[AlertRecord]) -> None:
        """특보 이벤트 1건 전달"""
