"""에이전트 오류 분류

모든 오류는 복구 가능하다: 호스트는 로그를 남기고 이번 사이클을 건너뛴 뒤
다음 예약 시점에 다시 시도한다. 코어는 내부 재시도를 하지 않는다.
"""

from __future__ import annotations

from typing import Optional

from weatherwatch.models.memory import AgentMemory


class AgentError(Exception):
    """에이전트 코어 오류 기본 클래스"""


class InvalidSignal(AgentError):
    """위치와 예보가 모두 없는 신호. 메모리는 변경되지 않는다."""


class MissingLocation(AgentError):
    """신호 처리 후에도 위치가 없음.

    예보 분류 등 부분 갱신은 적용되어 있으며, 호스트는 ``memory``를 저장해야 한다.
    """

    def __init__(self, message: str, memory: Optional[AgentMemory] = None) -> None:
        super().__init__(message)
        self.memory = memory


class NotReady(AgentError):
    """API 키 또는 위치 미설정 - 조회를 시도하지 않음"""


class UpstreamFailure(AgentError):
    """상위 제공자 조회 실패 (네트워크, 파싱, 타임아웃). 메모리는 그대로."""
