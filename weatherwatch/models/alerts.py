"""데이터 모델: 기상 특보, 수신 신호, 조회 결과

특보/신호/결과 모델은 frozen=True + slots=True로 불변성을 보장한다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from weatherwatch.models.memory import AgentMemory

# SMS/트윗 크기 채널용 메시지 길이
SHORT_MESSAGE_LIMIT = 140


@dataclass(frozen=True, slots=True)
class AlertRecord:
    """상위 제공자가 반환한 특보 1건"""

    alert_type: str
    description: str
    message: str
    expires_at: Optional[datetime] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def expires_short(self) -> str:
        if self.expires_at is None:
            return ""
        return self.expires_at.strftime("%m/%d %H:%M")

    def short_message(self, limit: int = SHORT_MESSAGE_LIMIT) -> str:
        """제공자의 '...' 줄바꿈 표기를 정리하고 limit 길이로 자른다"""
        msg = (
            self.message
            .replace("\n...", "")
            .replace("\n", "")
            .replace("...", "\n")
        )
        return msg.strip()[:limit]

    def to_payload(self) -> dict[str, Any]:
        """이벤트 페이로드 dict (제공자 필드 'type'은 'alert_type'으로)"""
        payload = dict(self.extra)
        payload.update({
            "alert_type": self.alert_type,
            "description": self.description,
            "message": self.message,
        })
        if self.expires_at is not None:
            payload["expires_at"] = self.expires_at.isoformat()
        return payload


@dataclass(frozen=True, slots=True)
class InboundSignal:
    """상위 날씨 에이전트로부터 받은 예보 신호 (1회 소비)"""

    location: Optional[str] = None
    conditions: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.location and not self.conditions

    def summary(self) -> str:
        return f"location={self.location or '-'} conditions={self.conditions or '-'}"


@dataclass(frozen=True, slots=True)
class CheckOutcome:
    """on_check 결과"""

    emitted: bool
    memory: AgentMemory
    checked_at: datetime
    payload: tuple[AlertRecord, ...] = ()

    @property
    def alert_count(self) -> int:
        return len(self.payload)
