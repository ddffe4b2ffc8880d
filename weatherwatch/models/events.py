"""에이전트 간 통신 이벤트 모델"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from time import monotonic
from typing import Any

from weatherwatch.models.alerts import AlertRecord


class AgentEvent:
    """에이전트 이벤트 타입 상수"""

    SIGNAL_READY = "signal.ready"
    CHECK_START = "check.start"
    CHECK_RESULT = "check.result"
    CHECK_SKIPPED = "check.skipped"
    ALERTS_EMITTED = "alerts.emitted"
    NOTIFY_COMPLETE = "notify.complete"
    HEALTH_WARNING = "health.warning"


@dataclass(frozen=True, slots=True)
class AgentMessage:
    """에이전트 간 메시지"""

    event: str
    source: str
    target: str
    payload: Any
    timestamp: float = 0.0

    def __post_init__(self) -> None:
        if self.timestamp == 0.0:
            object.__setattr__(self, "timestamp", monotonic())


@dataclass(frozen=True, slots=True)
class AlertEvent:
    """특보가 있는 조회 1회당 생성되는 이벤트 (하위 에이전트로 전달)"""

    agent_id: str
    alerts: tuple[AlertRecord, ...]
    created_at: datetime
