"""에이전트 메모리 모델

폴링 사이클 사이에 유지되는 에이전트별 상태.
저장/삭제 수명은 호스트(MemoryStore)가 관리하고, 변경은 AlertAgentCore만 한다.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Optional

from weatherwatch.models.config import AgentConfig


@dataclass(slots=True)
class AgentMemory:
    """에이전트별 가변 상태"""

    current_interval: float
    location: Optional[str] = None
    watch_alerts: bool = False
    have_alerts: bool = False

    @classmethod
    def initial(cls, config: AgentConfig) -> AgentMemory:
        """첫 사용 시 기본값으로 생성"""
        return cls(
            current_interval=config.default_interval,
            location=config.initial_location or None,
        )

    @property
    def has_location(self) -> bool:
        return bool(self.location and self.location.strip())

    @property
    def on_alert(self) -> bool:
        return self.watch_alerts or self.have_alerts

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any], config: AgentConfig) -> AgentMemory:
        """저장된 dict → AgentMemory. 누락된 키는 config 기본값으로 채운다."""
        return cls(
            current_interval=float(
                data.get("current_interval", config.default_interval)
            ),
            location=data.get("location") or None,
            watch_alerts=bool(data.get("watch_alerts", False)),
            have_alerts=bool(data.get("have_alerts", False)),
        )
