"""에이전트 설정 모델"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

# 레거시 옵션에서 "미설정"을 의미하던 값들
UNSET_API_KEYS: frozenset[str] = frozenset({"", "-empty-", "your-key"})


@dataclass(frozen=True, slots=True)
class AgentConfig:
    """에이전트 설정 - 생성 시 한 번 확정되고 이후 변경되지 않는다"""

    api_key: Optional[str] = None

    # Polling 설정 (초)
    default_interval: float = 1800.0        # every_30m
    alerted_interval: float = 600.0         # every_10m
    expected_update_period: float = 86400.0  # 1일

    # 첫 사용 시 메모리에 심어둘 위치 (없으면 신호로만 설정)
    initial_location: Optional[str] = None

    # HTTP 설정
    request_timeout: float = 15.0
    connect_timeout: float = 5.0
    max_connections: int = 3
    max_requests_per_minute: float = 10.0   # Wunderground 무료 플랜 한도

    # 알림 설정
    notification_methods: list[str] = field(
        default_factory=lambda: ["log"]
    )
    webhook_url: str = ""

    @property
    def has_api_key(self) -> bool:
        return self.api_key is not None and self.api_key.strip() not in UNSET_API_KEYS
