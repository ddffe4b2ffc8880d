"""폴링 간격 선택 스킬

특보/주시 상태로 다음 조회 간격을 고르고,
Huginn 스타일 스케줄 이름(every_10m 등)을 초 단위로 변환한다.
"""

from __future__ import annotations

import math
import re

from weatherwatch.models.config import AgentConfig

_SCHEDULE_RE = re.compile(r"^every_(\d+)([smhd])$")

_UNIT_SECONDS: dict[str, int] = {
    "s": 1,
    "m": 60,
    "h": 3600,
    "d": 86400,
}


def select_interval(
    watch_alerts: bool,
    have_alerts: bool,
    config: AgentConfig,
) -> float:
    """다음 폴링까지 대기 시간(초)"""
    if watch_alerts or have_alerts:
        return config.alerted_interval
    return config.default_interval


def parse_schedule(value: str | float | int) -> float:
    """'every_30m' / '600' / 600 → 초. 잘못된 값은 ValueError."""
    if isinstance(value, bool):
        raise ValueError(f"스케줄 형식 오류: {value!r}")
    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        s = value.strip().lower()
        m = _SCHEDULE_RE.match(s)
        if m:
            seconds = float(int(m.group(1)) * _UNIT_SECONDS[m.group(2)])
        else:
            try:
                seconds = float(s)
            except ValueError:
                raise ValueError(f"스케줄 형식 오류: {value!r}") from None

    if not math.isfinite(seconds) or seconds <= 0:
        raise ValueError(f"스케줄 간격은 유한한 양수여야 합니다: {value!r}")
    return seconds
