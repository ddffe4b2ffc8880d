"""예보 분류 스킬

예보 문구에 악기상 키워드가 있으면 특보를 주시(watch)해야 한다고 판단한다.
"""

from __future__ import annotations

import re
from typing import Optional

# 검사 순서 고정, 첫 일치에서 중단
WATCH_TERMS: tuple[str, ...] = (
    "Thunderstorm",
    "Squalls",
    "Sandstorm",
    "Dust",
    "Sand",
    "Smoke",
    "Hail",
)

_WATCH_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(re.escape(term), re.IGNORECASE) for term in WATCH_TERMS
)


def classify(conditions: Optional[str]) -> bool:
    """예보 문구 → 주시 여부. None/빈 문자열은 False."""
    if not conditions:
        return False
    return any(p.search(conditions) for p in _WATCH_PATTERNS)
