"""입력 파싱 스킬

상위 날씨 에이전트의 이벤트 페이로드와 CLI 인자를 InboundSignal로 변환한다.
"""

from __future__ import annotations

import argparse
from typing import Any, Mapping, Optional

from weatherwatch.models.alerts import InboundSignal


class ParserSkill:
    """입력 파싱 스킬"""

    @staticmethod
    def parse_payload(payload: Mapping[str, Any]) -> InboundSignal:
        """날씨 이벤트 페이로드 → InboundSignal

        WeatherAgent 이벤트는 'location'과 'conditions'를 담고 있다.
        나머지 필드는 무시한다.
        """
        return InboundSignal(
            location=_clean(payload.get("location")),
            conditions=_clean(payload.get("conditions")),
        )

    @staticmethod
    def parse_cli(args: argparse.Namespace) -> InboundSignal:
        """CLI 인자 → InboundSignal"""
        return InboundSignal(
            location=_clean(getattr(args, "location", None)),
            conditions=_clean(getattr(args, "conditions", None)),
        )


def _clean(value: Any) -> Optional[str]:
    """공백 제거 후 빈 값은 None"""
    if value is None:
        return None
    s = str(value).strip()
    return s or None
