"""옵션 검증 스킬

Huginn 스타일 옵션 dict를 검증하고 타입이 확정된 AgentConfig를 만든다.
api_key가 비어 있으면 이름으로 등록된 자격 증명을 조회한다.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional

from weatherwatch.models.config import UNSET_API_KEYS, AgentConfig
from weatherwatch.skills.credentials import (
    DEFAULT_CREDENTIAL_NAME,
    CredentialResolver,
)
from weatherwatch.skills.poller import parse_schedule

DEFAULT_OPTIONS: dict[str, str] = {
    "location": "",
    "api_key": "-empty-",
    "default_check_schedule": "every_30m",
    "on_alert_check_schedule": "every_10m",
    "expected_update_period_in_days": "1",
}


class ValidationSkill:
    """옵션 검증 스킬"""

    def __init__(
        self,
        credentials: Optional[CredentialResolver] = None,
        credential_name: str = DEFAULT_CREDENTIAL_NAME,
    ) -> None:
        self._credentials = credentials
        self._credential_name = credential_name

    def resolve_api_key(self, options: Mapping[str, Any]) -> Optional[str]:
        """인라인 api_key 우선, 비어 있으면 자격 증명 조회"""
        raw = str(options.get("api_key") or "").strip()
        if raw not in UNSET_API_KEYS:
            return raw
        if self._credentials is None:
            return None
        return self._credentials(self._credential_name)

    def validate_options(self, options: Mapping[str, Any]) -> list[str]:
        """검증 오류 목록 반환 (없으면 빈 리스트)"""
        errors: list[str] = []
        merged = {**DEFAULT_OPTIONS, **options}

        if self.resolve_api_key(merged) is None:
            errors.append("api_key is required")

        for key in ("default_check_schedule", "on_alert_check_schedule"):
            try:
                _schedule(merged, key)
            except ValueError as e:
                errors.append(f"{key}: {e}")

        try:
            self._parse_period_days(merged["expected_update_period_in_days"])
        except ValueError as e:
            errors.append(f"expected_update_period_in_days: {e}")

        return errors

    def build_config(
        self,
        options: Mapping[str, Any],
        **host_settings: Any,
    ) -> AgentConfig:
        """전체 검증 후 AgentConfig 반환. 실패 시 ValueError (오류 전체 나열)."""
        errors = self.validate_options(options)
        if errors:
            raise ValueError("; ".join(errors))

        merged = {**DEFAULT_OPTIONS, **options}
        location = str(merged.get("location") or "").strip()

        return AgentConfig(
            api_key=self.resolve_api_key(merged),
            default_interval=_schedule(merged, "default_check_schedule"),
            alerted_interval=_schedule(merged, "on_alert_check_schedule"),
            expected_update_period=self._parse_period_days(
                merged["expected_update_period_in_days"]
            ) * 86400.0,
            initial_location=location or None,
            **host_settings,
        )

    @staticmethod
    def _parse_period_days(value: Any) -> float:
        """빈 값은 1일, 0 이하나 nan/inf, 숫자가 아니면 ValueError"""
        if value is None or str(value).strip() == "":
            return 1.0
        try:
            days = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"숫자가 아닙니다: {value!r}") from None
        if not math.isfinite(days) or days <= 0:
            raise ValueError(f"유한한 양수여야 합니다: {value!r}")
        return days


def _schedule(options: Mapping[str, Any], key: str) -> float:
    """스케줄 옵션 → 초. 빈 값은 기본 스케줄."""
    value = options.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        value = DEFAULT_OPTIONS[key]
    return parse_schedule(value)
