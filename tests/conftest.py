"""pytest 공통 픽스처

모든 테스트에서 공유하는 샘플 데이터와 가짜 특보 제공자를 제공한다.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import pytest

from weatherwatch.models.alerts import AlertRecord
from weatherwatch.models.config import AgentConfig
from weatherwatch.models.memory import AgentMemory
from weatherwatch.skills.base import AlertSource

NOW = datetime(2026, 7, 3, 16, 14, tzinfo=timezone.utc)


class FakeAlertSource(AlertSource):
    """호출 기록을 남기는 가짜 특보 제공자"""

    def __init__(
        self,
        alerts: Optional[list[AlertRecord]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.alerts = alerts or []
        self.error = error
        self.calls: list[tuple[str, str]] = []
        self.closed = False

    @property
    def name(self) -> str:
        return "fake"

    async def fetch_alerts(self, api_key: str, location: str) -> list[AlertRecord]:
        self.calls.append((api_key, location))
        if self.error is not None:
            raise self.error
        return list(self.alerts)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def sample_config() -> AgentConfig:
    """테스트용 설정 (기본 30분, 특보 10분)"""
    return AgentConfig(
        api_key="test-key",
        default_interval=1800.0,
        alerted_interval=600.0,
        expected_update_period=86400.0,
        request_timeout=1.0,
        max_requests_per_minute=6000.0,  # 테스트에서 대기 없음
        notification_methods=[],
    )


@pytest.fixture
def fresh_memory(sample_config: AgentConfig) -> AgentMemory:
    return AgentMemory.initial(sample_config)


@pytest.fixture
def ready_memory(sample_config: AgentConfig) -> AgentMemory:
    """위치가 설정된 메모리"""
    return AgentMemory(
        current_interval=sample_config.default_interval,
        location="94103",
    )


@pytest.fixture
def heat_advisory() -> AlertRecord:
    """폭염 주의보"""
    return AlertRecord(
        alert_type="HEA",
        description="Heat Advisory",
        message=(
            "\n...Heat advisory remains in effect until 7 am CDT Saturday...\n"
            "\n* temperature...heat indices of 100 to 105 are expected each \n"
            " afternoon."
        ),
        expires_at=datetime(2012, 7, 7, 12, 0, tzinfo=timezone.utc),
        extra={"phenomena": "HT", "significance": "Y"},
    )


@pytest.fixture
def storm_warning() -> AlertRecord:
    """뇌우 경보"""
    return AlertRecord(
        alert_type="WRN",
        description="Severe Thunderstorm Warning",
        message="\n...Severe thunderstorm warning for Monroe County...\n",
        expires_at=datetime(2013, 3, 16, 20, 30, tzinfo=timezone.utc),
        extra={"phenomena": "SV", "significance": "W"},
    )


@pytest.fixture
def two_alerts(heat_advisory: AlertRecord, storm_warning: AlertRecord) -> list[AlertRecord]:
    return [heat_advisory, storm_warning]


@pytest.fixture
def mock_api_response() -> dict:  # type: ignore[type-arg]
    """Wunderground alerts API 정상 응답 mock (특보 1건)"""
    return {
        "response": {"version": "0.1"},
        "alerts": [
            {
                "type": "HEA",
                "description": "Heat Advisory",
                "date": "11:14 am CDT on July 3, 2012",
                "date_epoch": "1341332040",
                "expires": "7:00 AM CDT on July 07, 2012",
                "expires_epoch": "1341662400",
                "message": "\n...Heat advisory remains in effect...\n",
                "phenomena": "HT",
                "significance": "Y",
                "ZONES": [{"state": "UT", "ZONE": "001"}],
            },
        ],
    }


@pytest.fixture
def mock_api_error_response() -> dict:  # type: ignore[type-arg]
    """Wunderground 오류 응답 mock (잘못된 키)"""
    return {
        "response": {
            "version": "0.1",
            "error": {
                "type": "keynotfound",
                "description": "this key does not exist",
            },
        },
    }


@pytest.fixture
def make_source():
    """FakeAlertSource 생성 함수"""
    return FakeAlertSource
