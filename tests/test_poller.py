"""폴링 간격 선택 스킬 테스트"""

import pytest

from weatherwatch.models.config import AgentConfig
from weatherwatch.skills.poller import parse_schedule, select_interval


@pytest.fixture
def cfg() -> AgentConfig:
    return AgentConfig(default_interval=1800.0, alerted_interval=600.0)


class TestSelectInterval:
    def test_calm_uses_default(self, cfg):
        assert select_interval(False, False, cfg) == cfg.default_interval

    @pytest.mark.parametrize(
        "watch, have",
        [(True, False), (False, True), (True, True)],
    )
    def test_any_flag_uses_alerted(self, cfg, watch, have):
        assert select_interval(watch, have, cfg) == cfg.alerted_interval


class TestParseSchedule:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("every_1m", 60.0),
            ("every_10m", 600.0),
            ("every_30m", 1800.0),
            ("every_1h", 3600.0),
            ("every_12h", 43200.0),
            ("every_1d", 86400.0),
            ("every_30s", 30.0),
            ("  EVERY_5M ", 300.0),
            ("90", 90.0),
            (120, 120.0),
            (2.5, 2.5),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_schedule(value) == expected

    @pytest.mark.parametrize(
        "value",
        ["midnight", "every_m", "every_5w", "", "0", -1, True, "nan", "inf", "-inf", float("nan")],
    )
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_schedule(value)
