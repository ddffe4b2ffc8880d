"""데이터 모델 테스트"""

import pytest

from weatherwatch.models.alerts import AlertRecord, InboundSignal
from weatherwatch.models.config import AgentConfig
from weatherwatch.models.memory import AgentMemory


class TestAgentConfig:
    @pytest.mark.parametrize("key", [None, "", "-empty-", "your-key", "  "])
    def test_unset_api_keys(self, key):
        assert AgentConfig(api_key=key).has_api_key is False

    def test_real_api_key(self):
        assert AgentConfig(api_key="abc123").has_api_key is True

    def test_frozen(self):
        config = AgentConfig()
        with pytest.raises(AttributeError):
            config.api_key = "x"  # type: ignore[misc]


class TestAgentMemory:
    def test_initial_defaults(self):
        config = AgentConfig(default_interval=900.0)
        memory = AgentMemory.initial(config)
        assert memory.location is None
        assert memory.watch_alerts is False
        assert memory.have_alerts is False
        assert memory.current_interval == 900.0

    def test_initial_location_seeded(self):
        memory = AgentMemory.initial(AgentConfig(initial_location="94103"))
        assert memory.location == "94103"
        assert memory.has_location

    def test_dict_round_trip(self):
        config = AgentConfig()
        memory = AgentMemory(current_interval=600.0, location="94103", watch_alerts=True)
        assert AgentMemory.from_dict(memory.to_dict(), config) == memory

    def test_from_partial_dict(self):
        config = AgentConfig(default_interval=1200.0)
        memory = AgentMemory.from_dict({"location": "10001"}, config)
        assert memory.current_interval == 1200.0
        assert memory.watch_alerts is False


class TestAlertRecord:
    def test_expires_short(self, heat_advisory):
        assert heat_advisory.expires_short == "07/07 12:00"

    def test_expires_short_missing(self):
        assert AlertRecord("HEA", "Heat", "msg").expires_short == ""

    def test_short_message_cleanup(self, heat_advisory):
        msg = heat_advisory.short_message()
        assert msg.startswith("Heat advisory remains in effect until 7 am CDT Saturday\n")
        assert "..." not in msg
        assert len(msg) <= 140

    def test_short_message_limit(self):
        record = AlertRecord("HEA", "Heat", "x" * 500)
        assert len(record.short_message()) == 140
        assert len(record.short_message(limit=20)) == 20

    def test_payload_renames_type(self, heat_advisory):
        payload = heat_advisory.to_payload()
        assert payload["alert_type"] == "HEA"
        assert "type" not in payload
        assert payload["phenomena"] == "HT"
        assert payload["expires_at"] == "2012-07-07T12:00:00+00:00"


class TestInboundSignal:
    def test_empty(self):
        assert InboundSignal().is_empty
        assert InboundSignal(location="", conditions="").is_empty

    def test_partial(self):
        assert not InboundSignal(conditions="Hail").is_empty
        assert not InboundSignal(location="94103").is_empty

