"""알림 스킬 테스트"""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from weatherwatch.skills.notifier import NotificationPayload, NotifierSkill, build_payload


class TestNotifierSkill:
    @pytest.mark.asyncio
    async def test_no_notification_when_no_alerts(self):
        notifier = NotifierSkill(methods=["desktop"])
        with patch.object(
            NotifierSkill, "_desktop_notify", new_callable=AsyncMock
        ) as mock_desktop:
            await notifier.emit("a1", [])
            mock_desktop.assert_not_called()

    @pytest.mark.asyncio
    async def test_sound_method_registered(self, two_alerts):
        notifier = NotifierSkill(methods=["sound"])
        with patch.object(
            NotifierSkill, "_sound_notify", new_callable=AsyncMock
        ) as mock_sound:
            await notifier.emit("a1", two_alerts)
            mock_sound.assert_called_once()

    @pytest.mark.asyncio
    async def test_desktop_method_registered(self, two_alerts):
        notifier = NotifierSkill(methods=["desktop"])
        with patch.object(
            NotifierSkill, "_desktop_notify", new_callable=AsyncMock
        ) as mock_desktop:
            await notifier.emit("a1", two_alerts)
            mock_desktop.assert_called_once()
            payload = mock_desktop.call_args.args[0]
            assert "특보 2건" in payload.alert_info

    @pytest.mark.asyncio
    async def test_log_channel(self, two_alerts, caplog):
        notifier = NotifierSkill(methods=["log"])
        with caplog.at_level(logging.WARNING, logger="weatherwatch.skill.notifier"):
            await notifier.emit("a1", two_alerts)
        assert "Heat Advisory" in caplog.text

    @pytest.mark.asyncio
    async def test_webhook_skipped_without_url(self, two_alerts):
        notifier = NotifierSkill(methods=["webhook"], webhook_url="")
        # URL이 없으면 조용히 건너뜀
        await notifier.emit("a1", two_alerts)

    @pytest.mark.asyncio
    async def test_webhook_posts_alert_fields(self, two_alerts):
        notifier = NotifierSkill(methods=["webhook"], webhook_url="https://hooks.example.com/x")
        with patch("weatherwatch.skills.notifier.aiohttp.ClientSession") as mock_cls:
            session = mock_cls.return_value.__aenter__.return_value
            session.post = MagicMock()
            await notifier.emit("a1", two_alerts)

        url = session.post.call_args.args[0]
        body = session.post.call_args.kwargs["json"]
        assert url == "https://hooks.example.com/x"
        assert body["agent_id"] == "a1"
        assert [a["alert_type"] for a in body["alerts"]] == ["HEA", "WRN"]
        assert body["alerts"][0]["phenomena"] == "HT"
        assert body["alerts"][0]["expires_at"] == "2012-07-07T12:00:00+00:00"
        assert "특보 2건" in body["text"]

    @pytest.mark.asyncio
    async def test_one_channel_failure_isolated(self, two_alerts):
        notifier = NotifierSkill(methods=["desktop", "sound"])
        with patch.object(
            NotifierSkill, "_desktop_notify",
            new_callable=AsyncMock, side_effect=OSError("notify-send 없음"),
        ), patch.object(
            NotifierSkill, "_sound_notify", new_callable=AsyncMock
        ) as mock_sound:
            await notifier.emit("a1", two_alerts)
            mock_sound.assert_called_once()

    @pytest.mark.asyncio
    async def test_all_channels_failed_raises(self, two_alerts):
        notifier = NotifierSkill(methods=["desktop"])
        with patch.object(
            NotifierSkill, "_desktop_notify",
            new_callable=AsyncMock, side_effect=OSError("notify-send 없음"),
        ):
            with pytest.raises(RuntimeError, match="모든 알림 채널 실패"):
                await notifier.emit("a1", two_alerts)

    def test_methods_copy(self):
        notifier = NotifierSkill(methods=["log", "sound"])
        notifier.methods.append("desktop")
        assert notifier.methods == ["log", "sound"]


class TestBuildPayload:
    def test_summary(self, two_alerts):
        p = build_payload("a1", two_alerts)
        assert p.alert_info == "[a1] 특보 2건"
        assert "Heat Advisory (~07/07 12:00)" in p.message
        assert "Severe Thunderstorm Warning" in p.message

    def test_at_most_five(self, heat_advisory):
        p = build_payload("a1", [heat_advisory] * 8)
        assert p.alert_info == "[a1] 특보 8건"
        assert p.message.count("Heat Advisory") == 5


class TestNotificationPayload:
    def test_payload_creation(self):
        p = NotificationPayload(
            title="테스트",
            message="메시지",
            alert_info="특보 1건",
        )
        assert p.title == "테스트"
        assert p.urgency == "high"
