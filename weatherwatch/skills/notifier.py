"""알림 스킬: Log / Desktop / Sound / Webhook

특보 이벤트를 다채널로 병렬 발송한다. 개별 채널 실패는 격리된다.
"""

from __future__ import annotations

import asyncio
import logging
import platform
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence

import aiohttp

from weatherwatch.models.alerts import AlertRecord
from weatherwatch.skills.base import EventSink

logger = logging.getLogger("weatherwatch.skill.notifier")

SUPPORTED_METHODS = ("log", "desktop", "sound", "webhook")


@dataclass(frozen=True, slots=True)
class NotificationPayload:
    """알림 페이로드"""

    title: str
    message: str
    alert_info: str
    urgency: str = "high"


def build_payload(agent_id: str, alerts: Sequence[AlertRecord]) -> NotificationPayload:
    """특보 목록 → 알림 페이로드 (최대 5건, 건당 짧은 메시지)"""
    lines: list[str] = []
    for a in alerts[:5]:
        head = a.description or a.alert_type
        if a.expires_short:
            head += f" (~{a.expires_short})"
        lines.append(f"  {head}")
        short = a.short_message()
        if short:
            lines.append(f"    {short.splitlines()[0]}")

    return NotificationPayload(
        title="기상 특보 발령!",
        message="\n".join(lines),
        alert_info=f"[{agent_id}] 특보 {len(alerts)}건",
    )


class NotifierSkill(EventSink):
    """다채널 알림 스킬"""

    __slots__ = ("_methods", "_webhook_url")

    def __init__(
        self,
        methods: Optional[list[str]] = None,
        webhook_url: str = "",
    ) -> None:
        self._methods = methods or ["log"]
        self._webhook_url = webhook_url

    @property
    def methods(self) -> list[str]:
        return list(self._methods)

    async def emit(self, agent_id: str, payload: Sequence[AlertRecord]) -> None:
        """특보 이벤트를 알림으로 발송. 특보가 없으면 아무것도 하지 않는다."""
        if not payload:
            return

        notification = build_payload(agent_id, payload)

        tasks: list[asyncio.Task[None]] = []
        for method in self._methods:
            if method == "log":
                self._log_notify(notification)
            elif method == "desktop":
                tasks.append(
                    asyncio.ensure_future(self._desktop_notify(notification))
                )
            elif method == "sound":
                tasks.append(
                    asyncio.ensure_future(self._sound_notify())
                )
            elif method == "webhook":
                tasks.append(
                    asyncio.ensure_future(
                        self._webhook_notify(notification, self._webhook_url, agent_id, payload)
                    )
                )
            else:
                logger.warning("지원하지 않는 알림 방법: %s", method)

        if not tasks:
            return

        results = await asyncio.gather(*tasks, return_exceptions=True)
        failures = [r for r in results if isinstance(r, Exception)]
        for err in failures:
            logger.warning("알림 채널 실패: %s", err)
        if failures and len(failures) == len(tasks):
            raise RuntimeError(f"모든 알림 채널 실패 ({len(failures)}개)")

    @staticmethod
    def _log_notify(payload: NotificationPayload) -> None:
        logger.warning("%s %s\n%s", payload.title, payload.alert_info, payload.message)

    @staticmethod
    async def _desktop_notify(payload: NotificationPayload) -> None:
        """OS 데스크톱 알림"""
        system = platform.system()

        if system == "Windows":
            msg = payload.message.replace('"', '`"')[:150]
            subprocess.Popen(  # noqa: S603
                [
                    "powershell", "-Command",
                    '[System.Reflection.Assembly]::LoadWithPartialName'
                    '("System.Windows.Forms") | Out-Null; '
                    "$n=New-Object System.Windows.Forms.NotifyIcon; "
                    "$n.Icon=[System.Drawing.SystemIcons]::Warning; "
                    "$n.Visible=$true; "
                    f'$n.ShowBalloonTip(5000,"{payload.title}","{msg}",'
                    "[System.Windows.Forms.ToolTipIcon]::Warning)",
                ],
                creationflags=0x08000000,
            )

        elif system == "Darwin":
            msg = payload.message.replace('"', "'")[:150]
            subprocess.Popen(  # noqa: S603
                [
                    "osascript", "-e",
                    f'display notification "{msg}" '
                    f'with title "{payload.title}" sound name "Glass"',
                ],
            )

        elif system == "Linux":
            subprocess.Popen(  # noqa: S603
                [
                    "notify-send", payload.title,
                    payload.message[:200],
                    "-u", "critical",
                ],
            )

    @staticmethod
    async def _sound_notify() -> None:
        """알림음 재생"""
        print("\a" * 3, end="", flush=True)

    @staticmethod
    async def _webhook_notify(
        payload: NotificationPayload,
        webhook_url: str,
        agent_id: str = "",
        alerts: Sequence[AlertRecord] = (),
    ) -> None:
        """Webhook 알림 (Slack/Discord). 원본 특보 필드는 alerts 배열로 함께 보낸다."""
        if not webhook_url:
            return

        async with aiohttp.ClientSession() as session:
            async with session.post(
                webhook_url,
                json={
                    "text": f"*{payload.title}* {payload.alert_info}\n{payload.message}",
                    "agent_id": agent_id,
                    "alerts": [a.to_payload() for a in alerts],
                },
                timeout=aiohttp.ClientTimeout(total=10),
            ) as resp:
                resp.raise_for_status()
