"""기상 특보 조회 스킬

Wunderground alerts API로 위치의 현재 특보를 조회한다.
API: api.wunderground.com/api/{key}/alerts/q/{location}.json
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, ClassVar, Optional
from urllib.parse import quote

import aiohttp

from weatherwatch.models.alerts import AlertRecord
from weatherwatch.skills.base import AlertSource

logger = logging.getLogger("weatherwatch.skill.alert_source")

# 레코드 본문으로 옮기는 필드 (나머지는 extra로 그대로 전달)
_CORE_FIELDS = frozenset({"type", "description", "message", "expires_epoch"})


class WundergroundAlertSource(AlertSource):
    """Wunderground 특보 조회 스킬"""

    _session: ClassVar[Optional[aiohttp.ClientSession]] = None

    BASE_URL: ClassVar[str] = "https://api.wunderground.com/api"

    HEADERS: ClassVar[dict[str, str]] = {
        "User-Agent": "weatherwatch/1.0",
        "Accept": "application/json",
    }

    def __init__(
        self,
        request_timeout: float = 15.0,
        connect_timeout: float = 5.0,
        max_connections: int = 3,
    ) -> None:
        self._request_timeout = request_timeout
        self._connect_timeout = connect_timeout
        self._max_connections = max_connections

    @property
    def name(self) -> str:
        return "wunderground"

    @classmethod
    async def _get_session(
        cls,
        request_timeout: float = 15.0,
        connect_timeout: float = 5.0,
        max_connections: int = 3,
    ) -> aiohttp.ClientSession:
        if cls._session is None or cls._session.closed:
            timeout = aiohttp.ClientTimeout(
                total=request_timeout,
                connect=connect_timeout,
            )
            connector = aiohttp.TCPConnector(
                limit=max_connections,
                ttl_dns_cache=300,
                enable_cleanup_closed=True,
            )
            cls._session = aiohttp.ClientSession(
                timeout=timeout,
                connector=connector,
                headers=cls.HEADERS,
            )
        return cls._session

    async def close(self) -> None:
        cls = type(self)
        if cls._session and not cls._session.closed:
            await cls._session.close()
            cls._session = None

    def build_url(self, api_key: str, location: str) -> str:
        return (
            f"{self.BASE_URL}/{quote(api_key, safe='')}"
            f"/alerts/q/{quote(location.strip(), safe='/:,')}.json"
        )

    async def fetch_alerts(self, api_key: str, location: str) -> list[AlertRecord]:
        """특보 조회 실행"""
        session = await self._get_session(
            self._request_timeout,
            self._connect_timeout,
            self._max_connections,
        )
        url = self.build_url(api_key, location)

        async with session.get(url) as resp:
            resp.raise_for_status()
            data = await resp.json(content_type=None)

        if not isinstance(data, dict):
            raise ValueError(f"예상하지 못한 응답 형식: {type(data).__name__}")

        _raise_for_api_error(data)
        alerts = self._parse_alerts(data)
        logger.debug("특보 %d건 수신 (%s)", len(alerts), location)
        return alerts

    @staticmethod
    def _parse_alerts(data: dict[str, Any]) -> list[AlertRecord]:
        """응답의 alerts 배열 → AlertRecord 목록"""
        records: list[AlertRecord] = []
        for item in data.get("alerts") or []:
            if not isinstance(item, dict):
                continue
            records.append(AlertRecord(
                alert_type=str(item.get("type", "")),
                description=str(item.get("description", "")),
                message=str(item.get("message", "")),
                expires_at=_parse_epoch(item.get("expires_epoch")),
                extra={k: v for k, v in item.items() if k not in _CORE_FIELDS},
            ))
        return records


def _raise_for_api_error(data: dict[str, Any]) -> None:
    """응답 본문의 response.error → RuntimeError"""
    error = (data.get("response") or {}).get("error")
    if not error:
        return
    err_type = error.get("type", "unknown")
    description = error.get("description", "")
    raise RuntimeError(f"API 오류 [{err_type}]: {description}")


def _parse_epoch(value: Any) -> Optional[datetime]:
    """'1341662400' 같은 epoch 문자열 → UTC datetime. 해석 불가면 None."""
    if value in (None, ""):
        return None
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return None
