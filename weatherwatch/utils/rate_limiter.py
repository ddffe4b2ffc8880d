"""토큰 버킷 기반 레이트 리미터

특보 제공자의 API 호출 한도(분당 요청 수)를 넘지 않도록 조회 속도를 제한한다.
"""

from __future__ import annotations

import asyncio
from time import monotonic


class TokenBucketRateLimiter:
    """토큰 버킷 레이트 리미터

    Args:
        rate: 초당 허용 요청 수 (기본 10/60 = 분당 10회)
        burst: 버스트 허용 수 (기본 1)
    """

    __slots__ = ("_rate", "_burst", "_tokens", "_last_refill")

    def __init__(
        self,
        rate: float = 10.0 / 60.0,
        burst: int = 1,
    ) -> None:
        if rate <= 0:
            raise ValueError("rate는 0보다 커야 합니다")
        self._rate = rate
        self._burst = max(burst, 1)
        self._tokens = float(self._burst)
        self._last_refill = monotonic()

    @classmethod
    def per_minute(cls, requests: float, burst: int = 1) -> TokenBucketRateLimiter:
        """분당 요청 수로 생성 (Wunderground 무료 키: 분당 10회)"""
        return cls(rate=requests / 60.0, burst=burst)

    @property
    def available_tokens(self) -> float:
        self._refill()
        return self._tokens

    def _refill(self) -> None:
        now = monotonic()
        gained = (now - self._last_refill) * self._rate
        self._tokens = min(float(self._burst), self._tokens + gained)
        self._last_refill = now

    def _delay(self) -> float:
        """토큰 1개가 찰 때까지 남은 시간 (초)"""
        return max(1.0 - self._tokens, 0.0) / self._rate

    async def acquire(self) -> float:
        """토큰 1개 소비. 대기한 시간(초)을 반환."""
        waited = 0.0
        self._refill()
        while self._tokens < 1.0:
            delay = self._delay()
            await asyncio.sleep(delay)
            waited += delay
            self._refill()
        self._tokens -= 1.0
        return waited
