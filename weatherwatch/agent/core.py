"""기상 특보 에이전트 코어

예보 신호 분류 → 폴링 간격 선택 → 특보 조회 → 이벤트 발행 여부 결정.
상태 머신: (watch_alerts, have_alerts) 조합. on_receive는 watch 비트만,
on_check는 have 비트만 바꾼다. current_interval은 두 비트의 파생값이다.

코어는 메모리 사본을 갱신해 반환하며 저장/스케줄링/이벤트 전달은 호스트 몫이다.
스레드 안전하지 않다: 같은 에이전트에 대한 호출은 호스트가 직렬화해야 한다.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from weatherwatch.models.alerts import CheckOutcome, InboundSignal
from weatherwatch.models.config import AgentConfig
from weatherwatch.models.errors import (
    InvalidSignal,
    MissingLocation,
    NotReady,
    UpstreamFailure,
)
from weatherwatch.models.memory import AgentMemory
from weatherwatch.skills.base import AlertSource
from weatherwatch.skills.classifier import classify
from weatherwatch.skills.poller import select_interval

logger = logging.getLogger("weatherwatch.agent.core")


class AlertAgentCore:
    """적응형 폴링 특보 에이전트 코어"""

    __slots__ = ("_config", "_source", "_classify")

    def __init__(
        self,
        config: AgentConfig,
        source: AlertSource,
        classifier: Callable[[Optional[str]], bool] = classify,
    ) -> None:
        self._config = config
        self._source = source
        self._classify = classifier

    @property
    def config(self) -> AgentConfig:
        return self._config

    @property
    def source(self) -> AlertSource:
        return self._source

    # ── Readiness ──

    def is_ready(self, memory: AgentMemory) -> bool:
        """API 키와 위치가 모두 설정되어 있어야 조회 가능"""
        return self._config.has_api_key and memory.has_location

    # ── Receive ──

    def on_receive(self, signal: InboundSignal, memory: AgentMemory) -> AgentMemory:
        """예보 신호 반영 후 갱신된 메모리 반환

        발생 가능한 예외:
          InvalidSignal   - 위치/예보 모두 없음 (메모리 변경 없음)
          MissingLocation - 위치 미설정 (부분 갱신된 메모리를 exc.memory로 전달)
        """
        if signal.is_empty:
            raise InvalidSignal("위치와 예보가 모두 없는 신호입니다")

        updated = replace(memory)
        if signal.location and signal.location.strip():
            updated.location = signal.location.strip()

        # 이력과 OR 하지 않고 매 신호마다 덮어쓴다
        updated.watch_alerts = self._classify(signal.conditions)
        updated.current_interval = select_interval(
            updated.watch_alerts, updated.have_alerts, self._config,
        )

        logger.debug(
            "신호 반영: watch=%s interval=%.0fs (%s)",
            updated.watch_alerts, updated.current_interval, signal.summary(),
        )

        if not updated.has_location:
            raise MissingLocation("위치가 설정되지 않아 특보를 조회할 수 없습니다", updated)
        return updated

    # ── Check ──

    async def on_check(
        self,
        memory: AgentMemory,
        now: datetime,
        timeout: Optional[float] = None,
    ) -> CheckOutcome:
        """특보 조회 1회

        발생 가능한 예외:
          NotReady        - API 키 또는 위치 미설정 (조회 시도 없음)
          UpstreamFailure - 조회 실패/타임아웃 (메모리 변경 없음)
        """
        if not self._config.has_api_key:
            raise NotReady("api_key가 설정되지 않았습니다")
        if not memory.has_location:
            raise NotReady("location이 설정되지 않았습니다")

        assert self._config.api_key is not None
        assert memory.location is not None

        limit = self._config.request_timeout if timeout is None else timeout
        try:
            alerts = await asyncio.wait_for(
                self._source.fetch_alerts(self._config.api_key, memory.location),
                timeout=limit,
            )
        except asyncio.TimeoutError as e:
            raise UpstreamFailure(f"특보 조회 타임아웃 ({limit:.0f}s)") from e
        except Exception as e:
            raise UpstreamFailure(f"특보 조회 실패: {e}") from e

        updated = replace(memory)
        updated.have_alerts = bool(alerts)
        updated.current_interval = select_interval(
            updated.watch_alerts, updated.have_alerts, self._config,
        )

        return CheckOutcome(
            emitted=updated.have_alerts,
            memory=updated,
            checked_at=now,
            payload=tuple(alerts),
        )

    # ── Working ──

    def event_created_within(
        self,
        last_event_at: Optional[datetime],
        now: datetime,
    ) -> bool:
        """expected_update_period 안에 이벤트가 생성되었는지"""
        if last_event_at is None:
            return False
        elapsed = (now - last_event_at).total_seconds()
        return elapsed <= self._config.expected_update_period

    @staticmethod
    def working(recent_event_within_period: bool, recent_errors: bool) -> bool:
        return recent_event_within_period and not recent_errors
