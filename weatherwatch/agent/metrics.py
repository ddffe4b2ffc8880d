"""에이전트 런타임 메트릭 수집"""

from __future__ import annotations

from datetime import datetime, timedelta
from time import monotonic
from typing import Optional

# 마지막 이벤트 직전 이 시간 안의 오류도 "최근 오류"로 본다
ERROR_GRACE = timedelta(minutes=2)


class AgentMetrics:
    """런타임 메트릭 수집"""

    __slots__ = (
        "total_checks", "successful_checks", "failed_checks",
        "skipped_checks", "signals_received", "events_emitted",
        "notifications_sent", "last_event_at", "last_error_at",
        "_response_times", "_start_time",
    )

    def __init__(self) -> None:
        self.total_checks: int = 0
        self.successful_checks: int = 0
        self.failed_checks: int = 0
        self.skipped_checks: int = 0
        self.signals_received: int = 0
        self.events_emitted: int = 0
        self.notifications_sent: int = 0
        self.last_event_at: Optional[datetime] = None
        self.last_error_at: Optional[datetime] = None
        self._response_times: list[float] = []
        self._start_time: float = monotonic()

    @property
    def avg_response_time_ms(self) -> float:
        if not self._response_times:
            return 0.0
        return sum(self._response_times) / len(self._response_times)

    @property
    def session_duration_s(self) -> float:
        return monotonic() - self._start_time

    def record_check(self, success: bool, elapsed_ms: float) -> None:
        self.total_checks += 1
        if success:
            self.successful_checks += 1
        else:
            self.failed_checks += 1
        self._response_times.append(elapsed_ms)
        # 최근 100개만 유지
        if len(self._response_times) > 100:
            self._response_times = self._response_times[-50:]

    def record_skip(self) -> None:
        self.skipped_checks += 1

    def record_signal(self) -> None:
        self.signals_received += 1

    def record_event(self, at: datetime) -> None:
        self.events_emitted += 1
        self.last_event_at = at

    def record_notification(self) -> None:
        self.notifications_sent += 1

    def record_error(self, at: datetime) -> None:
        self.last_error_at = at

    def recent_errors(self) -> bool:
        """마지막 이벤트 무렵 또는 그 이후에 오류가 기록되었는지"""
        if self.last_error_at is None or self.last_event_at is None:
            return False
        return self.last_error_at > self.last_event_at - ERROR_GRACE

    def summary(self) -> str:
        duration = self.session_duration_s
        success_rate = (
            self.successful_checks / max(self.total_checks, 1) * 100
        )
        last_event = (
            self.last_event_at.isoformat(timespec="seconds")
            if self.last_event_at else "-"
        )
        return (
            f"=== 세션 요약 ===\n"
            f"  경과 시간: {duration / 60:.1f}분\n"
            f"  총 조회: {self.total_checks}회 "
            f"(성공률: {success_rate:.1f}%, 건너뜀: {self.skipped_checks}회)\n"
            f"  수신 신호: {self.signals_received}건\n"
            f"  특보 이벤트: {self.events_emitted}회 (마지막: {last_event})\n"
            f"  알림 발송: {self.notifications_sent}회\n"
            f"  평균 응답: {self.avg_response_time_ms:.0f}ms"
        )
