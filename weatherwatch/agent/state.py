"""특보 에이전트 상태 머신

상태 = (watch_alerts, have_alerts) 조합. 터미널 상태 없음.
on_receive는 watch 비트만, on_check는 have 비트만 바꿀 수 있다.
"""

from __future__ import annotations

from enum import Enum

from weatherwatch.models.memory import AgentMemory


class AlertState(Enum):
    # (watch_alerts, have_alerts)
    CALM = (False, False)
    ALERTED = (False, True)
    WATCHING = (True, False)
    SEVERE = (True, True)

    @property
    def watch_alerts(self) -> bool:
        return self.value[0]

    @property
    def have_alerts(self) -> bool:
        return self.value[1]

    @property
    def on_alert(self) -> bool:
        return self.watch_alerts or self.have_alerts


class Trigger(Enum):
    RECEIVE = "on_receive"
    CHECK = "on_check"


def state_of(memory: AgentMemory) -> AlertState:
    return AlertState((memory.watch_alerts, memory.have_alerts))


def validate_transition(
    current: AlertState,
    target: AlertState,
    trigger: Trigger,
) -> bool:
    """상태 전이가 유효한지 검증 (제자리 전이는 항상 허용)"""
    if trigger is Trigger.RECEIVE:
        return current.have_alerts == target.have_alerts
    return current.watch_alerts == target.watch_alerts
