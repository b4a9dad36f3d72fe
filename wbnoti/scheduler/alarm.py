"""
Module: wbnoti/scheduler/alarm.py

Decides, for one subscriber and the upcoming spawn, whether an alarm must be armed now.
"""
from datetime import timedelta
from enum import Enum
from typing import NamedTuple, Optional


class AlarmState(Enum):
    IDLE = "idle"            # alarm disabled
    NOT_DUE = "not_due"      # spawn is further away than lead + slack
    NOTIFIED = "notified"    # already armed for this spawn
    DUE = "due"              # arm now


class AlarmDecision(NamedTuple):
    state: AlarmState
    delay: Optional[timedelta] = None


def evaluate_alarm(record, occurrence, now, tick_slack):
    """
    Classify `record` against `occurrence` at time `now`.

    The alarm is due once the time left before the spawn drops below the lead
    time plus `tick_slack`, so a tick that runs slightly late still arms it.
    For a due alarm, `delay` is how long to wait before sending: the time left
    minus the lead time, or zero if the lead time has already been passed.
    """
    if record.alarm_lead_minutes <= 0:
        return AlarmDecision(AlarmState.IDLE)

    lead = timedelta(minutes=record.alarm_lead_minutes)
    remaining = occurrence.spawn_at - now
    if remaining >= lead + tick_slack:
        return AlarmDecision(AlarmState.NOT_DUE)
    if record.last_notified_spawn_at == occurrence.spawn_at:
        return AlarmDecision(AlarmState.NOTIFIED)
    return AlarmDecision(AlarmState.DUE, max(remaining - lead, timedelta(0)))
