"""
Module: wbnoti/schedule/generator.py

Builds the World Boss spawn table from the rotation constants in
`wbnoti.schedule.patterns`. Generation is pure: the same arguments always
produce an identical table.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta

from wbnoti.schedule.patterns import (
    ANCHOR_NAME,
    ANCHOR_SPAWN_AT,
    BOSS_NAMES,
    DEFAULT_LENGTH,
    INTERVAL_MINUTES,
    REPEAT_DISTANCE,
    SNAP_SHIFT,
    SPAWN_PATTERN,
    SPAWN_WINDOWS,
)

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class Occurrence:
    """
    One predicted spawn.

    Attributes:
        label (str): Boss name.
        spawn_at (datetime): Spawn time, aware UTC.
    """
    label: str
    spawn_at: datetime


def in_spawn_window(t):
    """
    Return True if `t` lies in one of the daily spawn windows of its own UTC day.

    Windows are half-open. The window that wraps past midnight is checked
    against 00:30 of the same day rather than the next one, which makes it
    close at midnight: times in [00:00, 00:30) are not inside any window.
    """
    midnight = t.replace(hour=0, minute=0, second=0, microsecond=0)
    for start, end in SPAWN_WINDOWS:
        lower = midnight + start
        if end > ONE_DAY:
            if t >= lower and t >= midnight + (end - ONE_DAY):
                return True
        elif lower <= t < midnight + end:
            return True
    return False


def snap_to_window(candidate):
    """Keep `candidate` if it is inside a spawn window, otherwise push it back by two hours."""
    if in_spawn_window(candidate):
        return candidate
    return candidate + SNAP_SHIFT


def generate_schedule(
    length=DEFAULT_LENGTH,
    anchor=None,
    pattern=SPAWN_PATTERN,
    names=BOSS_NAMES,
    intervals=INTERVAL_MINUTES,
    repeat_distance=REPEAT_DISTANCE,
):
    """
    Generate `length` consecutive occurrences starting from the anchor spawn.

    Args:
        length (int): Number of occurrences, at least 1.
        anchor (Occurrence, optional): First occurrence. Defaults to the first
            ever World Boss spawn.
        pattern (tuple[int]): Boss codes for the first occurrences.
        names (dict[int, str]): Boss code to name.
        intervals (tuple[float]): Minutes between spawns, cycled.
        repeat_distance (int): How far back to look once `pattern` runs out.

    Returns:
        tuple[Occurrence, ...] ordered by spawn time.
    """
    if length < 1:
        raise ValueError(f"Schedule length must be positive, got {length}")
    if repeat_distance < 1 or repeat_distance > len(pattern):
        raise ValueError(f"Repeat distance {repeat_distance} does not fit a pattern of {len(pattern)}")

    table = [anchor or Occurrence(ANCHOR_NAME, ANCHOR_SPAWN_AT)]
    for i in range(1, length):
        step = timedelta(minutes=intervals[(i - 1) % len(intervals)])
        spawn_at = snap_to_window(table[i - 1].spawn_at + step)
        if i < len(pattern):
            label = names[pattern[i]]
        else:
            label = table[i - repeat_distance].label
        table.append(Occurrence(label, spawn_at))
    return tuple(table)
