"""
Module: wbnoti/schedule/patterns.py

Fixed constants describing the World Boss rotation: who spawns, how far apart,
and in which daily UTC windows a spawn may land.
"""
from datetime import datetime, timedelta, UTC

BOSS_NAMES = {
    1: "Wandering Death",
    2: "Avarice",
    3: "Ashava",
}

# Boss code for each of the first 50 occurrences (index 0 is the anchor).
SPAWN_PATTERN = (
    1, 3, 3, 2, 2, 1, 1, 1, 3, 3, 2, 2, 2, 1, 1,
    1, 3, 3, 2, 2, 1, 1, 1, 3, 3, 2, 2, 2, 1, 1,
    1, 3, 3, 2, 2, 1, 1, 1, 3, 3, 2, 2, 2, 1, 1,
    1, 3, 3, 2, 2,
)

# Past the explicit pattern, occurrence i reuses the boss of occurrence i - REPEAT_DISTANCE.
REPEAT_DISTANCE = 30

# Minutes between consecutive spawns, cycled.
INTERVAL_MINUTES = (353, 353.49, 325.71, 353.49, 325.22)

ANCHOR_NAME = BOSS_NAMES[1]
ANCHOR_SPAWN_AT = datetime(2023, 6, 11, 6, 0, tzinfo=UTC)

# (start, end) offsets from UTC midnight. The last one runs past midnight.
SPAWN_WINDOWS = (
    (timedelta(hours=4, minutes=30), timedelta(hours=6, minutes=30)),
    (timedelta(hours=10, minutes=30), timedelta(hours=12, minutes=30)),
    (timedelta(hours=16, minutes=30), timedelta(hours=18, minutes=30)),
    (timedelta(hours=22, minutes=30), timedelta(hours=24, minutes=30)),
)

SNAP_SHIFT = timedelta(hours=2)

DEFAULT_LENGTH = 1000
