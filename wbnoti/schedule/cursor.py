"""
Module: wbnoti/schedule/cursor.py

Provides ScheduleCursor, a forward-only pointer into the spawn table answering
"which spawn comes next?".
"""
from datetime import datetime, UTC

from wbnoti.errors import ScheduleExhaustedError
from wbnoti.utils import as_utc


class ScheduleCursor:
    """
    Remembers the index of the last occurrence known to be in the past so
    repeated lookups only scan forward from there. The index never moves
    backwards, which is only valid because wall-clock time does not either.

    Attributes:
        table (tuple[Occurrence]): The spawn table, shared and never modified.
        index (int): Last occurrence index known to be in the past.
    """
    def __init__(self, table):
        if not table:
            raise ValueError("ScheduleCursor needs a non-empty table")
        self.table = table
        self.index = 0

    def next(self, now=None):
        """
        Return the first occurrence spawning strictly after `now` (default: current time).

        Raises:
            ScheduleExhaustedError: every occurrence is at or before `now`.
        """
        now = as_utc(now) if now else datetime.now(UTC)
        for i in range(self.index, len(self.table)):
            occurrence = self.table[i]
            if occurrence.spawn_at > now:
                self.index = max(self.index, i - 1)
                return occurrence
        raise ScheduleExhaustedError(len(self.table), self.table[-1].spawn_at)
