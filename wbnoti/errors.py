"""
Module: wbnoti/errors.py

Exception types shared by the schedule, subscriber store, scheduler and dispatcher.
"""


class WBNotiError(Exception):
    """Base class for every error raised by wbnoti."""


class ParseError(WBNotiError):
    """
    The persisted subscriber document exists but cannot be decoded.

    Attributes:
        path: Location of the offending file, if known.
        reason (str): What was wrong with it.
    """
    def __init__(self, reason, path=None):
        self.reason = reason
        self.path = path
        where = f" in {path}" if path else ""
        super().__init__(f"Malformed subscriber data{where}: {reason}")


class StoreIOError(WBNotiError):
    """Reading or writing the subscriber file failed; nothing was changed."""


class SubscriberNotFoundError(WBNotiError, KeyError):
    def __init__(self, subscriber_id):
        self.subscriber_id = subscriber_id
        super().__init__(subscriber_id)

    def __str__(self):
        return f"Subscriber {self.subscriber_id} not found"


class DispatchError(WBNotiError):
    """
    A message could not be delivered to a subscriber. Never retried.
    """
    def __init__(self, subscriber_id, reason):
        self.subscriber_id = subscriber_id
        self.reason = reason
        super().__init__(f"Could not send to {subscriber_id}: {reason}")


class ScheduleExhaustedError(WBNotiError):
    """
    Every occurrence in the spawn table lies in the past. The table must be
    regenerated with a larger length; the scheduler cannot continue.
    """
    def __init__(self, length, last_spawn_at):
        self.length = length
        self.last_spawn_at = last_spawn_at
        super().__init__(
            f"Spawn schedule exhausted: all {length} occurrences are in the past "
            f"(last was {last_spawn_at.isoformat()})"
        )
