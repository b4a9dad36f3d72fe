"""
Shared fixtures: a small spawn table, a store in a temp directory and a
dispatcher that records messages instead of talking to Discord.
"""
from datetime import timedelta

import pytest

from wbnoti.errors import DispatchError
from wbnoti.dispatcher import Dispatcher
from wbnoti.schedule import ScheduleCursor, generate_schedule
from wbnoti.scheduler import NotificationScheduler
from wbnoti.store import SubscriberStore


class RecordingDispatcher(Dispatcher):
    """Collects (subscriber_id, text) pairs; raises DispatchError when `fail` is set."""

    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    async def send(self, subscriber_id, text):
        if self.fail:
            raise DispatchError(subscriber_id, "channel unavailable")
        self.sent.append((subscriber_id, text))


@pytest.fixture
def table():
    return generate_schedule(60)


@pytest.fixture
def store(tmp_path):
    return SubscriberStore(tmp_path / "subscribers.json")


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def scheduler(store, table, dispatcher):
    return NotificationScheduler(
        store, ScheduleCursor(table), dispatcher, tick_slack=timedelta(seconds=45)
    )


@pytest.fixture
def failing_dispatcher():
    return RecordingDispatcher(fail=True)
