"""
Tests for alarm evaluation, NotificationScheduler ticks and NotificationTask delivery.
Run with: pytest tests/test_scheduler.py
"""
import asyncio
from datetime import timedelta

import pytest

from wbnoti.errors import ScheduleExhaustedError
from wbnoti.messages import format_alarm
from wbnoti.schedule import ScheduleCursor
from wbnoti.scheduler import AlarmState, NotificationScheduler, evaluate_alarm
from wbnoti.store import NEVER, SubscriberRecord, SubscriberStore

SLACK = timedelta(seconds=45)


def before(occurrence, **kwargs):
    return occurrence.spawn_at - timedelta(**kwargs)


# --- evaluate_alarm ----------------------------------------------------------

def test_disabled_alarm_is_idle(table):
    record = SubscriberRecord(id="1")
    decision = evaluate_alarm(record, table[5], before(table[5], minutes=1), SLACK)
    assert decision.state is AlarmState.IDLE


def test_alarm_not_due_outside_lead_plus_slack(table):
    record = SubscriberRecord(id="1", alarm_lead_minutes=10)
    decision = evaluate_alarm(record, table[5], before(table[5], minutes=46), SLACK)
    assert decision.state is AlarmState.NOT_DUE


def test_alarm_not_due_exactly_at_lead_plus_slack(table):
    record = SubscriberRecord(id="1", alarm_lead_minutes=10)
    decision = evaluate_alarm(record, table[5], before(table[5], minutes=10, seconds=45), SLACK)
    assert decision.state is AlarmState.NOT_DUE


def test_alarm_due_inside_slack(table):
    record = SubscriberRecord(id="1", alarm_lead_minutes=10)
    decision = evaluate_alarm(record, table[5], before(table[5], minutes=10, seconds=30), SLACK)
    assert decision.state is AlarmState.DUE
    assert decision.delay == timedelta(seconds=30)


def test_alarm_due_delay_is_remaining_minus_lead(table):
    record = SubscriberRecord(id="1", alarm_lead_minutes=40)
    decision = evaluate_alarm(record, table[5], before(table[5], minutes=40, seconds=20), SLACK)
    assert decision.delay == timedelta(seconds=20)


def test_alarm_past_lead_fires_immediately(table):
    record = SubscriberRecord(id="1", alarm_lead_minutes=30)
    decision = evaluate_alarm(record, table[5], before(table[5], minutes=5), SLACK)
    assert decision.state is AlarmState.DUE
    assert decision.delay == timedelta(0)


def test_already_notified(table):
    record = SubscriberRecord(id="1", alarm_lead_minutes=10, last_notified_spawn_at=table[5].spawn_at)
    decision = evaluate_alarm(record, table[5], before(table[5], minutes=10, seconds=30), SLACK)
    assert decision.state is AlarmState.NOTIFIED


# --- tick --------------------------------------------------------------------

@pytest.mark.asyncio
async def test_tick_arms_due_alarm(scheduler, store, table):
    await store.set_alarm_lead("1", 10)
    armed = await scheduler.tick(before(table[5], minutes=10, seconds=30))

    assert len(armed) == 1
    assert armed[0].subscriber_id == "1"
    assert armed[0].occurrence == table[5]
    assert armed[0].delay == timedelta(seconds=30)
    assert scheduler.pending_alarms("1") == [table[5].spawn_at]
    assert (await store.get("1")).last_notified_spawn_at == table[5].spawn_at
    await scheduler.stop()


@pytest.mark.asyncio
async def test_tick_does_not_arm_when_far_away(scheduler, store, table):
    await store.set_alarm_lead("1", 10)
    armed = await scheduler.tick(before(table[5], minutes=46))
    assert armed == []
    assert (await store.get("1")).last_notified_spawn_at == NEVER


@pytest.mark.asyncio
async def test_tick_skips_disabled_subscribers(scheduler, store, table):
    await store.get_or_create("1")
    assert await scheduler.tick(before(table[5], minutes=1)) == []


@pytest.mark.asyncio
async def test_tick_dedups_already_notified(scheduler, store, table):
    await store.upsert(SubscriberRecord(id="1", alarm_lead_minutes=10, last_notified_spawn_at=table[5].spawn_at))
    assert await scheduler.tick(before(table[5], minutes=10, seconds=30)) == []
    assert scheduler.tasks == {}


@pytest.mark.asyncio
async def test_consecutive_ticks_arm_once(scheduler, store, table):
    await store.set_alarm_lead("1", 10)
    first = await scheduler.tick(before(table[5], minutes=10, seconds=40))
    second = await scheduler.tick(before(table[5], minutes=10, seconds=10))
    assert len(first) == 1
    assert second == []
    await scheduler.stop()


@pytest.mark.asyncio
async def test_tick_handles_several_subscribers(scheduler, store, table):
    await store.set_alarm_lead("1", 10)
    await store.set_alarm_lead("2", 60)
    await store.set_alarm_lead("3", 0)
    armed = await scheduler.tick(before(table[5], minutes=10, seconds=30))
    assert sorted(n.subscriber_id for n in armed) == ["1", "2"]
    delays = {n.subscriber_id: n.delay for n in armed}
    assert delays["1"] == timedelta(seconds=30)
    assert delays["2"] == timedelta(0)
    await scheduler.stop()


@pytest.mark.asyncio
async def test_alarm_is_dispatched(scheduler, store, dispatcher, table):
    await store.set_alarm_lead("1", 10)
    armed = await scheduler.tick(before(table[5], minutes=10, milliseconds=20))
    assert await armed[0].handle is True
    assert dispatcher.sent == [("1", format_alarm(table[5], 10))]
    assert scheduler.tasks == {}


@pytest.mark.asyncio
async def test_dispatch_failure_is_not_retried(store, table, failing_dispatcher):
    scheduler = NotificationScheduler(store, ScheduleCursor(table), failing_dispatcher, tick_slack=SLACK)
    await store.set_alarm_lead("1", 10)
    now = before(table[5], minutes=10, milliseconds=20)
    armed = await scheduler.tick(now)
    assert await armed[0].handle is False
    assert (await store.get("1")).last_notified_spawn_at == table[5].spawn_at
    assert await scheduler.tick(now) == []


@pytest.mark.asyncio
async def test_changing_lead_cancels_pending_alarm(scheduler, store, table):
    await store.set_alarm_lead("1", 10)
    armed = await scheduler.tick(before(table[5], minutes=10, seconds=30))
    handle = armed[0].handle

    record = await scheduler.set_alarm_lead("1", 5)
    await asyncio.gather(handle, return_exceptions=True)

    assert handle.cancelled()
    assert scheduler.pending_alarms("1") == []
    assert record.alarm_lead_minutes == 5
    assert record.last_notified_spawn_at == NEVER


@pytest.mark.asyncio
async def test_changing_lead_rearms_with_new_lead(scheduler, store, table):
    await store.set_alarm_lead("1", 10)
    await scheduler.tick(before(table[5], minutes=10, seconds=30))
    await scheduler.adjust_alarm_lead("1", 5)

    armed = await scheduler.tick(before(table[5], minutes=10, seconds=30))
    assert len(armed) == 1
    assert armed[0].lead_minutes == 15
    assert armed[0].delay == timedelta(0)
    await scheduler.stop()


@pytest.mark.asyncio
async def test_offset_change_keeps_pending_alarm(scheduler, store, table):
    await store.set_alarm_lead("1", 10)
    await scheduler.tick(before(table[5], minutes=10, seconds=30))
    await scheduler.set_utc_offset("1", 2)
    assert scheduler.pending_alarms("1") == [table[5].spawn_at]
    await scheduler.stop()


@pytest.mark.asyncio
async def test_stop_cancels_everything(scheduler, store, table):
    await store.set_alarm_lead("1", 10)
    await store.set_alarm_lead("2", 10)
    armed = await scheduler.tick(before(table[5], minutes=10, seconds=30))
    await scheduler.stop()
    await asyncio.gather(*(n.handle for n in armed), return_exceptions=True)
    assert scheduler.tasks == {}
    assert all(n.handle.cancelled() for n in armed)


@pytest.mark.asyncio
async def test_tick_raises_when_schedule_exhausted(scheduler, table):
    with pytest.raises(ScheduleExhaustedError):
        await scheduler.tick(table[-1].spawn_at + timedelta(minutes=1))


@pytest.mark.asyncio
async def test_tick_with_unwritable_store_arms_nothing(tmp_path, table, dispatcher):
    blocked = tmp_path / "subscribers.json"
    blocked.mkdir()
    scheduler = NotificationScheduler(SubscriberStore(blocked), ScheduleCursor(table), dispatcher, tick_slack=SLACK)
    assert await scheduler.tick(before(table[5], minutes=10)) == []
    assert scheduler.tasks == {}


@pytest.mark.asyncio
async def test_next_occurrence_and_get_or_create(scheduler, table):
    assert scheduler.next_occurrence(before(table[5], minutes=1)) == table[5]
    record = await scheduler.get_or_create_subscriber("9")
    assert record == SubscriberRecord(id="9")
