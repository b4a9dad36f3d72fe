"""
Module: wbnoti/scheduler/manager.py

Defines NotificationScheduler: on every tick it checks all subscribers against
the next World Boss spawn, marks due alarms in the store and starts a
NotificationTask for each. It also exposes the subscriber operations used by
slash commands and keeps a registry of pending alarms so they can be cancelled.
"""
import asyncio
from datetime import datetime, timedelta, UTC

from wbnoti.errors import StoreIOError
from wbnoti.scheduler.alarm import AlarmState, evaluate_alarm
from wbnoti.scheduler.task import NotificationTask
from wbnoti.utils import as_utc, log_message

DEFAULT_TICK_SLACK = timedelta(seconds=45)


class NotificationScheduler:
    """
    Orchestrates alarm evaluation and the lifecycle of alarm tasks.

    Responsibilities:
      - Evaluate every subscriber once per tick against the next spawn.
      - Persist the dedup marker before an alarm task is started.
      - Cancel a subscriber's pending alarms when its lead time changes.
      - Cancel everything on shutdown.

    Attributes:
      store: SubscriberStore holding alarm settings.
      cursor: ScheduleCursor over the shared spawn table.
      dispatcher: Dispatcher used by alarm tasks.
      tick_slack (timedelta): Added to the lead time when deciding if an alarm is due.
      tasks (dict): (subscriber_id, spawn_at) -> asyncio.Task for pending alarms.
    """
    def __init__(self, store, cursor, dispatcher, tick_slack=DEFAULT_TICK_SLACK):
        self.store = store
        self.cursor = cursor
        self.dispatcher = dispatcher
        self.tick_slack = tick_slack
        self.tasks = {}

    def next_occurrence(self, now=None):
        return self.cursor.next(now)

    async def get_or_create_subscriber(self, subscriber_id):
        return await self.store.get_or_create(subscriber_id)

    async def set_alarm_lead(self, subscriber_id, minutes):
        """
        Change the lead time. The store resets the dedup marker in the same
        update and any pending alarm for this subscriber is cancelled; the next
        tick arms a new one with the new lead time.
        """
        record = await self.store.set_alarm_lead(subscriber_id, minutes)
        self.cancel_alarms(record.id)
        return record

    async def adjust_alarm_lead(self, subscriber_id, delta):
        record = await self.store.adjust_alarm_lead(subscriber_id, delta)
        self.cancel_alarms(record.id)
        return record

    async def set_utc_offset(self, subscriber_id, hours):
        return await self.store.set_utc_offset(subscriber_id, hours)

    async def adjust_utc_offset(self, subscriber_id, delta):
        return await self.store.adjust_utc_offset(subscriber_id, delta)

    async def set_menu_message(self, subscriber_id, message_ref):
        return await self.store.set_menu_message(subscriber_id, message_ref)

    async def tick(self, now=None):
        """
        Run one evaluation pass.

        Subscribers whose alarm is due get `last_notified_spawn_at` set to the
        spawn time; the store is saved, and only then are the alarm tasks
        started. If the store cannot be read or written nothing is armed and
        the next tick tries again.

        Returns:
          list[NotificationTask] started by this tick.

        Raises:
          ScheduleExhaustedError: the spawn table has run out.
        """
        now = as_utc(now) if now else datetime.now(UTC)
        occurrence = self.cursor.next(now)

        due = []
        try:
            async with self.store.transaction() as records:
                for record in records.values():
                    decision = evaluate_alarm(record, occurrence, now, self.tick_slack)
                    if decision.state is not AlarmState.DUE:
                        continue
                    record.last_notified_spawn_at = occurrence.spawn_at
                    due.append((record.id, record.alarm_lead_minutes, decision.delay))
        except StoreIOError as e:
            log_message(f"Tick skipped, alarms not armed: {e}", "error")
            return []

        return [self._arm(subscriber_id, occurrence, lead, delay) for subscriber_id, lead, delay in due]

    def _arm(self, subscriber_id, occurrence, lead_minutes, delay):
        notification = NotificationTask(self, subscriber_id, occurrence, lead_minutes, delay)
        previous = self.tasks.pop(notification.key, None)
        if previous:
            previous.cancel()
        log_message(
            f"Setting {delay} timer for {subscriber_id} ({occurrence.label}, {lead_minutes}m lead)",
            "info"
        )
        handle = asyncio.create_task(notification.run())
        handle.add_done_callback(lambda done, key=notification.key: self._forget(key, done))
        notification.handle = handle
        self.tasks[notification.key] = handle
        return notification

    def _forget(self, key, handle):
        if self.tasks.get(key) is handle:
            del self.tasks[key]

    def pending_alarms(self, subscriber_id):
        """Spawn times of the alarms still waiting to fire for `subscriber_id`."""
        return sorted(spawn_at for sid, spawn_at in self.tasks if sid == str(subscriber_id))

    def cancel_alarms(self, subscriber_id):
        """
        Cancel every pending alarm for `subscriber_id`. Returns how many were cancelled.
        """
        subscriber_id = str(subscriber_id)
        keys = [key for key in self.tasks if key[0] == subscriber_id]
        for key in keys:
            self.tasks.pop(key).cancel()
        return len(keys)

    async def stop(self):
        """
        Cancel all alarm tasks and clear the registry.
        """
        for task in self.tasks.values():
            task.cancel()
        self.tasks.clear()
