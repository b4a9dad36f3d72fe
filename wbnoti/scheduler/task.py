"""
Module: wbnoti/scheduler/task.py

Defines NotificationTask: a one-shot alarm that sleeps until its fire time and
then sends the alarm message through the scheduler's dispatcher.
"""
import asyncio

from wbnoti.errors import DispatchError
from wbnoti.messages import format_alarm
from wbnoti.utils import log_message


class NotificationTask:
    """
    A single deferred alarm for one subscriber and one spawn.

    The message parameters are captured when the task is created. No lock is
    held while sleeping. Delivery is attempted once; a failure is logged and
    the alarm counts as sent.

    Attributes:
      scheduler: NotificationScheduler that owns this task.
      subscriber_id (str): Who receives the alarm.
      occurrence (Occurrence): The spawn being announced.
      lead_minutes (int): Lead time shown in the message.
      delay (timedelta): Time to wait before sending.
      handle (asyncio.Task or None): Running task, set by the scheduler.
    """
    def __init__(self, scheduler, subscriber_id, occurrence, lead_minutes, delay):
        self.scheduler = scheduler
        self.subscriber_id = subscriber_id
        self.occurrence = occurrence
        self.lead_minutes = lead_minutes
        self.delay = delay
        self.handle = None

    @property
    def key(self):
        return (self.subscriber_id, self.occurrence.spawn_at)

    async def run(self):
        """
        Wait out the delay, then dispatch. Returns True if the message was delivered.
        """
        try:
            seconds = self.delay.total_seconds()
            if seconds > 0:
                await asyncio.sleep(seconds)
            return await self._dispatch()
        except asyncio.CancelledError:
            log_message(
                f"Cancelled alarm for {self.subscriber_id} ({self.occurrence.label} "
                f"at {self.occurrence.spawn_at.strftime('%Y-%m-%d %H:%M UTC')})",
                "warning"
            )
            raise
        except Exception as e:
            log_message(f"Error in NotificationTask for {self.subscriber_id}: {e}", "error")
            return False

    async def _dispatch(self):
        text = format_alarm(self.occurrence, self.lead_minutes)
        try:
            await self.scheduler.dispatcher.send(self.subscriber_id, text)
        except DispatchError as e:
            log_message(f"Alarm not delivered: {e}", "error")
            return False
        log_message(
            f"Dispatched {self.lead_minutes}m alarm for {self.occurrence.label} to {self.subscriber_id}",
            "info"
        )
        return True
