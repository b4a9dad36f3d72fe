"""
Module: wbnoti/client.py

Defines AlarmBot, the nextcord bot used by wbnoti. On shutdown it stops the
tick loop and cancels every alarm still waiting to fire.
"""
from nextcord.ext import commands

from wbnoti.utils import log_message


class AlarmBot(commands.Bot):
    """
    commands.Bot that owns the alarm scheduler's lifetime.

    Attributes:
      alarm_scheduler: NotificationScheduler to stop on close, attached by bot_context.
      tick_loop: tasks.Loop driving the scheduler, attached by bot_context.
    """
    alarm_scheduler = None
    tick_loop = None

    async def close(self):
        if self.tick_loop is not None and self.tick_loop.is_running():
            self.tick_loop.cancel()
        if self.alarm_scheduler is not None:
            pending = len(self.alarm_scheduler.tasks)
            await self.alarm_scheduler.stop()
            log_message(f"Shutting down, cancelled {pending} pending alarm(s)", "warning")
        await super().close()
