"""
Module: wbnoti/bot_context.py

Sets up the Discord bot, spawn schedule, subscriber store and scheduler, the
periodic tick loop, and the main slash command group `/wb`.
"""
import nextcord
from nextcord.ext import tasks

from wbnoti.client import AlarmBot
from wbnoti.config import DATA_PATH, GUILD_IDS, GUILD_MODE, SCHEDULE_LENGTH, TICK_SLACK, UPDATE_INTERVAL
from wbnoti.dispatcher import ChannelDispatcher
from wbnoti.errors import ScheduleExhaustedError
from wbnoti.schedule import ScheduleCursor, generate_schedule
from wbnoti.scheduler import NotificationScheduler
from wbnoti.store import SubscriberStore
from wbnoti.utils import log_message

intents = nextcord.Intents.default()
bot = AlarmBot(intents=intents)

# Generated once and shared read-only for the life of the process.
schedule = generate_schedule(SCHEDULE_LENGTH)
log_message(
    f"Generated {len(schedule)} spawns, last at {schedule[-1].spawn_at.strftime('%Y-%m-%d %H:%M UTC')}",
    "info"
)

store = SubscriberStore(DATA_PATH)
scheduler = NotificationScheduler(
    store,
    ScheduleCursor(schedule),
    ChannelDispatcher(bot),
    tick_slack=TICK_SLACK,
)
bot.alarm_scheduler = scheduler

@bot.slash_command(
    name="wb",
    description="World Boss spawn times and alarms",
    guild_ids=GUILD_IDS if GUILD_MODE else None
)
async def wb_group(interaction: nextcord.Interaction):
    """
    Main command group for World Boss alarms.
    Subcommands: next, alarm, offset, menu, help.
    This command itself is not directly invoked.
    """
    pass

@tasks.loop(seconds=UPDATE_INTERVAL.total_seconds())
async def tick_loop():
    """
    Evaluate all subscribers against the next spawn. A run-out schedule stops
    the loop; any other error is logged and the next tick tries again.
    """
    try:
        await scheduler.tick()
    except ScheduleExhaustedError as e:
        log_message(f"{e}. Alarms stopped; restart with a larger SCHEDULE_LENGTH.", "error")
        tick_loop.stop()
    except Exception as e:
        log_message(f"Error in scheduler tick: {e}", "error")

bot.tick_loop = tick_loop
