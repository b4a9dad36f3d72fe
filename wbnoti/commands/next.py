"""
Module: wbnoti/commands/next.py

Defines the `/wb next` slash command: upcoming World Boss, time left, local
spawn time and the channel's alarm setting.
"""
import nextcord
from datetime import datetime, UTC
from wbnoti.bot_context import scheduler, wb_group
from wbnoti.errors import ScheduleExhaustedError, StoreIOError
from wbnoti.messages import DATA_SAVE_ERROR, SCHEDULE_EXHAUSTED, format_alarm_status, format_next_spawn
from wbnoti.utils import log_message

async def next_spawn_text(subscriber_id):
    """
    Build the next-spawn summary for a subscriber, creating the subscriber on first use.
    Also used by the menu's "Next World Boss" button.
    """
    record = await scheduler.get_or_create_subscriber(subscriber_id)
    now = datetime.now(UTC)
    occurrence = scheduler.next_occurrence(now)
    return "\n".join([
        format_next_spawn(occurrence, now, record.utc_offset),
        format_alarm_status(record.alarm_lead_minutes),
    ])

async def reply_next_spawn(interaction: nextcord.Interaction):
    try:
        text = await next_spawn_text(str(interaction.channel_id))
    except StoreIOError as e:
        log_message(f"Error loading subscriber {interaction.channel_id}: {e}", "error")
        return await interaction.response.send_message(DATA_SAVE_ERROR, ephemeral=True)
    except ScheduleExhaustedError as e:
        log_message(str(e), "error")
        return await interaction.response.send_message(SCHEDULE_EXHAUSTED, ephemeral=True)
    await interaction.response.send_message(text)

@wb_group.subcommand(name="next", description="Show the next World Boss spawn")
async def next_boss(interaction: nextcord.Interaction):
    """
    Handle `/wb next`.
    """
    await reply_next_spawn(interaction)
