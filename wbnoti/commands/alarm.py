"""
Module: wbnoti/commands/alarm.py

Defines the `/wb alarm` slash command to set how many minutes before each
spawn the channel is alerted.
"""
import nextcord
from wbnoti.bot_context import scheduler, wb_group
from wbnoti.errors import StoreIOError
from wbnoti.messages import DATA_SAVE_ERROR, format_alarm_status
from wbnoti.store import MAX_ALARM_LEAD
from wbnoti.utils import log_message

@wb_group.subcommand(name="alarm", description="Set the World Boss alarm lead time (0 disables it)")
async def set_alarm(
    interaction: nextcord.Interaction,
    minutes: int = nextcord.SlashOption(
        description="Minutes before the spawn, 0 to disable",
        required=True, min_value=0, max_value=MAX_ALARM_LEAD
    )
):
    """
    Handle `/wb alarm`. Changing the lead time re-arms the alarm for the
    upcoming spawn and cancels one already waiting with the old lead time.
    """
    try:
        record = await scheduler.set_alarm_lead(str(interaction.channel_id), minutes)
    except StoreIOError as e:
        log_message(f"Error saving alarm for {interaction.channel_id}: {e}", "error")
        return await interaction.response.send_message(DATA_SAVE_ERROR, ephemeral=True)

    log_message(
        f"User {interaction.user.name} set alarm to {record.alarm_lead_minutes}m for channel {record.id}",
        "info"
    )
    await interaction.response.send_message(f"✅ {format_alarm_status(record.alarm_lead_minutes)}")
