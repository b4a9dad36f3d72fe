"""
Module: wbnoti/commands/offset.py

Defines the `/wb offset` slash command to choose the UTC offset used when showing spawn times.
"""
import nextcord
from wbnoti.bot_context import scheduler, wb_group
from wbnoti.errors import StoreIOError
from wbnoti.messages import DATA_SAVE_ERROR, TIME_OFFSET_TEXT
from wbnoti.store import MAX_UTC_OFFSET, MIN_UTC_OFFSET
from wbnoti.utils import format_utc_offset, log_message

@wb_group.subcommand(name="offset", description="Set the time offset used to show spawn times")
async def set_offset(
    interaction: nextcord.Interaction,
    hours: int = nextcord.SlashOption(
        description="Hours from UTC, e.g. 3 or -5",
        required=True, min_value=MIN_UTC_OFFSET, max_value=MAX_UTC_OFFSET
    )
):
    """
    Handle `/wb offset`.
    """
    try:
        record = await scheduler.set_utc_offset(str(interaction.channel_id), hours)
    except StoreIOError as e:
        log_message(f"Error saving offset for {interaction.channel_id}: {e}", "error")
        return await interaction.response.send_message(DATA_SAVE_ERROR, ephemeral=True)

    log_message(
        f"User {interaction.user.name} set offset to {format_utc_offset(record.utc_offset)} for channel {record.id}",
        "info"
    )
    await interaction.response.send_message(
        f"✅ {TIME_OFFSET_TEXT.format(offset=format_utc_offset(record.utc_offset))}"
    )
