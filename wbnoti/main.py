"""
Module: wbnoti/main.py

Entry point for the World Boss alarm bot.
Registers commands and menu views, starts the scheduler tick loop, and defines
event handlers for bot lifecycle, guild membership, disconnection,
reconnection, and command logging.
"""
import traceback

import nextcord
from wbnoti.config import DISCORD_BOT_TOKEN, GUILD_IDS, GUILD_MODE, DISCORD_APPLICATION_ID, require_credentials
from wbnoti.utils import format_command_line, log_message
from wbnoti.bot_context import bot, scheduler, tick_loop, wb_group
from wbnoti.errors import ScheduleExhaustedError
from wbnoti.messages import SCHEDULE_EXHAUSTED

# Import command modules to register slash commands
import wbnoti.commands.next
import wbnoti.commands.alarm
import wbnoti.commands.offset
import wbnoti.commands.help
from wbnoti.commands.menu import register_menu_views

@bot.event
async def on_ready():
    """
    Handler for the bot's ready event.

    Logs bot identity, registers persistent menu views, syncs slash commands
    and starts the tick loop.
    """
    log_message(f'Logged in as {bot.user.name} ({bot.user.id})', "info")
    register_menu_views(bot)

    if GUILD_MODE:
        for guild_id in GUILD_IDS:
            guild = bot.get_guild(guild_id)
            guild_name = guild.name if guild else str(guild_id)
            try:
                synced = await bot.sync_application_commands(guild_id=guild_id)
                count = len(synced) if synced is not None else None
                if count is not None:
                    log_message(f"Synced {count} commands to guild {guild_name} ({guild_id})", "info")
                else:
                    log_message(f"Synced commands to guild {guild_name} ({guild_id})", "info")
            except nextcord.errors.Forbidden:
                log_message(
                    f"Failed to sync commands for guild {guild_name} ({guild_id}): Missing Access", "warning"
                )
            except Exception as e:
                log_message(
                    f"Error syncing commands for guild {guild_name} ({guild_id}): {e}", "error"
                )

    if not tick_loop.is_running():
        tick_loop.start()

    from colorama import Fore, Style

    perms = nextcord.Permissions()
    perms.send_messages = True
    perms.view_channel = True
    perms.read_message_history = True

    invite_url = nextcord.utils.oauth_url(
        client_id=DISCORD_APPLICATION_ID,
        permissions=perms,
        scopes=["bot", "applications.commands"]
    )
    print(f"{Fore.CYAN}Bot invite URL: {Fore.YELLOW}{invite_url}{Style.RESET_ALL}")

@bot.event
async def on_application_command_error(interaction, error):
    """
    Handler for errors during slash command execution.

    Logs the error and notifies the user of an internal failure.
    """
    original = getattr(error, "original", error)
    log_message(f"Slash command error: {original}", "error")
    text = SCHEDULE_EXHAUSTED if isinstance(original, ScheduleExhaustedError) else "❌ An internal error occurred."
    try:
        await interaction.response.send_message(text, ephemeral=True)
    except nextcord.HTTPException as e:
        log_message(f"Could not report command error: {e}", "warning")

@bot.event
async def on_error(event_method, *args, **kwargs):
    log_message(f"Unhandled error in {event_method}:\n{traceback.format_exc()}", "error")

@bot.event
async def on_guild_join(guild):
    """
    `/wb` reaches new guilds through the global command registration, or not
    at all when the bot is limited to GUILD_IDS.
    """
    log_message(f"Joined guild {guild.name} ({guild.id}) with {len(guild.text_channels)} text channel(s)", "info")
    if GUILD_MODE and guild.id not in GUILD_IDS:
        log_message(f"Guild {guild.id} is not in GUILD_IDS, /wb will not be available there", "warning")

@bot.event
async def on_guild_remove(guild):
    """
    Cancel alarms waiting for the guild's channels. Their settings stay in the
    store and apply again if the bot is added back.
    """
    cancelled = sum(scheduler.cancel_alarms(channel.id) for channel in guild.channels)
    log_message(f"Removed from guild {guild.name} ({guild.id}), cancelled {cancelled} pending alarm(s)", "warning")

@bot.event
async def on_disconnect():
    # Pending alarms keep sleeping and are sent once the gateway is back.
    log_message(f"Disconnected from Discord with {len(scheduler.tasks)} alarm(s) pending", "warning")

@bot.event
async def on_resumed():
    log_message("Connection resumed", "info")
    if not tick_loop.is_running():
        tick_loop.start()

@bot.listen()
async def on_interaction(interaction: nextcord.Interaction):
    """
    Log `/wb` commands and menu button presses with the channel they came from.
    """
    data = interaction.data or {}
    if interaction.type == nextcord.InteractionType.application_command and data.get("name") == "wb":
        action = format_command_line(data)
    elif interaction.type == nextcord.InteractionType.component and str(data.get("custom_id", "")).startswith("wb-"):
        action = f"menu button {data['custom_id']}"
    else:
        return
    where = f"guild {interaction.guild.id}" if interaction.guild else "DM"
    log_message(f"{action} | channel {interaction.channel_id} ({where}) | user {interaction.user}", "info")

def run():
    """Start the bot. Requires DISCORD_BOT_TOKEN and DISCORD_APPLICATION_ID."""
    require_credentials()
    log_message("Bot is starting up...")
    bot.add_application_command(wb_group)
    bot.run(DISCORD_BOT_TOKEN)

if __name__ == "__main__":
    run()
