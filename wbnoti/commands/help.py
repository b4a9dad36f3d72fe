"""
Module: wbnoti/commands/help.py

Provides the `/wb help` slash command for displaying usage information
for all World Boss commands (next, alarm, offset, menu).
"""
import nextcord
from wbnoti.utils import log_message
from wbnoti.bot_context import wb_group

@wb_group.subcommand(name="help", description="Get help with World Boss commands")
async def wb_help(
    interaction: nextcord.Interaction,
    command: str = None
):
    """
    Display help information for World Boss commands.

    When called without arguments, lists all commands with usage summaries.
    When called with a command name ("next", "alarm", "offset", "menu"), shows
    an example and details for that command.

    Parameters:
    - interaction: The slash command interaction context.
    - command: Optional specific command name for detailed help.
    """
    help_data = {
        None: {
            "title": "📚 World Boss Help",
            "description": "Here are the available commands:",
            "fields": [
                ("/wb next", "Show the next World Boss and when it spawns"),
                ("/wb alarm <minutes>", "Get an alert this many minutes before each spawn (0 disables)"),
                ("/wb offset <hours>", "Set the time offset used to show spawn times"),
                ("/wb menu", "Open the interactive menu"),
                ("/wb help [command]", "Get help with World Boss commands")
            ]
        },
        "next": {
            "title": "👿 Next Command Help",
            "description": "Show the next World Boss spawn",
            "example": "/wb next",
            "details": (
                "Shows the boss name, the time left until it spawns and the spawn time "
                "in this channel's time offset, followed by the alarm setting."
            )
        },
        "alarm": {
            "title": "⏰ Alarm Command Help",
            "description": "Set the alarm lead time for this channel",
            "example": "/wb alarm 10",
            "details": (
                "Alarms are posted in the channel where they were set.\n\n"
                "Parameters:\n"
                "- minutes: How long before each spawn to post the alarm. 0 disables alarms.\n\n"
                "Changing the lead time replaces an alarm that is already waiting for the next spawn."
            )
        },
        "offset": {
            "title": "🌎 Offset Command Help",
            "description": "Set the time offset used to show spawn times",
            "example": "/wb offset -5",
            "details": "Spawn times are shown as UTC plus this many hours. Alarms are not affected."
        },
        "menu": {
            "title": "📋 Menu Command Help",
            "description": "Open the interactive menu",
            "example": "/wb menu",
            "details": (
                "Posts a menu with buttons for the next spawn, alarm and time offset. "
                "Opening a new menu removes the previous one in this channel."
            )
        }
    }

    if command and command not in help_data:
        await interaction.response.send_message(f"❌ Unknown command: {command}", ephemeral=True)
        return

    data = help_data[command] if command else help_data[None]
    embed = nextcord.Embed(
        title=data["title"],
        description=data["description"],
        color=nextcord.Color.green()
    )

    if command and "example" in data:
        embed.add_field(name="📝 Example", value=data["example"], inline=False)
        embed.add_field(name="ℹ️ Details", value=data["details"], inline=False)
    else:
        for name, value in data.get("fields", []):
            embed.add_field(name=name, value=value, inline=False)

    log_message(
        f"User {interaction.user.name} ({interaction.user.id}) accessed help: {command or 'general'}",
        "info"
    )
    await interaction.response.send_message(embed=embed, ephemeral=True)
