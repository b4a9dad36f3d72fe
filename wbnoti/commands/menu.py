"""
Module: wbnoti/commands/menu.py

Defines `/wb menu`, an interactive message with buttons for the next spawn,
the alarm lead time and the time offset. Menu views are persistent (fixed
custom IDs, no timeout) so their buttons keep working after a restart once
registered with `register_menu_views`.
"""
from functools import partial

import nextcord
from nextcord import ui, ButtonStyle
from wbnoti.bot_context import scheduler, wb_group
from wbnoti.commands.next import reply_next_spawn
from wbnoti.errors import StoreIOError
from wbnoti.messages import (
    DATA_SAVE_ERROR, MAIN_MENU_TITLE,
    format_alarm_menu, format_offset_menu, format_settings_menu,
)
from wbnoti.utils import log_message


async def _main_menu(subscriber_id):
    return MAIN_MENU_TITLE, MainMenuView()

async def _settings_menu(subscriber_id):
    record = await scheduler.get_or_create_subscriber(subscriber_id)
    return format_settings_menu(record), SettingsMenuView()

async def _offset_menu(subscriber_id, delta=0):
    if delta:
        record = await scheduler.adjust_utc_offset(subscriber_id, delta)
    else:
        record = await scheduler.get_or_create_subscriber(subscriber_id)
    return format_offset_menu(record.utc_offset), OffsetMenuView()

async def _alarm_menu(subscriber_id, delta=0, disable=False):
    if disable:
        record = await scheduler.set_alarm_lead(subscriber_id, 0)
    elif delta:
        record = await scheduler.adjust_alarm_lead(subscriber_id, delta)
    else:
        record = await scheduler.get_or_create_subscriber(subscriber_id)
    return format_alarm_menu(record.alarm_lead_minutes), AlarmMenuView()

async def _show(interaction: nextcord.Interaction, build):
    """
    Edit the menu message in place with the text and view returned by `build(subscriber_id)`.
    """
    try:
        text, view = await build(str(interaction.channel_id))
    except StoreIOError as e:
        log_message(f"Menu update failed for {interaction.channel_id}: {e}", "error")
        return await interaction.response.send_message(DATA_SAVE_ERROR, ephemeral=True)
    await interaction.response.edit_message(content=text, view=view)


class MainMenuView(ui.View):
    def __init__(self):
        super().__init__(timeout=None)

    @ui.button(label="👿 Next World Boss", style=ButtonStyle.primary, custom_id="wb-next", row=0)
    async def next_boss(self, _, interaction: nextcord.Interaction):
        await reply_next_spawn(interaction)

    @ui.button(label="⚙ Settings", style=ButtonStyle.secondary, custom_id="wb-settings", row=1)
    async def settings(self, _, interaction: nextcord.Interaction):
        await _show(interaction, _settings_menu)


class SettingsMenuView(ui.View):
    def __init__(self):
        super().__init__(timeout=None)

    @ui.button(label="🌎 Time offset", style=ButtonStyle.secondary, custom_id="wb-settings-offset", row=0)
    async def offset(self, _, interaction: nextcord.Interaction):
        await _show(interaction, _offset_menu)

    @ui.button(label="⏰ Alarm", style=ButtonStyle.secondary, custom_id="wb-settings-alarm", row=0)
    async def alarm(self, _, interaction: nextcord.Interaction):
        await _show(interaction, _alarm_menu)

    @ui.button(label="Main menu", style=ButtonStyle.secondary, custom_id="wb-settings-main", row=1)
    async def main_menu(self, _, interaction: nextcord.Interaction):
        await _show(interaction, _main_menu)


class OffsetMenuView(ui.View):
    def __init__(self):
        super().__init__(timeout=None)

    @ui.button(label="-1 hour", style=ButtonStyle.secondary, custom_id="wb-offset-decrease", row=0)
    async def decrease(self, _, interaction: nextcord.Interaction):
        await _show(interaction, partial(_offset_menu, delta=-1))

    @ui.button(label="+1 hour", style=ButtonStyle.secondary, custom_id="wb-offset-increase", row=0)
    async def increase(self, _, interaction: nextcord.Interaction):
        await _show(interaction, partial(_offset_menu, delta=1))

    @ui.button(label="⬅️ Return to Settings", style=ButtonStyle.secondary, custom_id="wb-offset-back", row=1)
    async def back(self, _, interaction: nextcord.Interaction):
        await _show(interaction, _settings_menu)

    @ui.button(label="Main menu", style=ButtonStyle.secondary, custom_id="wb-offset-main", row=2)
    async def main_menu(self, _, interaction: nextcord.Interaction):
        await _show(interaction, _main_menu)


class AlarmMenuView(ui.View):
    """
    Alarm lead time controls. Every change resets the dedup marker and
    cancels a pending alarm, so the next tick re-arms with the new lead time.
    """
    def __init__(self):
        super().__init__(timeout=None)

    @ui.button(label="-30", style=ButtonStyle.secondary, custom_id="wb-alarm-decrease-30m", row=0)
    async def decrease_30(self, _, interaction: nextcord.Interaction):
        await _show(interaction, partial(_alarm_menu, delta=-30))

    @ui.button(label="-5", style=ButtonStyle.secondary, custom_id="wb-alarm-decrease-5m", row=0)
    async def decrease_5(self, _, interaction: nextcord.Interaction):
        await _show(interaction, partial(_alarm_menu, delta=-5))

    @ui.button(label="-1", style=ButtonStyle.secondary, custom_id="wb-alarm-decrease-1m", row=0)
    async def decrease_1(self, _, interaction: nextcord.Interaction):
        await _show(interaction, partial(_alarm_menu, delta=-1))

    @ui.button(label="+1", style=ButtonStyle.secondary, custom_id="wb-alarm-increase-1m", row=1)
    async def increase_1(self, _, interaction: nextcord.Interaction):
        await _show(interaction, partial(_alarm_menu, delta=1))

    @ui.button(label="+5", style=ButtonStyle.secondary, custom_id="wb-alarm-increase-5m", row=1)
    async def increase_5(self, _, interaction: nextcord.Interaction):
        await _show(interaction, partial(_alarm_menu, delta=5))

    @ui.button(label="+30", style=ButtonStyle.secondary, custom_id="wb-alarm-increase-30m", row=1)
    async def increase_30(self, _, interaction: nextcord.Interaction):
        await _show(interaction, partial(_alarm_menu, delta=30))

    @ui.button(label="❌ Disable", style=ButtonStyle.danger, custom_id="wb-alarm-disable", row=2)
    async def disable(self, _, interaction: nextcord.Interaction):
        await _show(interaction, partial(_alarm_menu, disable=True))

    @ui.button(label="⬅️ Return to Settings", style=ButtonStyle.secondary, custom_id="wb-alarm-back", row=3)
    async def back(self, _, interaction: nextcord.Interaction):
        await _show(interaction, _settings_menu)

    @ui.button(label="Main menu", style=ButtonStyle.secondary, custom_id="wb-alarm-main", row=3)
    async def main_menu(self, _, interaction: nextcord.Interaction):
        await _show(interaction, _main_menu)


def register_menu_views(bot):
    """
    Register every menu view so buttons on menus sent before a restart are still handled.
    """
    for view in (MainMenuView(), SettingsMenuView(), OffsetMenuView(), AlarmMenuView()):
        bot.add_view(view)


async def _retire_menu(channel, message_ref):
    """
    Delete the channel's previous menu message, if there is one and it still exists.
    """
    get_partial_message = getattr(channel, "get_partial_message", None)
    if not message_ref or get_partial_message is None:
        return
    try:
        await get_partial_message(message_ref).delete()
    except nextcord.HTTPException as e:
        log_message(f"Could not remove old menu {message_ref}: {e}", "debug")


@wb_group.subcommand(name="menu", description="Open the World Boss menu in this channel")
async def open_menu(interaction: nextcord.Interaction):
    """
    Handle `/wb menu`. Sends a fresh menu, removes the previous one and
    remembers the new message ID for the channel.
    """
    subscriber_id = str(interaction.channel_id)
    try:
        record = await scheduler.get_or_create_subscriber(subscriber_id)
    except StoreIOError as e:
        log_message(f"Error loading subscriber {subscriber_id}: {e}", "error")
        return await interaction.response.send_message(DATA_SAVE_ERROR, ephemeral=True)

    await interaction.response.send_message(MAIN_MENU_TITLE, view=MainMenuView())
    message = await interaction.original_message()
    if record.menu_message_ref != message.id:
        await _retire_menu(interaction.channel, record.menu_message_ref)
    try:
        await scheduler.set_menu_message(subscriber_id, message.id)
    except StoreIOError as e:
        log_message(f"Error saving menu message ID: {e}", "error")
