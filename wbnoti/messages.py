"""
Module: wbnoti/messages.py

Message texts sent to Discord: alarm notifications, next-spawn summaries and menu headers.
"""
from datetime import timedelta, timezone

from wbnoti.utils import format_remaining, format_utc_offset, pluralize, round_up_time

ALARM_TEXT = "**{boss}** | `{lead}`"
NEXT_SPAWN_TEXT = "**{boss}** | `{remaining}`\n{local_time} {offset}."
ALARM_STATUS_TEXT = "Alarm | `{lead}`"
ALARM_DISABLED_TEXT = "Alarm | `Disabled`"
ALARM_MENU_TEXT = "Alarm: `{lead}`"
ALARM_MENU_DISABLED_TEXT = "Alarm: `Disabled`"
TIME_OFFSET_TEXT = "Time offset: `{offset}`"
DATA_SAVE_ERROR = "Error 37. Please try again later."
SCHEDULE_EXHAUSTED = "The spawn schedule has run out. Please contact the bot maintainer."

MAIN_MENU_TITLE = "**World Boss**"
SETTINGS_MENU_TITLE = "**World Boss | Settings**"
OFFSET_MENU_TITLE = "**World Boss | Settings | Time offset**"
ALARM_MENU_TITLE = "**World Boss | Settings | Alarm**"


def minutes_text(minutes):
    return pluralize(minutes, "minute", "minutes")


def format_alarm(occurrence, lead_minutes):
    """Text of the alarm sent `lead_minutes` before `occurrence` spawns."""
    return ALARM_TEXT.format(boss=occurrence.label, lead=minutes_text(lead_minutes))


def format_next_spawn(occurrence, now, utc_offset):
    """
    Describe the upcoming spawn: boss, time left and spawn time in the
    subscriber's offset, rounded up to the minute.
    """
    spawn_at = round_up_time(occurrence.spawn_at, timedelta(minutes=1))
    local = spawn_at.astimezone(timezone(timedelta(hours=utc_offset)))
    return NEXT_SPAWN_TEXT.format(
        boss=occurrence.label,
        remaining=format_remaining(spawn_at - now),
        local_time=local.strftime("%Y-%m-%d %H:%M:%S"),
        offset=format_utc_offset(utc_offset),
    )


def format_alarm_status(lead_minutes):
    if lead_minutes <= 0:
        return ALARM_DISABLED_TEXT
    return ALARM_STATUS_TEXT.format(lead=minutes_text(lead_minutes))


def format_alarm_menu(lead_minutes):
    if lead_minutes <= 0:
        return "\n".join([ALARM_MENU_TITLE, ALARM_MENU_DISABLED_TEXT])
    return "\n".join([ALARM_MENU_TITLE, ALARM_MENU_TEXT.format(lead=minutes_text(lead_minutes))])


def format_offset_menu(utc_offset):
    return "\n".join([OFFSET_MENU_TITLE, TIME_OFFSET_TEXT.format(offset=format_utc_offset(utc_offset))])


def format_settings_menu(record):
    lines = [SETTINGS_MENU_TITLE, TIME_OFFSET_TEXT.format(offset=format_utc_offset(record.utc_offset))]
    if record.alarm_enabled:
        lines.append(ALARM_MENU_TEXT.format(lead=minutes_text(record.alarm_lead_minutes)))
    else:
        lines.append(ALARM_MENU_DISABLED_TEXT)
    return "\n".join(lines)
