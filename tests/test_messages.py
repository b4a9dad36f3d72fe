"""
Tests for the message texts in wbnoti/messages.py.
Run with: pytest tests/test_messages.py
"""
from datetime import datetime, UTC

from wbnoti.messages import (
    format_alarm,
    format_alarm_menu,
    format_alarm_status,
    format_next_spawn,
    format_offset_menu,
    format_settings_menu,
)
from wbnoti.schedule import Occurrence
from wbnoti.store import SubscriberRecord

OCCURRENCE = Occurrence("Wandering Death", datetime(2023, 6, 12, 10, 30, 54, 600000, tzinfo=UTC))


def test_alarm_text():
    assert format_alarm(Occurrence("Ashava", OCCURRENCE.spawn_at), 10) == "**Ashava** | `10 minutes`"
    assert format_alarm(OCCURRENCE, 1) == "**Wandering Death** | `1 minute`"
    assert format_alarm(OCCURRENCE, 21) == "**Wandering Death** | `21 minute`"


def test_next_spawn_rounds_up_and_applies_offset():
    now = datetime(2023, 6, 12, 10, 0, tzinfo=UTC)
    assert format_next_spawn(OCCURRENCE, now, 3) == (
        "**Wandering Death** | `31m0s`\n2023-06-12 13:31:00 UTC+3."
    )


def test_next_spawn_negative_offset_crosses_midnight():
    now = datetime(2023, 6, 12, 9, 0, tzinfo=UTC)
    assert format_next_spawn(OCCURRENCE, now, -12) == (
        "**Wandering Death** | `1h31m0s`\n2023-06-11 22:31:00 UTC-12."
    )


def test_alarm_status():
    assert format_alarm_status(0) == "Alarm | `Disabled`"
    assert format_alarm_status(15) == "Alarm | `15 minutes`"


def test_alarm_menu():
    assert format_alarm_menu(0).splitlines() == ["**World Boss | Settings | Alarm**", "Alarm: `Disabled`"]
    assert format_alarm_menu(1).splitlines()[1] == "Alarm: `1 minute`"


def test_offset_menu():
    assert format_offset_menu(-5).splitlines() == [
        "**World Boss | Settings | Time offset**",
        "Time offset: `UTC-5`",
    ]


def test_settings_menu():
    record = SubscriberRecord(id="1", utc_offset=2, alarm_lead_minutes=30)
    assert format_settings_menu(record).splitlines() == [
        "**World Boss | Settings**",
        "Time offset: `UTC+2`",
        "Alarm: `30 minutes`",
    ]
    assert format_settings_menu(SubscriberRecord(id="2")).splitlines()[2] == "Alarm: `Disabled`"
