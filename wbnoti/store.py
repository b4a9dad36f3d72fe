"""
Module: wbnoti/store.py

Handles the JSON subscriber file: loading, whole-file saving, and the
load -> mutate -> save transactions used by slash commands and the scheduler.
"""
import asyncio
import json
import os
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from wbnoti.errors import ParseError, StoreIOError, SubscriberNotFoundError
from wbnoti.utils import EPOCH, format_timestamp, log_message, parse_timestamp

# Dedup sentinel: "never notified".
NEVER = EPOCH

DEFAULT_UTC_OFFSET = 0
DEFAULT_ALARM_LEAD = 0
MAX_ALARM_LEAD = 300
MIN_UTC_OFFSET = -12
MAX_UTC_OFFSET = 14


def _clamp(value, low, high):
    return max(low, min(high, value))


@dataclass
class SubscriberRecord:
    """
    Alarm settings for one subscriber (a Discord channel).

    Attributes:
        id (str): Subscriber key, unique across the store.
        utc_offset (int): Hours added to UTC when showing local times.
        alarm_lead_minutes (int): Minutes before a spawn to send the alarm; 0 disables it.
        last_notified_spawn_at (datetime): Spawn time of the last alarm armed, NEVER if none.
        menu_message_ref (int): ID of the current menu message, 0 if none.
    """
    id: str
    utc_offset: int = DEFAULT_UTC_OFFSET
    alarm_lead_minutes: int = DEFAULT_ALARM_LEAD
    last_notified_spawn_at: datetime = NEVER
    menu_message_ref: int = 0

    @property
    def alarm_enabled(self):
        return self.alarm_lead_minutes > 0

    def reset_notified(self):
        self.last_notified_spawn_at = NEVER

    def to_dict(self):
        return {
            "id": self.id,
            "utc_offset": self.utc_offset,
            "alarm_lead_minutes": self.alarm_lead_minutes,
            "last_notified_spawn_at": format_timestamp(self.last_notified_spawn_at),
            "menu_message_ref": self.menu_message_ref,
        }

    @classmethod
    def from_dict(cls, data):
        """
        Build a record from its JSON form. Missing optional fields fall back to defaults.

        Raises:
            ParseError: the entry is not an object, lacks an id, or has values of the wrong type.
        """
        if not isinstance(data, dict) or "id" not in data:
            raise ParseError(f"subscriber entry without an id: {data!r}")
        try:
            notified = data.get("last_notified_spawn_at")
            return cls(
                id=str(data["id"]),
                utc_offset=int(data.get("utc_offset", DEFAULT_UTC_OFFSET)),
                alarm_lead_minutes=int(data.get("alarm_lead_minutes", DEFAULT_ALARM_LEAD)),
                last_notified_spawn_at=parse_timestamp(notified) if notified else NEVER,
                menu_message_ref=int(data.get("menu_message_ref", 0)),
            )
        except (TypeError, ValueError) as e:
            raise ParseError(f"bad subscriber entry {data.get('id')!r}: {e}") from e


class SubscriberStore:
    """
    File-backed collection of SubscriberRecords, keyed by id.

    Every mutation re-reads the whole file, changes records in memory and
    writes the whole file back. `lock` is held for that entire sequence so
    concurrent commands and scheduler ticks cannot overwrite each other.

    Attributes:
        path (Path): Location of the JSON document.
        lock (asyncio.Lock): Guards every load -> mutate -> save sequence.
    """
    def __init__(self, path):
        self.path = Path(path)
        self.lock = asyncio.Lock()

    def load(self):
        """
        Read all records. A missing or blank file is an empty collection.
        A malformed file is logged, moved aside to `<name>.corrupt` and treated as empty.

        Raises:
            StoreIOError: the file exists but could not be read.
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StoreIOError(f"Could not read {self.path}: {e}") from e

        try:
            return self._decode(raw)
        except ParseError as e:
            log_message(f"{e}. Starting with an empty subscriber list.", "error")
            self._quarantine()
            return {}

    def _decode(self, raw):
        if not raw.strip():
            return {}
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ParseError(f"invalid JSON ({e})", self.path) from e
        if not isinstance(document, dict) or not isinstance(document.get("subscribers", []), list):
            raise ParseError("expected an object with a 'subscribers' list", self.path)

        records = {}
        for entry in document.get("subscribers", []):
            record = SubscriberRecord.from_dict(entry)
            if record.id in records:
                log_message(f"Duplicate subscriber {record.id} in {self.path}, keeping the last entry", "warning")
            records[record.id] = record
        return records

    def _quarantine(self):
        target = self.path.with_name(self.path.name + ".corrupt")
        try:
            os.replace(self.path, target)
            log_message(f"Moved unreadable subscriber file to {target}", "warning")
        except OSError as e:
            log_message(f"Could not move {self.path} aside: {e}", "warning")

    def save(self, records):
        """
        Replace the file with `records`. The document is written to a temporary
        file first and renamed over the target.

        Raises:
            StoreIOError: the file could not be written; the old file is left as it was.
        """
        document = {"subscribers": [record.to_dict() for record in records.values()]}
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as handle:
                json.dump(document, handle, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StoreIOError(f"Could not write {self.path}: {e}") from e
        log_message(f"Wrote {len(records)} subscriber(s) to {self.path}", "debug")

    @staticmethod
    def _snapshot(records):
        return {key: record.to_dict() for key, record in records.items()}

    @asynccontextmanager
    async def transaction(self):
        """
        Hold the store lock, load every record and yield the dict for mutation.
        On a clean exit the file is saved if anything changed. An exception
        inside the block skips the save.
        """
        async with self.lock:
            records = self.load()
            before = self._snapshot(records)
            yield records
            if self._snapshot(records) != before:
                self.save(records)

    async def get(self, subscriber_id):
        async with self.lock:
            records = self.load()
        try:
            return records[str(subscriber_id)]
        except KeyError:
            raise SubscriberNotFoundError(str(subscriber_id)) from None

    async def upsert(self, record):
        async with self.transaction() as records:
            records[record.id] = record

    async def _update(self, subscriber_id, mutate):
        """
        Apply `mutate` to a subscriber inside one transaction, creating the
        record first if needed. Returns the updated record.
        """
        subscriber_id = str(subscriber_id)
        async with self.transaction() as records:
            record = records.get(subscriber_id)
            if record is None:
                log_message(f"Subscriber {subscriber_id} not found, creating it", "info")
                record = records[subscriber_id] = SubscriberRecord(id=subscriber_id)
            mutate(record)
            return record

    async def get_or_create(self, subscriber_id):
        return await self._update(subscriber_id, lambda record: None)

    async def set_alarm_lead(self, subscriber_id, minutes):
        """
        Set the alarm lead time and reset the dedup sentinel in the same update,
        so the next tick re-arms the alarm for the upcoming spawn.
        """
        def mutate(record):
            record.alarm_lead_minutes = _clamp(int(minutes), 0, MAX_ALARM_LEAD)
            record.reset_notified()
        return await self._update(subscriber_id, mutate)

    async def adjust_alarm_lead(self, subscriber_id, delta):
        def mutate(record):
            record.alarm_lead_minutes = _clamp(record.alarm_lead_minutes + int(delta), 0, MAX_ALARM_LEAD)
            record.reset_notified()
        return await self._update(subscriber_id, mutate)

    async def set_utc_offset(self, subscriber_id, hours):
        def mutate(record):
            record.utc_offset = _clamp(int(hours), MIN_UTC_OFFSET, MAX_UTC_OFFSET)
        return await self._update(subscriber_id, mutate)

    async def adjust_utc_offset(self, subscriber_id, delta):
        def mutate(record):
            record.utc_offset = _clamp(record.utc_offset + int(delta), MIN_UTC_OFFSET, MAX_UTC_OFFSET)
        return await self._update(subscriber_id, mutate)

    async def set_menu_message(self, subscriber_id, message_ref):
        def mutate(record):
            record.menu_message_ref = int(message_ref or 0)
        return await self._update(subscriber_id, mutate)
