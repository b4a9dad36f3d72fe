# === ./wbnoti/config.py === #
import os
from dotenv import load_dotenv
from datetime import timedelta
from wbnoti.utils import parse_interval, interval_to_timedelta

load_dotenv()

RAW_GUILD_IDS = os.getenv("GUILD_IDS", "")
GUILD_IDS = [int(gid.strip()) for gid in RAW_GUILD_IDS.split(",") if gid.strip().isdigit()]
GUILD_MODE = bool(GUILD_IDS)

DISCORD_BOT_TOKEN = os.getenv('DISCORD_BOT_TOKEN')
DISCORD_APPLICATION_ID = os.getenv('DISCORD_APPLICATION_ID')

DATA_PATH = os.getenv("DATA_PATH", "./data/wbnoti.json")

UPDATE_INTERVAL = interval_to_timedelta(
    *parse_interval(os.getenv('UPDATE_INTERVAL', '30s'))
) or timedelta(seconds=30)

# Ticks can run late; an alarm is considered due this much before its lead time.
TICK_SLACK = UPDATE_INTERVAL * 1.5

SCHEDULE_LENGTH = int(os.getenv("SCHEDULE_LENGTH", "10000"))


def require_credentials():
    if not DISCORD_BOT_TOKEN or not DISCORD_APPLICATION_ID:
        raise EnvironmentError("Missing DISCORD_BOT_TOKEN or DISCORD_APPLICATION_ID in .env file")
