"""
Module: wbnoti/utils.py

Provides utility functions for logging, parsing intervals and formatting times.
"""
import inspect, os, re
from datetime import datetime, timedelta, UTC
from colorama import init, Fore, Style

init(autoreset=True)

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

def log_message(message, level="info"):
    """
    Print a timestamped, colored log message with the caller's relative source path.

    Parameters:
    - message: The log message string.
    - level: One of "info", "debug", "warning", or "error" for coloring.
    """

    frame    = inspect.currentframe().f_back
    fullpath = frame.f_code.co_filename
    cwd      = os.getcwd()
    if fullpath.startswith(cwd + os.sep):
        filename = fullpath[len(cwd)+1:]
    else:
        filename = fullpath
    lineno   = frame.f_lineno

    timestamp = f"[{datetime.now(UTC).strftime('%Y-%m-%d %H:%M:%S')}]"
    color_map = {
        "info": Fore.GREEN,
        "debug": Fore.BLUE,
        "warning": Fore.YELLOW,
        "error": Fore.RED
    }
    level_prefix = f"{level.upper():<7}"
    level_color = color_map.get(level.lower(), Fore.WHITE)

    prefix = f"[{timestamp}] {filename}({lineno}):"
    print(f"{prefix} {level_color}{level_prefix} {message}{Style.RESET_ALL}")


def parse_interval(interval_str):
    """
    Parse an interval string into a (value, unit) tuple.

    Supported formats: digits + unit, where unit is one of
    s, m, h, d, w, optionally with suffixes like "hours", "days".

    Returns (int(value), str(unit)) if valid, otherwise (None, None).
    """
    pattern = r'^(\d+)\s*([smhdw])(?:ec(?:ond)?|in(?:ute)?|our|ay|(?:ee)?k)?s?$'
    match = re.match(pattern, interval_str, re.IGNORECASE)
    if not match:
        return None, None
    return int(match.group(1)), match.group(2).lower()


def interval_to_timedelta(value, unit):
    """
    Convert an interval value and unit into a timedelta.

    Supported units:
      s - seconds
      m - minutes
      h - hours
      d - days
      w - weeks

    Returns a datetime.timedelta or None if the unit is invalid.
    """

    # Guard against missing or invalid inputs
    if value is None or unit is None:
        return None

    delta_map = {
        's': timedelta(seconds=value),
        'm': timedelta(minutes=value),
        'h': timedelta(hours=value),
        'd': timedelta(days=value),
        'w': timedelta(weeks=value)
    }
    return delta_map.get(unit)


def as_utc(dt):
    """
    Return `dt` as an aware UTC datetime. Naive values are taken to be UTC already.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def format_timestamp(dt):
    """Serialize a datetime as RFC 3339 with a trailing 'Z'."""
    return as_utc(dt).isoformat().replace("+00:00", "Z")


def parse_timestamp(value):
    """Parse an RFC 3339 / ISO 8601 timestamp into an aware UTC datetime."""
    return as_utc(datetime.fromisoformat(value))


def round_up_time(dt, step=timedelta(minutes=1)):
    """
    Round `dt` up to the next multiple of `step`. Values already on a boundary
    are returned unchanged.
    """
    remainder = (as_utc(dt) - EPOCH) % step
    if not remainder:
        return dt
    return dt + (step - remainder)


def format_utc_offset(hours):
    """Render an hour offset as 'UTC+3' / 'UTC-5'."""
    sign = "+" if hours >= 0 else "-"
    return f"UTC{sign}{abs(hours)}"


def pluralize(n, singular, plural, include_n=True):
    """Singular when the last digit of `n` is 1 (1, 21, 101), plural otherwise."""
    word = singular if str(abs(n))[-1] == "1" else plural
    if include_n:
        return f"{n} {word}"
    return word


def format_remaining(delta):
    """
    Format a duration the compact way, e.g. '1h0m5s', '2m3s', '45s'.
    Rounded to whole seconds; negative durations are prefixed with '-'.
    """
    total = round(delta.total_seconds())
    sign = "-" if total < 0 else ""
    total = abs(total)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"


def format_command_line(data):
    """
    Rebuild a slash command as the user typed it, e.g. '/wb alarm minutes:10',
    from the raw interaction payload.
    """
    parts = [f"/{data.get('name', '?')}"]
    options = data.get("options", [])
    while options:
        nested = []
        for option in options:
            if "value" in option:
                parts.append(f"{option['name']}:{option['value']}")
            else:
                parts.append(option["name"])
                nested = option.get("options", [])
        options = nested
    return " ".join(parts)
