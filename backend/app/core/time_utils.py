import math
from datetime import datetime, timezone


def hhmmss_to_seconds(hhmmss: str) -> int:
    """
    Convert 'HH:MM:SS' -> total seconds (int).
    Example: '00:45:32' -> 2732
    """
    parts = hhmmss.split(":")
    if len(parts) != 3:
        raise ValueError("Duration must be in HH:MM:SS format")

    hours, minutes, seconds = map(int, parts)
    if minutes >= 60 or seconds >= 60 or min(hours, minutes, seconds) < 0:
        raise ValueError("Duration must be in HH:MM:SS format")
    return hours * 3600 + minutes * 60 + seconds


def seconds_to_hhmmss(total_seconds: int) -> str:
    """
    Convert total seconds (int) -> 'HH:MM:SS'.
    Example: 2732 -> '00:45:32'
    """
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_elapsed(total_seconds: int) -> str:
    """Short clock used for workout timers.

    'H:MM:SS' once an hour has passed, otherwise 'M:SS'.
    Example: 4523 -> '1:15:23', 95 -> '1:35'
    """
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def ensure_aware(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on the way back)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def to_utc(dt: datetime) -> datetime:
    return ensure_aware(dt).astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def elapsed_seconds(start: datetime, end: datetime) -> int:
    """Whole seconds between two instants, floored, never negative."""
    delta = (ensure_aware(end) - ensure_aware(start)).total_seconds()
    return max(0, math.floor(delta))


def to_local_datetime(dt, tz_name: str | None = None):
    """Convert a datetime from source tz (assume UTC if naive) to local or given tz.

    - If `tz_name` is 'local' or None: use system local timezone.
    - If `tz_name` is IANA tz name (e.g., 'America/New_York'): use that.
    """
    dt = ensure_aware(dt)
    if tz_name and tz_name != "local":
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
        try:
            return dt.astimezone(ZoneInfo(tz_name))
        except (ZoneInfoNotFoundError, ValueError):
            return dt.astimezone()
    return dt.astimezone()
