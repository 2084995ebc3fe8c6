"""Timezone resolution and current time for reminder evaluation."""
import logging
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = 'Asia/Tokyo'
DEFAULT_FALLBACK_OFFSET_HOURS = 9


def load_timezone(
    name: str = DEFAULT_TIMEZONE,
    fallback_offset_hours: int = DEFAULT_FALLBACK_OFFSET_HOURS
) -> tzinfo:
    """
    Resolve a named timezone, falling back to a fixed UTC offset.

    Args:
        name: IANA timezone name
        fallback_offset_hours: Offset used when the timezone database is unavailable

    Returns:
        tzinfo for the named zone, or a fixed-offset zone carrying the same name
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.warning(
            f"Timezone '{name}' unavailable ({e}), "
            f"using fixed offset UTC{fallback_offset_hours:+d}"
        )
        return timezone(timedelta(hours=fallback_offset_hours), name)


def current_time(tz: tzinfo) -> datetime:
    """Return the current instant in the given timezone."""
    return datetime.now(tz)
