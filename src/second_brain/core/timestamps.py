"""UTC timestamp helpers.

Every ``uploadDate`` is written as ``YYYY-MM-DDTHH:MM:SS.mmmZ``. All values share
one fixed width, so lexicographic order equals chronological order.
"""

from datetime import date, datetime, timezone

_ISO_FORMAT = "%Y-%m-%dT%H:%M:%S"


def format_timestamp(value: datetime) -> str:
    """Render an aware or naive (assumed UTC) datetime in the canonical form."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return f"{value.strftime(_ISO_FORMAT)}.{value.microsecond // 1000:03d}Z"


def utc_now_iso() -> str:
    """Current time in the canonical form."""
    return format_timestamp(datetime.now(timezone.utc))


def parse_timestamp(value: str | date | datetime) -> datetime:
    """Parse a date, datetime or ISO-8601 string into an aware UTC datetime.

    Date-only values are interpreted as midnight UTC.

    Raises:
        ValueError: If the string is not ISO-8601.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def to_iso_timestamp(value: str | date | datetime) -> str:
    """Normalize any accepted date input to the canonical form."""
    return format_timestamp(parse_timestamp(value))


_EPOCH_FLOOR = datetime.min.replace(tzinfo=timezone.utc)


def timestamp_sort_key(value: str | None) -> datetime:
    """Sort key for stored timestamps; missing or malformed values sort oldest."""
    if not value:
        return _EPOCH_FLOOR
    try:
        return parse_timestamp(value)
    except ValueError:
        return _EPOCH_FLOOR
