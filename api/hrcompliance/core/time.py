"""Clock helpers shared by the compliance engine and the API layer.

All timestamps are handled as naive UTC datetimes so they compare cleanly
with the TIMESTAMP WITHOUT TIME ZONE columns used by the models.
"""
from datetime import date, datetime, time, timezone
from typing import Optional


def utc_now() -> datetime:
    """Return the current UTC time as a naive datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def start_of_day(value: date) -> datetime:
    """Midnight UTC at the start of a calendar date."""
    return datetime.combine(value, time.min)


def to_utc_iso(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 string with an explicit UTC designator ("Z")."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
