from __future__ import annotations

from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

# Timestamps carry millisecond precision, so the day ends at .999.
END_OF_DAY = time(23, 59, 59, 999000)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_iso(ts: str | datetime, tz: str | ZoneInfo = "UTC") -> datetime:
    """Parse an ISO-8601 timestamp into an aware datetime.

    Naive values get ``tz`` attached. Datetime inputs pass through the same
    rule so callers can hand over either form.
    """
    if isinstance(ts, datetime):
        dt = ts
    else:
        dt = datetime.fromisoformat(ts.strip().replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz if isinstance(tz, ZoneInfo) else ZoneInfo(tz))
    return dt


def to_iso(dt: datetime) -> str:
    """UTC ISO string with millisecond precision and a ``Z`` suffix."""

    return parse_iso(dt).astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_day(value: str | date) -> date:
    """Accept a ``date`` or a ``YYYY-MM-DD`` string."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip())


def day_bounds(day: str | date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """First and last instant of a calendar day in ``tz``, both inclusive."""

    day = parse_day(day)
    return (
        datetime.combine(day, time.min, tzinfo=tz),
        datetime.combine(day, END_OF_DAY, tzinfo=tz),
    )
