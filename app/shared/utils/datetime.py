"""UTC datetime helpers.

Every datetime stored or compared by the gateway is timezone-aware UTC.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time as an aware UTC datetime (never datetime.utcnow())."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to a naive datetime; convert an aware one to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def seconds_until(moment: datetime, now: datetime | None = None) -> int:
    """Whole seconds from now until moment (negative if moment has passed)."""
    return int((ensure_utc(moment) - (now or utc_now())).total_seconds())
