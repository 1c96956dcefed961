from __future__ import annotations

from datetime import date, datetime, timezone


UTC = timezone.utc


def utcnow() -> datetime:
    """
    Returns timezone-aware current UTC time.
    """
    return datetime.now(UTC)


def ensure_aware(dt: datetime, assume_utc: bool = True) -> datetime:
    """
    Ensure a datetime is timezone-aware. If naive and assume_utc is True,
    interpret as UTC; otherwise raise ValueError.
    """
    if dt.tzinfo is not None:
        return dt
    if assume_utc:
        return dt.replace(tzinfo=UTC)
    raise ValueError("Naive datetime provided and assume_utc=False")


def parse_iso_date(value: str) -> date:
    """
    Parse a YYYY-MM-DD query value. A full ISO timestamp is accepted and
    reduced to its date part; anything else raises ValueError.
    """
    value = value.strip()
    # fromisoformat only accepts a trailing Z from Python 3.11
    if value[-1:] in ("Z", "z"):
        value = value[:-1] + "+00:00"
    try:
        return date.fromisoformat(value)
    except ValueError:
        return datetime.fromisoformat(value).date()
