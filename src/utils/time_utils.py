"""Clock helpers. Services take a clock callable so tests can pin time."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def elapsed_ms(start: datetime, end: datetime) -> int:
    """Milliseconds from ``start`` to ``end``."""
    return int((end - start).total_seconds() * 1000)


def date_key(moment: datetime, tz_name: str = "UTC") -> str:
    """Operating-day key (YYYY-MM-DD) in the office time zone."""
    return moment.astimezone(ZoneInfo(tz_name)).strftime("%Y-%m-%d")


def as_utc(moment: datetime) -> datetime:
    """Naive timestamps are taken to be UTC; aware ones are converted."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)
