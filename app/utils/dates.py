from datetime import date, datetime, timedelta, timezone


def parse_iso8601(value: str) -> date:
    """Parse an ISO-8601 date or date-time and return its calendar date.

    Raises ValueError when the value is not well formed.
    """
    text = value.strip()
    if not text:
        raise ValueError("empty date")
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text).date()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive values are stored as UTC, so they only need the tzinfo attached."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def next_timestamp(previous: datetime | None) -> datetime:
    """Current UTC time, nudged forward so it is strictly after `previous`."""
    now = utc_now()
    if previous is None:
        return now
    previous = as_utc(previous)
    if now <= previous:
        return previous + timedelta(microseconds=1)
    return now
