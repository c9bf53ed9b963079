"""
Timestamp helpers shared by the store and the API layer.

All dates leave the service as ISO-8601 UTC strings with millisecond
precision and a ``Z`` suffix, e.g. ``2020-01-15T00:00:00.000Z``. The same
fixed-width format is what the store keeps, so lexicographic order on the
stored string is chronological order.
"""
from datetime import datetime, timezone

ISO_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """Render a datetime as a UTC ISO string; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def from_iso(value: str) -> datetime:
    """Parse a string produced by ``to_iso`` back into an aware datetime."""
    return datetime.strptime(value, ISO_FORMAT).replace(tzinfo=timezone.utc)


def iso_timestamp() -> str:
    """Current time as an ISO string, used in every response envelope."""
    return to_iso(utcnow())
