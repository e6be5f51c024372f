#!/usr/bin/env python3
"""
Datetime Utility Functions

Stores keep timestamps as ISO 8601 strings with a 'Z' suffix and
millisecond precision, e.g. ``2026-02-10T10:00:00.000Z``.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Timezone-aware current time in UTC (the default clock)."""
    return datetime.now(UTC)


def to_iso(value: datetime) -> str:
    """
    Serialize a datetime as an ISO timestamp with 'Z' suffix.

    Naive datetimes are assumed to be UTC.

    Examples:
        >>> to_iso(datetime(2026, 2, 10, 10, 0, tzinfo=UTC))
        '2026-02-10T10:00:00.000Z'
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(timestamp_str: str | None) -> datetime | None:
    """
    Parse an ISO timestamp (with or without 'Z' suffix) into an aware datetime.

    Returns:
        datetime in UTC, or None if input is None/empty

    Raises:
        ValueError: If timestamp format is invalid
    """
    if not timestamp_str:
        return None

    if not isinstance(timestamp_str, str):
        raise ValueError(f"Timestamp must be a string, got {type(timestamp_str)}")

    try:
        parsed = datetime.fromisoformat(timestamp_str.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValueError(f"Invalid timestamp format: {timestamp_str}") from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def epoch_millis(value: datetime) -> int:
    """Milliseconds since the Unix epoch."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return int(value.timestamp() * 1000)
