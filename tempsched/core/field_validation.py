"""Field Validation: small pure checks shared by every write path.

Invariants:
    - Every check returns a list of FieldError (empty when valid), never raises
    - truncate_to_minute is idempotent and keeps the timezone
    - ceil_to_minute(t) >= t, so a clamp to it never reaches into the past
    - Callers pass `now` explicitly; nothing here reads the clock

Design Decisions:
    - Lists over Optional[FieldError]: validators are concatenated with `*`
      and the caller raises once with everything that failed
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

from tempsched.core.errors import FieldError


def truncate_to_minute(t: datetime) -> datetime:
    """Drop seconds and sub-seconds, normalising to UTC."""
    if t.tzinfo is not None:
        t = t.astimezone(timezone.utc)
    return t.replace(second=0, microsecond=0)


def ceil_to_minute(t: datetime) -> datetime:
    """Round up to the next whole minute; exact minutes are kept."""
    floor = truncate_to_minute(t)
    return floor if floor == t else floor + timedelta(minutes=1)


def validate_future(
    field_name: str, t: datetime, now: datetime, minutes: int = 5,
) -> list[FieldError]:
    """`t` must be strictly more than `minutes` ahead of `now`."""
    if t - now > timedelta(minutes=minutes):
        return []
    return [FieldError(field_name, f"must be at least {minutes} min in the future")]


def validate_time_range(
    prefix: str, start: datetime, end: datetime,
) -> list[FieldError]:
    if end > start:
        return []
    return [FieldError(prefix + "End", "must be after Start")]


def validate_uuid(field_name: str, value: str) -> list[FieldError]:
    try:
        UUID(str(value))
    except ValueError:
        return [FieldError(field_name, "must be a valid UUID")]
    return []
