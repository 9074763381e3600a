"""Shift Enforcement: validates a candidate temporary schedule before it reaches the algebra.

Invariants:
    - Pure: returns every FieldError found, in a stable order, never raises
    - Expects an already minute-truncated schedule (truncate_schedule runs first),
      so what is validated is exactly what gets stored
    - MAX_SHIFTS_PER_TEMPORARY_SCHEDULE (150) is the default capacity

Design Decisions:
    - Collect-all over fail-fast: one submission surfaces every problem
    - Capacity breach still runs the per-shift checks so out-of-bounds shifts
      are reported alongside it
"""

from collections import defaultdict
from datetime import datetime
from typing import Collection

from tempsched.core.errors import FieldError
from tempsched.core.field_validation import (
    validate_future, validate_time_range, validate_uuid,
)
from tempsched.core.temporary_schedule import TemporarySchedule


MAX_SHIFTS_PER_TEMPORARY_SCHEDULE: int = 150
MIN_FUTURE_MINUTES: int = 5


def validate_shift_bounds(
    temp: TemporarySchedule, fname: str = "Shifts",
) -> list[FieldError]:
    """Each shift must be non-empty and inside [temp.start, temp.end)."""
    errors: list[FieldError] = []
    for i, s in enumerate(temp.shifts):
        prefix = f"{fname}[{i}]."
        errors.extend(validate_time_range(prefix, s.start, s.end))
        if s.start < temp.start:
            errors.append(FieldError(
                prefix + "Start", "must not be before start of temporary schedule",
            ))
        if s.end > temp.end:
            errors.append(FieldError(
                prefix + "End", "must not be after end of temporary schedule",
            ))
    return errors


def validate_user_overlap(
    temp: TemporarySchedule, fname: str = "Shifts",
) -> list[FieldError]:
    """No two shifts for the same user may overlap."""
    by_user: dict[str, list[int]] = defaultdict(list)
    for i, s in enumerate(temp.shifts):
        by_user[s.user_id].append(i)

    found: list[tuple[int, FieldError]] = []
    for indexes in by_user.values():
        indexes.sort(key=lambda i: (temp.shifts[i].start, temp.shifts[i].end))
        # latest-ending earlier shift for this user
        reach = indexes[0]
        for cur in indexes[1:]:
            if temp.shifts[reach].end > temp.shifts[cur].start:
                found.append((cur, FieldError(
                    f"{fname}[{cur}]",
                    f"overlaps {fname}[{reach}] for the same user",
                )))
            if temp.shifts[cur].end > temp.shifts[reach].end:
                reach = cur
    found.sort(key=lambda pair: pair[0])
    return [e for _, e in found]


def validate_shift_users(
    temp: TemporarySchedule,
    existing_user_ids: Collection[str] | None,
    fname: str = "Shifts",
) -> list[FieldError]:
    """Shift users must be well-formed and, when a lookup is given, exist."""
    errors: list[FieldError] = []
    for i, s in enumerate(temp.shifts):
        field = f"{fname}[{i}].UserID"
        bad_format = validate_uuid(field, s.user_id)
        if bad_format:
            errors.extend(bad_format)
        elif existing_user_ids is not None and s.user_id not in existing_user_ids:
            errors.append(FieldError(field, "user does not exist"))
    return errors


def validate_temporary_schedule(
    temp: TemporarySchedule,
    now: datetime,
    max_shifts: int = MAX_SHIFTS_PER_TEMPORARY_SCHEDULE,
    min_future_minutes: int = MIN_FUTURE_MINUTES,
    existing_user_ids: Collection[str] | None = None,
) -> list[FieldError]:
    """All rules for a set request, aggregated."""
    errors = [
        *validate_future("End", temp.end, now, min_future_minutes),
        *validate_time_range("", temp.start, temp.end),
    ]
    if len(temp.shifts) > max_shifts:
        errors.append(FieldError(
            "Shifts", f"must not have more than {max_shifts} shifts",
        ))
    errors.extend(validate_shift_bounds(temp))
    errors.extend(validate_user_overlap(temp))
    errors.extend(validate_shift_users(temp, existing_user_ids))
    return errors
