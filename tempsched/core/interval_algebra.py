"""Interval Algebra: set, clear and merge over the canonical list of temporary schedules.

Invariants:
    - Inputs are never mutated; every operation returns a new tuple
    - Outputs are sorted by start and pairwise non-overlapping (end <= next.start)
    - Remainders only ever clip shifts; a shift is never duplicated or extended
    - merge never leaves two overlapping shifts for the same user

Design Decisions:
    - set = clear + insert: the new window claims its whole span unconditionally,
      so there is a single splitting code path (clear_temporary_schedules)
    - merge coalesces touching windows (end == next.start) as well as overlapping
      ones; same-user shifts that touch or overlap after coalescing are joined
"""

from dataclasses import replace
from datetime import datetime
from typing import Iterable

from tempsched.core.errors import IntervalInvariantError
from tempsched.core.temporary_schedule import (
    Shift, TemporarySchedule, trim_end, trim_start,
)


def _by_start(schedules: Iterable[TemporarySchedule]) -> list[TemporarySchedule]:
    return sorted(schedules, key=lambda t: t.start)


def check_no_overlap(schedules: Iterable[TemporarySchedule]) -> None:
    """Raise IntervalInvariantError unless sorted and non-overlapping."""
    prev: TemporarySchedule | None = None
    for tmp in schedules:
        if tmp.start >= tmp.end:
            raise IntervalInvariantError(
                f"empty temporary schedule at {tmp.start.isoformat()}",
            )
        if prev is not None and prev.end > tmp.start:
            raise IntervalInvariantError(
                f"temporary schedules overlap: {prev.start.isoformat()}-"
                f"{prev.end.isoformat()} and {tmp.start.isoformat()}-"
                f"{tmp.end.isoformat()}",
            )
        prev = tmp


def clear_temporary_schedules(
    schedules: Iterable[TemporarySchedule], start: datetime, end: datetime,
) -> tuple[TemporarySchedule, ...]:
    """Remove [start, end) from every window, splitting partial overlaps."""
    result: list[TemporarySchedule] = []
    for tmp in schedules:
        if not tmp.overlaps(start, end):
            result.append(tmp)
            continue
        if tmp.start < start:
            result.append(trim_end(tmp, start))
        if tmp.end > end:
            result.append(trim_start(tmp, end))
    return tuple(_by_start(result))


def set_temporary_schedule(
    schedules: Iterable[TemporarySchedule], temp: TemporarySchedule,
) -> tuple[TemporarySchedule, ...]:
    """Insert `temp`, overriding whatever it intersects."""
    result = _by_start(
        [*clear_temporary_schedules(schedules, temp.start, temp.end), temp],
    )
    check_no_overlap(result)
    return tuple(result)


def merge_shifts(shifts: Iterable[Shift]) -> tuple[Shift, ...]:
    """Sort by start and join each user's touching or overlapping shifts."""
    result: list[Shift] = []
    last_for_user: dict[str, int] = {}
    for s in sorted(shifts, key=lambda s: (s.start, s.end)):
        idx = last_for_user.get(s.user_id)
        if idx is not None and s.start <= result[idx].end:
            if s.end > result[idx].end:
                result[idx] = replace(result[idx], end=s.end)
            continue
        last_for_user[s.user_id] = len(result)
        result.append(s)
    return tuple(result)


def merge_temporary_schedules(
    schedules: Iterable[TemporarySchedule],
) -> tuple[TemporarySchedule, ...]:
    """Canonical read view: coalesce touching windows and their shifts."""
    merged: list[TemporarySchedule] = []
    for tmp in _by_start(schedules):
        if tmp.start >= tmp.end:
            continue
        if not merged or tmp.start > merged[-1].end:
            merged.append(tmp)
            continue
        last = merged[-1]
        merged[-1] = TemporarySchedule(
            start=last.start,
            end=max(last.end, tmp.end),
            shifts=last.shifts + tmp.shifts,
        )
    return tuple(replace(t, shifts=merge_shifts(t.shifts)) for t in merged)
