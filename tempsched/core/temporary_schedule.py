"""Temporary Schedule: immutable window of shifts overriding the normal rotation.

Invariants:
    - start < end for every window and every shift
    - shifts are a tuple: every transformation builds a new window
    - trim_start / trim_end never extend a shift, they only clip or drop it

Design Decisions:
    - Frozen dataclasses over pydantic models: the algebra is hot-path, pure and
      never crosses a trust boundary (wire validation lives in schedule_document)
"""

from dataclasses import dataclass, field, replace
from datetime import datetime

from tempsched.core.domain_types import UserId
from tempsched.core.field_validation import truncate_to_minute


@dataclass(frozen=True)
class Shift:
    """A user's assignment inside a temporary schedule."""
    start: datetime
    end: datetime
    user_id: UserId


@dataclass(frozen=True)
class TemporarySchedule:
    """A [start, end) window whose shifts replace the rotation."""
    start: datetime
    end: datetime
    shifts: tuple[Shift, ...] = field(default_factory=tuple)

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return self.start < end and start < self.end


def truncate_schedule(temp: TemporarySchedule) -> TemporarySchedule:
    """Truncate the window and every shift to minute resolution."""
    return TemporarySchedule(
        start=truncate_to_minute(temp.start),
        end=truncate_to_minute(temp.end),
        shifts=tuple(
            replace(
                s,
                start=truncate_to_minute(s.start),
                end=truncate_to_minute(s.end),
            )
            for s in temp.shifts
        ),
    )


def trim_start(temp: TemporarySchedule, t: datetime) -> TemporarySchedule:
    """Return the part of `temp` at or after `t`."""
    if t <= temp.start:
        return temp
    if t >= temp.end:
        return TemporarySchedule(start=temp.end, end=temp.end)

    shifts = []
    for s in temp.shifts:
        if s.end <= t:
            continue
        if s.start < t:
            s = replace(s, start=t)
        shifts.append(s)
    return TemporarySchedule(start=t, end=temp.end, shifts=tuple(shifts))


def trim_end(temp: TemporarySchedule, t: datetime) -> TemporarySchedule:
    """Return the part of `temp` before `t`."""
    if t >= temp.end:
        return temp
    if t <= temp.start:
        return TemporarySchedule(start=temp.start, end=temp.start)

    shifts = []
    for s in temp.shifts:
        if s.start >= t:
            continue
        if s.end > t:
            s = replace(s, end=t)
        shifts.append(s)
    return TemporarySchedule(start=temp.start, end=t, shifts=tuple(shifts))
