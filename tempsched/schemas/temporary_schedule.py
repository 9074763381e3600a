"""Temporary Schedule Schemas: API request and response bodies.

Invariants:
    - Field names on the wire match the stored document (userID, not user_id)
    - Shape checks only; scheduling rules live in core/enforce_shifts.py
"""

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from tempsched.core.domain_types import UserId
from tempsched.core.temporary_schedule import Shift, TemporarySchedule


class ShiftBody(BaseModel):
    """One user's shift inside a temporary schedule."""
    model_config = ConfigDict(populate_by_name=True)

    start: AwareDatetime
    end: AwareDatetime
    user_id: str = Field(alias="userID", min_length=1)

    def to_domain(self) -> Shift:
        return Shift(
            start=self.start, end=self.end, user_id=UserId(self.user_id),
        )

    @classmethod
    def from_domain(cls, shift: Shift) -> "ShiftBody":
        return cls(start=shift.start, end=shift.end, user_id=shift.user_id)


class TemporaryScheduleBody(BaseModel):
    """Request and response body for one temporary schedule."""
    start: AwareDatetime
    end: AwareDatetime
    shifts: list[ShiftBody] = Field(default_factory=list)

    def to_domain(self) -> TemporarySchedule:
        return TemporarySchedule(
            start=self.start,
            end=self.end,
            shifts=tuple(s.to_domain() for s in self.shifts),
        )

    @classmethod
    def from_domain(cls, temp: TemporarySchedule) -> "TemporaryScheduleBody":
        return cls(
            start=temp.start,
            end=temp.end,
            shifts=[ShiftBody.from_domain(s) for s in temp.shifts],
        )


class ClearTemporarySchedulesBody(BaseModel):
    """Time range to clear."""
    start: AwareDatetime
    end: AwareDatetime


class TemporarySchedulesResponse(BaseModel):
    schedule_id: str = Field(alias="scheduleID")
    temporary_schedules: list[TemporaryScheduleBody] = Field(
        alias="temporarySchedules",
    )

    model_config = ConfigDict(populate_by_name=True)
