"""Shift Enforcement: tests for aggregated temporary schedule validation.

Tests cover:
    - a valid schedule produces no errors
    - end must be more than five minutes in the future
    - start must precede end; shifts must be non-empty and inside the window
    - capacity (150) is enforced and reported with other problems together
    - same-user overlaps are rejected, different users may overlap
    - user ids must be UUIDs and, when a lookup is given, exist
"""

from datetime import timedelta

from tempsched.core.enforce_shifts import (
    MAX_SHIFTS_PER_TEMPORARY_SCHEDULE,
    validate_temporary_schedule,
)
from tempsched.core.temporary_schedule import Shift, TemporarySchedule
from tests.factories import CLOCK_NOW, USER_A, USER_B, at, shift, window


def _fields(errors):
    return [e.field for e in errors]


def test_valid_schedule_has_no_errors():
    tmp = window("10:00", "12:00", shift("10:00", "11:00"), shift("10:00", "12:00", USER_B))
    assert validate_temporary_schedule(tmp, CLOCK_NOW) == []


def test_end_within_five_minutes_is_rejected():
    now = at("09:56")
    tmp = window("09:00", "10:00")
    assert _fields(validate_temporary_schedule(tmp, now)) == ["End"]


def test_end_exactly_five_minutes_ahead_is_rejected():
    tmp = window("09:00", "10:00")
    errors = validate_temporary_schedule(tmp, at("10:00") - timedelta(minutes=5))
    assert _fields(errors) == ["End"]


def test_start_after_end_is_rejected():
    tmp = window("12:00", "10:00")
    assert "End" in _fields(validate_temporary_schedule(tmp, CLOCK_NOW))


def test_empty_shift_is_rejected():
    tmp = window("10:00", "12:00", shift("11:00", "11:00"))
    assert _fields(validate_temporary_schedule(tmp, CLOCK_NOW)) == ["Shifts[0].End"]


def test_shift_outside_window_is_rejected():
    tmp = window("10:00", "12:00", shift("09:30", "10:30"), shift("11:30", "12:30", USER_B))
    assert _fields(validate_temporary_schedule(tmp, CLOCK_NOW)) == [
        "Shifts[0].Start", "Shifts[1].End",
    ]


def test_capacity_and_out_of_bounds_are_reported_together():
    base = at("10:00")
    shifts = [
        Shift(
            start=base + timedelta(minutes=i),
            end=base + timedelta(minutes=i + 1),
            user_id=USER_A,
        )
        for i in range(MAX_SHIFTS_PER_TEMPORARY_SCHEDULE + 1)
    ]
    shifts.append(Shift(start=at("07:00"), end=at("08:00"), user_id=USER_B))
    tmp = TemporarySchedule(start=base, end=at("20:00"), shifts=tuple(shifts))

    fields = _fields(validate_temporary_schedule(tmp, CLOCK_NOW))

    assert "Shifts" in fields
    assert f"Shifts[{len(shifts) - 1}].Start" in fields


def test_capacity_is_configurable():
    tmp = window("10:00", "12:00", shift("10:00", "11:00"), shift("11:00", "12:00"))
    errors = validate_temporary_schedule(tmp, CLOCK_NOW, max_shifts=1)
    assert _fields(errors) == ["Shifts"]


def test_same_user_overlap_is_rejected():
    tmp = window("10:00", "12:00", shift("10:00", "11:00"), shift("10:30", "12:00"))
    errors = validate_temporary_schedule(tmp, CLOCK_NOW)
    assert _fields(errors) == ["Shifts[1]"]
    assert "Shifts[0]" in errors[0].message


def test_long_shift_overlapping_several_later_shifts_reports_each():
    tmp = window(
        "10:00", "14:00",
        shift("10:00", "14:00"), shift("11:00", "12:00"), shift("12:30", "13:00"),
    )
    errors = validate_temporary_schedule(tmp, CLOCK_NOW)
    assert _fields(errors) == ["Shifts[1]", "Shifts[2]"]
    assert all("Shifts[0]" in e.message for e in errors)


def test_overlap_errors_ordered_by_shift_index():
    shifts = [shift(f"{10 + i}:00", f"{11 + i}:00") for i in range(10)]
    shifts[2] = shift("11:30", "13:00")
    shifts.append(shift("10:30", "10:45"))
    tmp = window("10:00", "21:00", *shifts)
    errors = validate_temporary_schedule(tmp, CLOCK_NOW)
    assert _fields(errors) == ["Shifts[2]", "Shifts[10]"]


def test_touching_shifts_for_same_user_are_allowed():
    tmp = window("10:00", "12:00", shift("10:00", "11:00"), shift("11:00", "12:00"))
    assert validate_temporary_schedule(tmp, CLOCK_NOW) == []


def test_malformed_user_id_is_rejected():
    tmp = window("10:00", "12:00", shift("10:00", "11:00", "not-a-uuid"))
    assert _fields(validate_temporary_schedule(tmp, CLOCK_NOW)) == ["Shifts[0].UserID"]


def test_unknown_user_is_rejected_when_lookup_given():
    tmp = window("10:00", "12:00", shift("10:00", "11:00"), shift("11:00", "12:00", USER_B))
    errors = validate_temporary_schedule(tmp, CLOCK_NOW, existing_user_ids={USER_A})
    assert _fields(errors) == ["Shifts[1].UserID"]
    assert errors[0].message == "user does not exist"


def test_every_problem_is_collected():
    tmp = window(
        "12:00", "08:00",
        shift("13:00", "12:30"),
        shift("07:00", "07:30", "nope"),
    )
    fields = _fields(validate_temporary_schedule(tmp, CLOCK_NOW))
    assert {"End", "Shifts[0].End", "Shifts[1].UserID"} <= set(fields)
