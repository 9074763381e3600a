"""User Filtering: read-time pruning of shifts whose user no longer exists.

Invariants:
    - Never persisted: the stored document keeps stale user references
    - Window bounds are untouched; only shifts are removed
"""

from dataclasses import replace
from typing import Collection, Iterable

from tempsched.core.domain_types import UserId
from tempsched.core.temporary_schedule import TemporarySchedule


def referenced_user_ids(
    schedules: Iterable[TemporarySchedule],
) -> set[UserId]:
    return {s.user_id for tmp in schedules for s in tmp.shifts}


def omit_missing_users(
    schedules: Iterable[TemporarySchedule],
    existing_user_ids: Collection[UserId],
) -> tuple[TemporarySchedule, ...]:
    """Drop shifts assigned to users outside `existing_user_ids`."""
    return tuple(
        replace(
            tmp,
            shifts=tuple(
                s for s in tmp.shifts if s.user_id in existing_user_ids
            ),
        )
        for tmp in schedules
    )
