"""Temporary Schedule Service: list, set and clear operations over one schedule's overrides.

Invariants:
    - Authorization runs before anything else, then identifier validation
    - Write requests are minute-truncated before validation, so what is
      validated is exactly what gets stored
    - All validation problems are raised together as one ScheduleValidationError
    - A new window never claims already-elapsed time: its start (and a clear's
      start) is clamped forward to the next whole minute at or after now
    - Reads filter out deleted users and return the merged, canonical view

Design Decisions:
    - Impureim sandwich: IO (user lookup, store) around pure core functions;
      the mutations handed to the store are plain closures over core/algebra
    - `clock` is injected so tests control "now"
"""

import logging
from datetime import datetime, timezone
from typing import Callable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from tempsched.config import Settings
from tempsched.core.domain_types import Caller, ScheduleId
from tempsched.core.enforce_shifts import validate_temporary_schedule
from tempsched.core.errors import ErrorContext, FieldError, ScheduleValidationError
from tempsched.core.field_validation import (
    ceil_to_minute, truncate_to_minute, validate_future, validate_time_range,
    validate_uuid,
)
from tempsched.core.filter_users import omit_missing_users, referenced_user_ids
from tempsched.core.interval_algebra import (
    clear_temporary_schedules, merge_temporary_schedules, set_temporary_schedule,
)
from tempsched.core.repository_protocols import Authorizer, UserExistence
from tempsched.core.temporary_schedule import (
    TemporarySchedule, trim_start, truncate_schedule,
)
from tempsched.services.schedule_data_store import ScheduleDataStore

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TemporaryScheduleService:
    """Entry point for every temporary-schedule operation."""

    def __init__(
        self,
        store: ScheduleDataStore,
        users: UserExistence,
        authorizer: Authorizer,
        settings: Settings,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = store
        self._users = users
        self._authorizer = authorizer
        self._max_shifts = settings.max_shifts_per_temporary_schedule
        self._min_future_minutes = settings.min_future_minutes
        self._clock = clock

    async def list_temporary_schedules(
        self,
        caller: Caller,
        schedule_id: str,
        session: AsyncSession | None = None,
    ) -> tuple[TemporarySchedule, ...]:
        """Current overrides, without deleted users, merged to canonical form."""
        self._authorizer.check(caller)
        sid = self._schedule_id(schedule_id)

        doc = await self._store.load(sid, session=session)
        existing = await self._users.existing_user_ids(
            referenced_user_ids(doc.temporary_schedules), session=session,
        )
        return merge_temporary_schedules(
            omit_missing_users(doc.temporary_schedules, existing),
        )

    async def set_temporary_schedule(
        self,
        caller: Caller,
        schedule_id: str,
        temp: TemporarySchedule,
        session: AsyncSession | None = None,
    ) -> None:
        """Use exactly `temp.shifts` between `temp.start` and `temp.end`."""
        self._authorizer.check(caller)
        now = self._clock()
        temp = truncate_schedule(temp)

        existing = await self._users.existing_user_ids(
            referenced_user_ids((temp,)), session=session,
        )
        self._raise_if_invalid(
            schedule_id,
            [
                *validate_uuid("ScheduleID", schedule_id),
                *validate_temporary_schedule(
                    temp,
                    now,
                    max_shifts=self._max_shifts,
                    min_future_minutes=self._min_future_minutes,
                    existing_user_ids=existing,
                ),
            ],
        )

        temp = trim_start(temp, ceil_to_minute(now))
        await self._store.apply(
            ScheduleId(UUID(schedule_id)),
            lambda doc: doc.with_schedules(
                set_temporary_schedule(doc.temporary_schedules, temp),
            ),
            session=session,
        )

    async def clear_temporary_schedules(
        self,
        caller: Caller,
        schedule_id: str,
        start: datetime,
        end: datetime,
        session: AsyncSession | None = None,
    ) -> None:
        """Clear (or split) every override between `start` and `end`."""
        self._authorizer.check(caller)
        now = self._clock()
        start, end = truncate_to_minute(start), truncate_to_minute(end)

        self._raise_if_invalid(
            schedule_id,
            [
                *validate_future("End", end, now, self._min_future_minutes),
                *validate_time_range("", start, end),
                *validate_uuid("ScheduleID", schedule_id),
            ],
        )

        start = max(start, ceil_to_minute(now))
        await self._store.apply(
            ScheduleId(UUID(schedule_id)),
            lambda doc: doc.with_schedules(
                clear_temporary_schedules(doc.temporary_schedules, start, end),
            ),
            session=session,
        )

    def _schedule_id(self, schedule_id: str) -> ScheduleId:
        self._raise_if_invalid(schedule_id, validate_uuid("ScheduleID", schedule_id))
        return ScheduleId(UUID(schedule_id))

    def _raise_if_invalid(self, schedule_id: str, errors: list[FieldError]) -> None:
        if not errors:
            return
        logger.info(
            f"Rejected temporary schedule request: {len(errors)} problem(s)",
            extra={"schedule_id": schedule_id, "error_code": "VALIDATION_ERROR"},
        )
        raise ScheduleValidationError(
            errors, ErrorContext(schedule_id=schedule_id),
        )
