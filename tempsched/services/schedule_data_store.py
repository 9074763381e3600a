"""Schedule Data Store: atomic load / mutate / store of the per-schedule document row.

Invariants:
    - load() never locks and never writes; a missing row is the empty document
    - apply() holds SELECT ... FOR UPDATE on the row for the whole mutation, so
      writers to one schedule are totally ordered and never lose updates
    - The row is created lazily inside apply(); losing that insert race to a
      concurrent first writer is recovered exactly once, invisibly
    - Writes overlay recognized fields onto the stored object (unknown members kept)
    - With a caller-supplied session nothing is committed here and no
      session setting (lock_timeout) is changed

Design Decisions:
    - The lazy-create path is a small explicit state machine (_RowStep) instead
      of nested error checks: SELECT -> INSERT -> RESELECT, with no way back
    - The INSERT runs in a SAVEPOINT so a primary-key conflict leaves the
      surrounding transaction usable for the RESELECT
    - Nothing is cached between calls; every call re-reads authoritative state
"""

import logging
from enum import Enum
from typing import Callable
from uuid import UUID

from sqlalchemy import insert, select, text, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tempsched.core.domain_types import ScheduleId
from tempsched.core.errors import DatabaseError, DocumentDecodeError, ErrorContext
from tempsched.core.schedule_document import (
    ScheduleDocument, decode_document, encode_document,
)
from tempsched.infrastructure.database import (
    DatabaseSessionManager, map_database_errors,
)
from tempsched.models.schedule_data import SCHEDULE_DATA_PKEY, ScheduleData

logger = logging.getLogger(__name__)

Mutation = Callable[[ScheduleDocument], ScheduleDocument]


class _RowStep(str, Enum):
    """States of the lock-or-create sequence in apply()."""
    SELECT = "select"
    INSERT = "insert"
    RESELECT = "reselect"


def is_pkey_conflict(exc: IntegrityError) -> bool:
    """True when `exc` is a duplicate schedule_data primary key."""
    orig = getattr(exc, "orig", None)
    for candidate in (getattr(orig, "diag", None), getattr(orig, "__cause__", None)):
        name = getattr(candidate, "constraint_name", None)
        if name:
            return name == SCHEDULE_DATA_PKEY
    message = str(orig if orig is not None else exc)
    return (
        SCHEDULE_DATA_PKEY in message
        or "schedule_data.schedule_id" in message
    )


class ScheduleDataStore:
    """Owns every read and write of the schedule_data table."""

    def __init__(self, db: DatabaseSessionManager, lock_timeout_ms: int = 0):
        self._db = db
        self._lock_timeout_ms = lock_timeout_ms

    # ─── Read path ───────────────────────────────────────────────

    async def load(
        self, schedule_id: ScheduleId, session: AsyncSession | None = None,
    ) -> ScheduleDocument:
        """Current committed document, without taking any lock."""
        if session is not None:
            with map_database_errors("load"):
                raw = await self._select(session, schedule_id, lock=False)
        else:
            async with self._db.session("load") as db:
                raw = await self._select(db, schedule_id, lock=False)
        return self._decode(schedule_id, raw)

    # ─── Write path ──────────────────────────────────────────────

    async def apply(
        self,
        schedule_id: ScheduleId,
        mutate: Mutation,
        session: AsyncSession | None = None,
    ) -> ScheduleDocument:
        """Lock, decode, mutate and write back the document in one transaction.

        With `session` given the caller owns the transaction (its commit and
        its lock_timeout setting); otherwise a transaction is opened, bounded
        by lock_timeout_ms and committed here. Any exception
        from `mutate` aborts before anything is written.
        """
        if session is not None:
            with map_database_errors("apply"):
                return await self._apply_locked(session, schedule_id, mutate)

        async with self._db.session("apply") as db:
            async with db.begin():
                await self._set_lock_timeout(db)
                doc = await self._apply_locked(db, schedule_id, mutate)
        logger.info(
            "Committed temporary schedules",
            extra={
                "schedule_id": str(schedule_id),
                "schedule_count": len(doc.temporary_schedules),
            },
        )
        return doc

    async def _apply_locked(
        self, session: AsyncSession, schedule_id: ScheduleId, mutate: Mutation,
    ) -> ScheduleDocument:
        raw = await self._lock_row(session, schedule_id)
        doc = mutate(self._decode(schedule_id, raw))
        await session.execute(
            update(ScheduleData)
            .where(ScheduleData.schedule_id == schedule_id)
            .values(data=encode_document(doc)),
        )
        return doc

    async def _lock_row(
        self, session: AsyncSession, schedule_id: ScheduleId,
    ) -> bytes:
        """SELECT FOR UPDATE, creating the row first if it does not exist."""
        step = _RowStep.SELECT
        while True:
            if step is _RowStep.INSERT:
                await self._insert_default(session, schedule_id)
                step = _RowStep.RESELECT
                continue

            raw = await self._select(session, schedule_id, lock=True)
            if raw is not None:
                return raw
            if step is _RowStep.RESELECT:
                raise DatabaseError(
                    "schedule row missing after insert", "apply",
                    context=ErrorContext(schedule_id=str(schedule_id)),
                )
            step = _RowStep.INSERT

    async def _insert_default(
        self, session: AsyncSession, schedule_id: ScheduleId,
    ) -> None:
        try:
            async with session.begin_nested():
                await session.execute(
                    insert(ScheduleData).values(schedule_id=schedule_id, data=b""),
                )
        except IntegrityError as e:
            if not is_pkey_conflict(e):
                raise
            logger.warning(
                "Lost schedule row creation race, re-reading",
                extra={"schedule_id": str(schedule_id), "attempt": 2},
            )
            return
        logger.info(
            "Created schedule data row", extra={"schedule_id": str(schedule_id)},
        )

    async def _select(
        self, session: AsyncSession, schedule_id: UUID, lock: bool,
    ) -> bytes | None:
        stmt = select(ScheduleData.data).where(
            ScheduleData.schedule_id == schedule_id,
        )
        if lock:
            stmt = stmt.with_for_update()
        row = (await session.execute(stmt)).first()
        if row is None:
            return None
        return row[0] or b""

    async def _set_lock_timeout(self, session: AsyncSession) -> None:
        if self._lock_timeout_ms <= 0:
            return
        if session.get_bind().dialect.name != "postgresql":
            return
        await session.execute(
            text(f"SET LOCAL lock_timeout = {int(self._lock_timeout_ms)}"),
        )

    def _decode(self, schedule_id: ScheduleId, raw: bytes | None) -> ScheduleDocument:
        try:
            return decode_document(raw)
        except DocumentDecodeError as e:
            e.context.schedule_id = str(schedule_id)
            logger.error(
                f"Corrupt schedule data: {e.message}",
                extra={"schedule_id": str(schedule_id), "error_code": e.code},
            )
            raise
