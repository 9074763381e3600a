"""User Lookup: SQL-backed batch user existence check.

Invariants:
    - One SELECT per call regardless of how many ids are asked about
    - Malformed ids are reported as missing, never sent to the database
    - Returned ids are the caller's original strings, not normalised UUIDs
"""

import logging
import uuid
from typing import Collection

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tempsched.core.domain_types import UserId
from tempsched.infrastructure.database import (
    DatabaseSessionManager, map_database_errors,
)
from tempsched.models.user import User

logger = logging.getLogger(__name__)


def _parse_ids(user_ids: Collection[UserId]) -> dict[uuid.UUID, list[UserId]]:
    parsed: dict[uuid.UUID, list[UserId]] = {}
    for raw in user_ids:
        try:
            parsed.setdefault(uuid.UUID(raw), []).append(raw)
        except ValueError:
            continue
    return parsed


class SqlUserExistence:
    """UserExistence implementation over the users table."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def existing_user_ids(
        self, user_ids: Collection[UserId], session: AsyncSession | None = None,
    ) -> set[UserId]:
        parsed = _parse_ids(user_ids)
        if not parsed:
            return set()
        stmt = select(User.id).where(User.id.in_(list(parsed)))
        if session is not None:
            with map_database_errors("user_lookup"):
                rows = (await session.execute(stmt)).scalars().all()
        else:
            async with self._db.session("user_lookup") as db:
                rows = (await db.execute(stmt)).scalars().all()
        return {raw for found in rows for raw in parsed.get(found, ())}
