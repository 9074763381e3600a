"""Service test fixtures: store and service over the shared SQLite engine.

Invariants:
    - The clock is frozen at CLOCK_NOW
    - Users are a fake set; SQL lookup is covered in the API tests
"""

import pytest
from sqlalchemy import insert, select

from tempsched.config import Settings
from tempsched.core.enforce_permission import RequireAuthenticatedUser
from tempsched.models.schedule_data import ScheduleData
from tempsched.services.schedule_data_store import ScheduleDataStore
from tempsched.services.temporary_schedules import TemporaryScheduleService
from tests.factories import CLOCK_NOW, USER_A, USER_B, USER_C


class FakeUsers:
    """UserExistence over an in-memory set of ids."""

    def __init__(self, ids):
        self.ids = set(ids)
        self.calls = []

    async def existing_user_ids(self, user_ids, session=None):
        self.calls.append(set(user_ids))
        return {u for u in user_ids if u in self.ids}


@pytest.fixture
def store(db_manager):
    return ScheduleDataStore(db_manager, lock_timeout_ms=5000)


@pytest.fixture
def users():
    return FakeUsers({USER_A, USER_B, USER_C})


@pytest.fixture
def service(store, users):
    return TemporaryScheduleService(
        store=store,
        users=users,
        authorizer=RequireAuthenticatedUser(),
        settings=Settings(),
        clock=lambda: CLOCK_NOW,
    )


@pytest.fixture
def read_raw(db_manager):
    """Fetch the stored bytes for a schedule id (None when no row)."""
    async def _read(schedule_id):
        async with db_manager.session() as db:
            row = (await db.execute(
                select(ScheduleData.data).where(
                    ScheduleData.schedule_id == schedule_id,
                ),
            )).first()
        return None if row is None else row[0]
    return _read


@pytest.fixture
def write_raw(db_manager):
    """Insert a schedule row with the given raw bytes."""
    async def _write(schedule_id, data: bytes):
        async with db_manager.session() as db:
            async with db.begin():
                await db.execute(
                    insert(ScheduleData).values(schedule_id=schedule_id, data=data),
                )
    return _write
