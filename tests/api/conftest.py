"""API test fixtures: the real app wired to the shared SQLite engine.

Invariants:
    - app.state is populated directly; ASGITransport does not run the lifespan
    - USER_A and USER_B exist in the users table, USER_C does not
    - The service clock is frozen at CLOCK_NOW
"""

import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import insert

from tempsched.config import Settings
from tempsched.main import app, build_service
from tempsched.models.user import User
from tests.factories import CLOCK_NOW, USER_A, USER_B


@pytest.fixture
async def seeded_users(db_manager):
    async with db_manager.session() as db:
        async with db.begin():
            await db.execute(insert(User).values([
                {"id": uuid.UUID(USER_A), "name": "alice"},
                {"id": uuid.UUID(USER_B), "name": "bob"},
            ]))


@pytest.fixture
async def client(db_manager, seeded_users):
    """FastAPI test client over the real service graph."""
    app.state.db_manager = db_manager
    app.state.temporary_schedule_service = build_service(
        db_manager, Settings(), clock=lambda: CLOCK_NOW,
    )

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    del app.state.db_manager
    del app.state.temporary_schedule_service
