"""Root conftest: shared test configuration and the file-backed SQLite engine.

Invariants:
    - Tests never reach a real database by accident
    - Every test gets a fresh database file under tmp_path
    - Sessions on different connections see one database, so concurrency
      tests exercise real write serialisation

Design Decisions:
    - pysqlite's own transaction handling is disabled and BEGIN IMMEDIATE is
      emitted instead (SQLAlchemy's documented aiosqlite recipe): SAVEPOINTs
      work and writers queue on the database lock the way row locks queue them
      on PostgreSQL
"""

import os

# Ensure tests never reach a real database by accident
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)

import pytest  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402

from tempsched.db.base import Base  # noqa: E402
from tempsched.infrastructure.database import DatabaseSessionManager  # noqa: E402
import tempsched.models  # noqa: E402,F401


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'tempsched.db'}", echo=False,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def db_manager(test_engine):
    return DatabaseSessionManager.from_engine(test_engine)
