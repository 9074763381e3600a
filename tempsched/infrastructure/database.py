"""Database Session Manager: async connection pool with automatic rollback and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - All SQLAlchemy exceptions mapped to DatabaseError (core/errors.py);
      lock timeouts, serialization failures and lost connections are
      retryable, judged by SQLSTATE; other driver errors are final
    - Cancellation (asyncio.CancelledError) is never mapped, only rolled back

Design Decisions:
    - Manager instance lives on app.state, created in the FastAPI lifespan and
      injected into the store; there is no module-level database global
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import logging
from contextlib import asynccontextmanager, contextmanager
from typing import AsyncGenerator, Iterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import text

from tempsched.core.errors import DatabaseError

logger = logging.getLogger(__name__)

# lock_not_available, serialization_failure, deadlock_detected, query_canceled
TRANSIENT_SQLSTATES = frozenset({"55P03", "40001", "40P01", "57014"})
# connection_exception class (08000, 08003, 08006, ...)
CONNECTION_SQLSTATE_CLASS = "08"


def _sqlstate(exc: DBAPIError) -> str | None:
    orig = getattr(exc, "orig", None)
    for candidate in (orig, getattr(orig, "__cause__", None)):
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return str(code)
    return None


def is_transient(exc: SQLAlchemyError) -> bool:
    """True for failures a caller may safely retry.

    Decided by SQLSTATE and connection invalidation only: an OperationalError
    such as a missing table is final.
    """
    if not isinstance(exc, DBAPIError):
        return False
    if exc.connection_invalidated:
        return True
    code = _sqlstate(exc)
    return code is not None and (
        code in TRANSIENT_SQLSTATES or code.startswith(CONNECTION_SQLSTATE_CLASS)
    )


@contextmanager
def map_database_errors(operation: str) -> Iterator[None]:
    """Translate SQLAlchemy errors raised inside the block into DatabaseError."""
    try:
        yield
    except IntegrityError as e:
        logger.error(f"DB integrity error during {operation}: {e}")
        raise DatabaseError(
            "Integrity constraint violated", operation,
        ) from e
    except DBAPIError as e:
        retryable = is_transient(e)
        logger.error(
            f"DB driver error during {operation}: {e}",
            extra={"error_code": _sqlstate(e)},
        )
        raise DatabaseError(
            "Lock wait timed out or connection failed" if retryable
            else "Database driver error",
            operation, retryable=retryable,
        ) from e
    except SQLAlchemyError as e:
        logger.error(f"SQLAlchemy error during {operation}: {e}")
        raise DatabaseError("Database operation failed", operation) from e


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_engine(cls, engine: AsyncEngine) -> "DatabaseSessionManager":
        """Wrap an existing engine (tests, scripts)."""
        manager = cls.__new__(cls)
        manager.engine = engine
        manager._session_factory = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False,
        )
        return manager

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    @asynccontextmanager
    async def session(
        self, operation: str = "session",
    ) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            with map_database_errors(operation):
                try:
                    yield session
                except BaseException:
                    await session.rollback()
                    raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session("health_check") as db:
                await db.execute(text("SELECT 1"))
            return True
        except DatabaseError as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()
