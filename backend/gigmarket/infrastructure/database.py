"""Database Session Manager — async engine, per-request sessions, integrity mapping.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - SQLAlchemy exceptions escaping a service are mapped to DatabaseError (core/errors.py)
    - Driver text is logged, never placed in the DatabaseError message
    - SQLite connections enforce foreign keys, so application cascades and the
      review reference on gigs behave as they do on PostgreSQL

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
    - expire_on_commit=False: prevents lazy-load issues in async context
    - Services translate the IntegrityErrors they expect (unique indexes on
      applications and reviews, the review -> gig reference) themselves;
      anything reaching this layer is unexpected and only classified for the log
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)

from gigmarket.core.errors import DatabaseError

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "unique"
FOREIGN_KEY_VIOLATION = "foreign_key"
CHECK_VIOLATION = "check"
NOT_NULL_VIOLATION = "not_null"

# Driver message fragments (asyncpg, sqlite3) per violation kind.
_VIOLATION_MARKERS = (
    (UNIQUE_VIOLATION, ("unique constraint", "duplicate key")),
    (FOREIGN_KEY_VIOLATION, ("foreign key",)),
    (CHECK_VIOLATION, ("check constraint",)),
    (NOT_NULL_VIOLATION, ("not null constraint", "null value in column")),
)


def integrity_violation_kind(error: IntegrityError) -> str | None:
    """Classify an IntegrityError by the constraint type that fired."""
    message = str(error.orig if error.orig is not None else error).lower()
    for kind, markers in _VIOLATION_MARKERS:
        if any(marker in message for marker in markers):
            return kind
    return None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseSessionManager:
    """Owns the engine and hands out sessions with rollback and error mapping."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        is_sqlite = database_url.startswith("sqlite")
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not is_sqlite:
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        if is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            kind = integrity_violation_kind(e) or "unknown"
            logger.error(
                f"Unhandled {kind} constraint violation: {e}",
                extra={"error_code": "DATABASE_ERROR"},
            )
            raise DatabaseError(f"{kind} constraint violated", "commit")
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise DatabaseError("Connection or operational error", "execute")
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise DatabaseError("Database driver error", "query")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "unknown")
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Readiness probe: one round trip through a managed session."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
