"""Database package: engine, session factory and the transactional session scope."""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from catalog.db.base import Base

# Import all models so Base.metadata has all tables
from catalog.db.models import InventoryItem, ItemEmbedding, ItemImage  # noqa: F401
from catalog.errors import ConfigurationError, PersistenceError
from catalog.utils.logger import get_logger

logger = get_logger("catalog.db")


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


def _create_engine(url: str, echo: bool = False):
    """Create engine; SQLite is opened with check_same_thread=False for use from worker threads."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if _is_memory_sqlite(url):
            # One shared connection, otherwise every session sees an empty database
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)
    return create_engine(url, echo=echo, pool_pre_ping=True)


class Database:
    """Owns the engine and hands out request-scoped transactional sessions."""

    def __init__(self, database_url: str, echo: bool = False):
        if not database_url:
            raise ConfigurationError("Server misconfigured: missing DATABASE_URL.")
        self.url = database_url
        try:
            self.engine = _create_engine(database_url, echo=echo)
        except ArgumentError as e:
            raise ConfigurationError("Invalid DATABASE_URL.") from e
        self._sessions = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )

    def create_all(self) -> None:
        """Create any missing tables. Existing tables are left alone."""
        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """One transaction: commit on success, full rollback on any error.

        SQLAlchemy failures are logged with detail and re-raised as PersistenceError
        with a generic message.
        """
        session = self._sessions()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("db.session.error", error=str(e), error_type=type(e).__name__)
            raise PersistenceError("Database error.") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def check_connection(self) -> bool:
        """Return True when a trivial query succeeds (logs only failures)."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            return True
        except SQLAlchemyError as e:
            logger.error("db.connection.failed", error=str(e))
            return False

    def dispose(self) -> None:
        self.engine.dispose()
