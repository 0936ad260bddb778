"""Database engine and unit-of-work scope."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..config import DEFAULT_COLOR
from ..utils.exceptions import ConfigurationError, StorageError
from .migrations import run_migrations

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Relational store shared by the services and the sync engine."""

    def __init__(self, url: str, echo: bool = False):
        """
        Create the engine and session factory.

        Args:
            url: SQLAlchemy database URL
            echo: Log every SQL statement

        Raises:
            ConfigurationError: If the URL cannot be used
        """
        try:
            self.engine = create_engine(url, echo=echo)
        except ArgumentError as e:
            raise ConfigurationError(f"Invalid database URL {url!r}: {e}") from e

        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    def migrate(self, default_color: str = DEFAULT_COLOR) -> None:
        """Run the startup migration."""
        run_migrations(self.engine, default_color=default_color)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Unit of work: commit on normal exit, roll back on any error.

        Database errors are re-raised as StorageError; anything else
        propagates unchanged. The session is always closed.
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(f"Database operation failed: {e}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        self.engine.dispose()
