"""Database connection and session management.

A :class:`Database` owns one engine and its session factory.  Instances are
created by the factory and injected into the SQL adapters, so nothing here
keeps module-level connection state.
"""

from collections.abc import Generator
import threading
from contextlib import AbstractContextManager, contextmanager, nullcontext
from typing import Any

from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from circlebattle.config import Settings
from circlebattle.models import Base

_IN_MEMORY_SQLITE_URLS = {"sqlite://", "sqlite:///:memory:"}


def _configure_sqlite_wal(
    dbapi_connection: Any, connection_record: Any  # noqa: ARG001
) -> None:
    """Configure SQLite to use WAL mode and enforce foreign keys.

    Args:
        dbapi_connection: The DBAPI connection
        connection_record: Connection record (required by SQLAlchemy event API)
    """
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(
    url: str,
    *,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10,
) -> Engine:
    """Create and configure the database engine.

    Note:
        For SQLite databases, automatically configures WAL mode and foreign keys.
        In-memory SQLite shares a single connection across threads.
    """
    if url in _IN_MEMORY_SQLITE_URLS:
        engine = create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        event.listen(engine, "connect", _configure_sqlite_wal)
    elif url.startswith("sqlite"):
        engine = create_engine(
            url,
            echo=echo,
            pool_pre_ping=True,
            connect_args={"check_same_thread": False},
        )
        event.listen(engine, "connect", _configure_sqlite_wal)
    else:
        engine = create_engine(
            url,
            echo=echo,
            pool_pre_ping=True,
            pool_size=pool_size,
            max_overflow=max_overflow,
        )
    return engine


class Database:
    """Engine plus session factory for one database."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self.session_factory: sessionmaker[Session] = sessionmaker(
            bind=engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )
        # StaticPool hands every thread the same DBAPI connection, so sessions
        # must not overlap or one thread's rollback undoes another's write.
        self._shared_connection_lock = (
            threading.RLock() if isinstance(engine.pool, StaticPool) else None
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            create_db_engine(
                settings.database_url,
                echo=settings.database_echo,
                pool_size=settings.database_pool_size,
                max_overflow=settings.database_max_overflow,
            )
        )

    @classmethod
    def from_url(cls, url: str) -> "Database":
        return cls(create_db_engine(url))

    @contextmanager
    def session(self) -> Generator[Session]:
        """Yield a session that is closed afterwards; callers commit explicitly."""

        with self.exclusive():
            db = self.session_factory()
            try:
                yield db
            finally:
                db.close()

    def exclusive(self) -> AbstractContextManager[object]:
        """Serialize access when all threads share one connection; no-op otherwise."""

        if self._shared_connection_lock is None:
            return nullcontext()
        return self._shared_connection_lock

    def init_db(self) -> None:
        """Create all tables.

        Note:
            Tables are created directly; there are no migrations.
        """
        with self.exclusive():
            Base.metadata.create_all(bind=self.engine)

    def check_health(self) -> bool:
        """Return True if the database answers a trivial query."""

        try:
            with self.exclusive(), self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            return False
        return True

    def table_names(self) -> list[str]:
        with self.exclusive():
            return inspect(self.engine).get_table_names()

    def dispose(self) -> None:
        self.engine.dispose()
