"""Database connection and session management."""

from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from src.services.config import settings

DATABASE_URL = settings.database_url

# Seconds a SQLite writer waits for another writer before failing
SQLITE_BUSY_TIMEOUT = 30


def _serialize_sqlite_writers(engine: Engine) -> None:
    """Start every SQLite transaction with BEGIN IMMEDIATE.

    SQLite ignores SELECT ... FOR UPDATE; taking the write lock when the
    transaction begins is what makes lock -> check -> write one step.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_conn, conn_record):
        # Let SQLAlchemy emit BEGIN instead of the driver
        dbapi_conn.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create the engine for a database URL.

    - in-memory SQLite: one shared connection (StaticPool), tests and demos
    - file SQLite: pooled connection per session, writers serialized
    - anything else: pooled with pre-ping, row locks from the database
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(database_url, echo=echo, pool_pre_ping=True)

    if url.database in (None, "", ":memory:"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    engine = create_engine(
        database_url,
        echo=echo,
        connect_args={"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT},
    )
    _serialize_sqlite_writers(engine)
    return engine


engine = build_engine(DATABASE_URL, echo=settings.database_echo)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


__all__ = [
    "engine",
    "build_engine",
    "SessionLocal",
    "get_db",
]
