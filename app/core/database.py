"""
Database engine and session management.

SQLite has no row locks, so SQLite engines open every transaction with
BEGIN IMMEDIATE. That serialises writers and keeps the leave overlap
check and the insert that follows it atomic. Server databases rely on
SELECT ... FOR UPDATE issued by the repositories instead.
"""

from typing import Iterator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

SQLITE_BUSY_TIMEOUT = 30  # seconds


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create a SQLAlchemy engine for the given URL.

    Args:
        database_url: SQLAlchemy connection string
        echo: Log emitted SQL

    Returns:
        Configured engine
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, echo=echo, pool_pre_ping=True)

    engine = create_engine(
        database_url,
        echo=echo,
        connect_args={"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT},
    )

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, _connection_record):
        # Let SQLAlchemy emit BEGIN itself
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(connection):
        connection.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)


def create_db_and_tables(bind: Engine | None = None) -> None:
    """Create all tables registered on SQLModel metadata."""
    # Register table models on the metadata
    from app.models import leave, user  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)
    logger.info("Database tables ensured")


def get_session() -> Iterator[Session]:
    """FastAPI dependency yielding one session per request."""
    with Session(engine) as session:
        yield session
