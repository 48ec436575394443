"""
Database engine and session management for the Task Manager
"""
import logging
from typing import Generator, Optional

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from ..config import settings

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """
    Create an engine for the given URL (defaults to settings.database_url).

    SQLite engines get foreign key enforcement; in-memory SQLite shares one
    connection so every session sees the same database.
    """
    url = database_url or settings.database_url
    kwargs = {"echo": settings.echo_sql if echo is None else echo}

    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True

    new_engine = create_engine(url, **kwargs)
    if url.startswith("sqlite"):
        event.listen(new_engine, "connect", _enable_sqlite_foreign_keys)

    logger.info("Database engine created dialect=%s", new_engine.dialect.name)
    return new_engine


engine = build_engine()


def create_db_and_tables(target: Optional[Engine] = None) -> None:
    """Create every table known to SQLModel if it does not exist yet."""
    # Register table models on the metadata before create_all
    from .. import models  # noqa: F401

    SQLModel.metadata.create_all(target or engine)


def get_session() -> Generator[Session, None, None]:
    """Yield a database session; used as a FastAPI dependency and by the service data source."""
    with Session(engine) as session:
        yield session
