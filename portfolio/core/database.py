"""
Database engine and session dependency.
"""
from typing import Any, Generator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from portfolio.core.config import settings


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, *, echo: bool = False) -> Engine:
    """Create an engine; SQLite gets FK enforcement and a thread-safe pool."""
    if database_url.startswith("sqlite"):
        kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        new_engine = create_engine(database_url, echo=echo, **kwargs)
        event.listen(new_engine, "connect", _enable_sqlite_foreign_keys)
        return new_engine
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


engine = build_engine(settings.database_url, echo=settings.db_echo)


def create_db_and_tables(target: Engine | None = None) -> None:
    # Import models so they register on the metadata.
    import portfolio.models  # noqa: F401

    SQLModel.metadata.create_all(target or engine)


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
