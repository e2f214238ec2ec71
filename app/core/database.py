"""Database engine and session management. Built once per process from settings."""

from collections.abc import Generator
from typing import TYPE_CHECKING, Any

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from app.core.config import Settings


def create_db_engine(settings: "Settings") -> Engine:
    """
    Create the engine with a bounded statement timeout.

    PostgreSQL gets statement_timeout on every connection; SQLite gets a busy
    timeout. In-memory SQLite shares one connection across threads.
    """
    url = settings.DATABASE_URL
    kwargs: dict[str, Any] = {"pool_pre_ping": True, "echo": settings.DEBUG}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": settings.DB_STATEMENT_TIMEOUT_MS / 1000,
        }
        if ":memory:" in url or url.rstrip("/") in ("sqlite:", "sqlite+pysqlite:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_timeout"] = settings.DB_POOL_TIMEOUT_SEC
        kwargs["connect_args"] = {
            "options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}",
        }
    return create_engine(url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    # Records are returned to callers after commit (including deleted ones).
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = request.app.state.context.session_factory()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
