"""Process-wide application context: settings, database handles and credential helpers."""

from dataclasses import dataclass

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import Settings
from app.core.database import create_db_engine, create_session_factory
from app.core.security import PasswordHasher, TokenCodec


@dataclass
class AppContext:
    """Constructed once at startup and handed to every component that needs shared state."""

    settings: Settings
    engine: Engine
    session_factory: sessionmaker[Session]
    hasher: PasswordHasher
    tokens: TokenCodec

    def dispose(self) -> None:
        self.engine.dispose()


def build_context(settings: Settings, engine: Engine | None = None) -> AppContext:
    """Build the context from settings; pass engine to reuse an existing one (tests)."""
    engine = engine if engine is not None else create_db_engine(settings)
    return AppContext(
        settings=settings,
        engine=engine,
        session_factory=create_session_factory(engine),
        hasher=PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
        tokens=TokenCodec(
            secret=settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
            expire_minutes=settings.JWT_EXPIRE_MINUTES,
        ),
    )


def get_context(request: Request) -> AppContext:
    """Dependency returning the context stored on app.state at startup."""
    return request.app.state.context
