"""Core app configuration, database and application context."""

from app.core.config import Settings, get_settings
from app.core.context import AppContext, build_context, get_context
from app.core.database import get_db

__all__ = ["AppContext", "Settings", "build_context", "get_context", "get_db", "get_settings"]
