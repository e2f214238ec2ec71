"""
User store: keyed persistence for user records over a SQLAlchemy session.

Uniqueness of id and username is guaranteed by the table's constraints, not by
application locking. Constraint violations surface as DuplicateUserError so
callers can report a conflict even when a pre-check raced with another writer.
"""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import FlushError

from app.models import User

logger = logging.getLogger(__name__)

# Columns an update may change; id is immutable after creation.
UPDATABLE_FIELDS = frozenset({"type", "username", "password_hash", "recovery_mail", "active_day"})


class DuplicateUserError(Exception):
    """Raised when an insert or update violates the id or username unique constraint."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Duplicate value for unique field '{field}'")


class UserStore:
    """Repository for User records. Each write commits its own transaction."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_id(self, user_id: str) -> User | None:
        return self.session.get(User, user_id)

    def find_by_username(self, username: str) -> User | None:
        return self.session.query(User).filter(User.username == username).first()

    def find_all(self, limit: int | None = None, offset: int = 0) -> list[User]:
        query = self.session.query(User).order_by(User.id)
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def count(self) -> int:
        return self.session.query(User).count()

    def insert(self, user: User) -> User:
        """Persist a new record. Raises DuplicateUserError if id or username exists."""
        self.session.add(user)
        try:
            self.session.commit()
        except (IntegrityError, FlushError) as exc:
            self.session.rollback()
            raise DuplicateUserError(self._duplicate_field(user.id, user.username)) from exc
        return user

    def update_by_id(self, user_id: str, changes: dict[str, Any]) -> User | None:
        """
        Apply changes to the record with this id and return it, or None if absent.
        Raises DuplicateUserError if the new username is held by another record.
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")
        user = self.find_by_id(user_id)
        if user is None:
            return None
        for field, value in changes.items():
            setattr(user, field, value)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateUserError("username") from exc
        return user

    def delete_by_id(self, user_id: str) -> User | None:
        """Remove the record with this id. Returns the removed record, or None if absent."""
        user = self.find_by_id(user_id)
        if user is None:
            return None
        self.session.delete(user)
        self.session.commit()
        return user

    def _duplicate_field(self, user_id: str, username: str) -> str:
        """Work out which unique constraint fired after a failed insert."""
        if self.find_by_id(user_id) is not None:
            return "id"
        if self.find_by_username(username) is not None:
            return "username"
        logger.warning("Integrity error on insert matched neither id nor username")
        return "username"
