"""Account service: create, list, update and delete user accounts; authenticate logins."""

import logging
from typing import Any

from app.core.security import PasswordHasher, TokenCodec
from app.models import User
from app.schemas.user import UserCreate, UserUpdate
from app.services.user_store import DuplicateUserError, UserStore

logger = logging.getLogger(__name__)


class AccountError(Exception):
    """Base class for expected account failures; message is safe to show to clients."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MissingFieldError(AccountError):
    """A required field was absent or empty."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__("Missing information. Try again!")


class ConflictError(AccountError):
    """A unique field is already held by another record."""


class UsernameTakenError(ConflictError):
    """The username belongs to another record."""

    def __init__(self, message: str = "Username already taken") -> None:
        super().__init__(message)


class UserIdTakenError(ConflictError):
    """A record with this id already exists."""

    def __init__(self) -> None:
        super().__init__("User id already exists")


class UserNotFoundError(AccountError):
    """No record matches the given id."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__("User not found")


REQUIRED_CREATE_FIELDS = ("id", "type", "username", "password")
# Required fields that an update may change but not blank out.
NON_BLANK_UPDATE_FIELDS = ("type", "username")


def _conflict_from_duplicate(exc: DuplicateUserError) -> ConflictError:
    if exc.field == "id":
        return UserIdTakenError()
    return UsernameTakenError()


def create_account(
    store: UserStore,
    hasher: PasswordHasher,
    tokens: TokenCodec,
    payload: UserCreate,
) -> tuple[User, str]:
    """
    Create an account and return (record, access token).

    The username pre-check only gives an early, friendly error; the unique
    constraint in the store is what guarantees uniqueness under concurrent writers.
    """
    missing = [name for name in REQUIRED_CREATE_FIELDS if not getattr(payload, name)]
    if missing:
        raise MissingFieldError(missing)

    if store.find_by_username(payload.username) is not None:
        raise UsernameTakenError()

    # Issued before the insert so a token failure leaves no orphaned record.
    access_token = tokens.issue(payload.id)
    user = User(
        id=payload.id,
        type=payload.type,
        username=payload.username,
        password_hash=hasher.hash(payload.password),
        recovery_mail=payload.recovery_mail,
        active_day=payload.active_day,
    )
    try:
        user = store.insert(user)
    except DuplicateUserError as exc:
        raise _conflict_from_duplicate(exc) from exc

    logger.info("Account created: id=%s username=%s", user.id, user.username)
    return user, access_token


def list_accounts(store: UserStore, limit: int | None = None, offset: int = 0) -> list[User]:
    return store.find_all(limit=limit, offset=offset)


def update_account(
    store: UserStore,
    hasher: PasswordHasher,
    user_id: str,
    payload: UserUpdate,
) -> User:
    """
    Apply a partial update. Fields left out (None) keep their stored value; the
    password is re-hashed only when a non-empty new one is supplied. type and
    username may change but not become empty.
    """
    existing = store.find_by_id(user_id)
    if existing is None:
        raise UserNotFoundError(user_id)

    blank = [name for name in NON_BLANK_UPDATE_FIELDS if getattr(payload, name) == ""]
    if blank:
        raise MissingFieldError(blank)

    if payload.username is not None and payload.username != existing.username:
        holder = store.find_by_username(payload.username)
        if holder is not None and holder.id != user_id:
            raise UsernameTakenError(
                "New user name has been taken already. Please choose another one."
            )

    changes: dict[str, Any] = {
        "type": payload.type if payload.type is not None else existing.type,
        "username": payload.username if payload.username is not None else existing.username,
        "password_hash": hasher.hash(payload.password) if payload.password else existing.password_hash,
        "recovery_mail": (
            payload.recovery_mail if payload.recovery_mail is not None else existing.recovery_mail
        ),
        "active_day": payload.active_day if payload.active_day is not None else existing.active_day,
    }
    try:
        updated = store.update_by_id(user_id, changes)
    except DuplicateUserError as exc:
        raise UsernameTakenError(
            "New user name has been taken already. Please choose another one."
        ) from exc
    # Deleted between the existence check and the write.
    if updated is None:
        raise UserNotFoundError(user_id)

    logger.info("Account updated: id=%s", user_id)
    return updated


def delete_account(store: UserStore, user_id: str) -> User:
    deleted = store.delete_by_id(user_id)
    if deleted is None:
        raise UserNotFoundError(user_id)
    logger.info("Account deleted: id=%s", user_id)
    return deleted


def authenticate(
    store: UserStore,
    hasher: PasswordHasher,
    username: str,
    password: str,
) -> User | None:
    """Return the user if the password matches its stored digest, else None."""
    user = store.find_by_username(username)
    if user is None:
        return None
    if not hasher.verify(password, user.password_hash):
        return None
    return user
