"""User account endpoints: list, create, update, delete."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.routes.auth import get_current_user_id, require_self
from app.core.context import AppContext, get_context
from app.core.database import get_db
from app.schemas.user import (
    ErrorResponse,
    UserCreate,
    UserCreatedResponse,
    UserDeletedResponse,
    UserRead,
    UsersListResponse,
    UserUpdate,
    UserUpdatedResponse,
)
from app.services.accounts import (
    ConflictError,
    MissingFieldError,
    UserNotFoundError,
    create_account,
    delete_account,
    list_accounts,
    update_account,
)
from app.services.user_store import UserStore

router = APIRouter(
    responses={
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
    },
)


def _errors(*codes: int) -> dict[int | str, dict[str, Any]]:
    return {code: {"model": ErrorResponse} for code in codes}


@router.get(
    "",
    response_model=UsersListResponse,
    responses=_errors(status.HTTP_400_BAD_REQUEST, status.HTTP_401_UNAUTHORIZED),
)
def get_users(
    db: Annotated[Session, Depends(get_db)],
    ctx: Annotated[AppContext, Depends(get_context)],
    _user_id: Annotated[str | None, Depends(get_current_user_id)],
    limit: Annotated[int | None, Query(ge=1)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> UsersListResponse:
    """
    List stored users ordered by id. limit defaults to USER_LIST_DEFAULT_LIMIT
    and is capped at USER_LIST_MAX_LIMIT; total is the unpaginated count.
    """
    if limit is None:
        limit = ctx.settings.USER_LIST_DEFAULT_LIMIT
    limit = min(limit, ctx.settings.USER_LIST_MAX_LIMIT)
    store = UserStore(db)
    users = list_accounts(store, limit=limit, offset=offset)
    return UsersListResponse(
        users=[UserRead.model_validate(u) for u in users],
        total=store.count(),
    )


@router.post("", response_model=UserCreatedResponse, responses=_errors(status.HTTP_400_BAD_REQUEST))
def post_user(
    body: UserCreate,
    db: Annotated[Session, Depends(get_db)],
    ctx: Annotated[AppContext, Depends(get_context)],
) -> UserCreatedResponse:
    """Create an account; returns the stored record and an access token for it."""
    try:
        user, access_token = create_account(UserStore(db), ctx.hasher, ctx.tokens, body)
    except (MissingFieldError, ConflictError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return UserCreatedResponse(
        new_user=UserRead.model_validate(user),
        access_token=access_token,
    )


@router.put(
    "/{id}",
    response_model=UserUpdatedResponse,
    responses=_errors(
        status.HTTP_400_BAD_REQUEST, status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN
    ),
)
def put_user(
    id: str,
    db: Annotated[Session, Depends(get_db)],
    ctx: Annotated[AppContext, Depends(get_context)],
    _user_id: Annotated[str | None, Depends(require_self)],
    body: UserUpdate | None = None,
) -> UserUpdatedResponse:
    """
    Update any subset of type, username, password, recovery_mail, active_day.
    A missing body is an empty update and returns the record unchanged.
    """
    try:
        user = update_account(UserStore(db), ctx.hasher, id, body or UserUpdate())
    except MissingFieldError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except (ConflictError, UserNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message) from e
    return UserUpdatedResponse(updated_user=UserRead.model_validate(user))


@router.delete(
    "/{id}",
    response_model=UserDeletedResponse,
    responses=_errors(status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN),
)
def delete_user(
    id: str,
    db: Annotated[Session, Depends(get_db)],
    _user_id: Annotated[str | None, Depends(require_self)],
) -> UserDeletedResponse:
    """Permanently remove the account; returns the deleted record."""
    try:
        user = delete_account(UserStore(db), id)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message) from e
    return UserDeletedResponse(deleted_user=UserRead.model_validate(user))
