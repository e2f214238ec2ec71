"""Login endpoint and bearer-token dependencies (get_current_user_id, require_self)."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.context import AppContext, get_context
from app.core.database import get_db
from app.core.security import TokenError
from app.schemas.auth import LoginRequest, TokenResponse
from app.services.accounts import authenticate
from app.services.user_store import UserStore

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("", response_model=TokenResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    ctx: Annotated[AppContext, Depends(get_context)],
) -> TokenResponse:
    """
    Authenticate with username and password; returns an access token.
    Include the token in the Authorization header as: Bearer <accessToken>
    """
    if not body.username or not body.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing username and/or password",
        )
    user = authenticate(UserStore(db), ctx.hasher, body.username, body.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Incorrect username or password",
        )
    return TokenResponse(access_token=ctx.tokens.issue(user.id))


def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    ctx: Annotated[AppContext, Depends(get_context)],
) -> str | None:
    """
    Dependency: with AUTH_ENABLED, require a valid Bearer token for an existing
    user and return its id. Raises 401 if missing or invalid. Returns None when
    auth is disabled.
    """
    if not ctx.settings.AUTH_ENABLED:
        return None
    if credentials is None:
        raise _unauthorized("Access token not found")
    try:
        user_id = ctx.tokens.verify(credentials.credentials)
    except TokenError:
        raise _unauthorized("Invalid token")
    if UserStore(db).find_by_id(user_id) is None:
        raise _unauthorized("User not found")
    return user_id


def require_self(
    id: str,
    current_user_id: Annotated[str | None, Depends(get_current_user_id)],
) -> str | None:
    """Dependency: with AUTH_ENABLED, the token must belong to the user in the path. Raises 403 otherwise."""
    if current_user_id is not None and current_user_id != id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorised to modify this user",
        )
    return current_user_id
