"""Request/response schemas for user account endpoints.

Response keys (newUser, accessToken, UpdatedUser, DeletedUser) keep the
established wire format; Python code uses snake_case field names.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class UserCreate(BaseModel):
    """
    Body for account creation. Required fields are checked by the account
    service so a missing value yields a 400 with a readable message.
    """

    id: str | None = None
    type: str | None = None
    username: str | None = None
    password: str | None = None
    recovery_mail: str | None = None
    active_day: str | None = None


class UserUpdate(BaseModel):
    """Partial update body; id is taken from the path and cannot change."""

    type: str | None = None
    username: str | None = None
    password: str | None = None
    recovery_mail: str | None = None
    active_day: str | None = None


class UserRead(BaseModel):
    """Stored user record as returned by the API. password is the stored digest."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    type: str
    username: str
    password: str = Field(validation_alias=AliasChoices("password", "password_hash"))
    recovery_mail: str | None = None
    active_day: str | None = None


class UsersListResponse(BaseModel):
    """Response for GET /user."""

    success: bool = True
    users: list[UserRead]
    total: int = Field(..., description="Total number of stored users")


class UserCreatedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "User created successfully"
    new_user: UserRead = Field(..., alias="newUser")
    access_token: str = Field(..., alias="accessToken")


class UserUpdatedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "User updated successfully"
    updated_user: UserRead = Field(..., alias="UpdatedUser")


class UserDeletedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    deleted_user: UserRead = Field(..., alias="DeletedUser")


class ErrorResponse(BaseModel):
    """Body of every error response."""

    success: bool = False
    message: str
