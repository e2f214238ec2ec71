"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Credentials for login. Presence is checked by the route for a 400 response."""

    username: str | None = Field(default=None, description="Username")
    password: str | None = Field(default=None, description="Password")


class TokenResponse(BaseModel):
    """Access token returned after successful login."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "User logged in successfully"
    access_token: str = Field(..., alias="accessToken", description="JWT access token")
