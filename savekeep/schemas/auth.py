"""Request/response schemas for login, registration and token endpoints."""

from pydantic import BaseModel, Field


class CredentialsRequest(BaseModel):
    """Username and password for login, registration and admin creation."""

    username: str = Field(..., max_length=255, description="Username (3-15 chars)")
    password: str = Field(..., max_length=255, description="Password (10-30 chars)")


class PasswordChangeRequest(BaseModel):
    """Current password (re-authentication) and its replacement."""

    password: str = Field(..., max_length=255)
    new_password: str = Field(..., max_length=255)


class AuthResponse(BaseModel):
    """Access token returned by login, registration and upgrade."""

    success: bool = True
    access_token: str = Field(..., description="Signed access token")
    token_type: str = Field(default="bearer", description="Token type")


class RefreshResponse(BaseModel):
    access_token: str = Field(..., description="Signed access token")
    token_type: str = Field(default="bearer", description="Token type")


class SuccessResponse(BaseModel):
    success: bool = True
