"""Admin schemas: account views (never including credentials) and admin actions."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AccountOut(BaseModel):
    """Account as shown to admins. password_hash and salt are not part of this model."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    role: str
    created_at: datetime
    banned: bool
    banned_at: datetime | None = None


class IdentifierRequest(BaseModel):
    identifier: str = Field(..., max_length=64, description="Account UUID or username")


class UsersPageResponse(BaseModel):
    """Response for GET /admin/users (admin only)."""

    page: int
    pages: int
    count: int
    users: list[AccountOut]


class UserResponse(BaseModel):
    user: AccountOut


class DeleteResponse(BaseModel):
    deleted: str
    success: bool = True


class BanResponse(BaseModel):
    banned: str
    success: bool = True


class UnbanResponse(BaseModel):
    unbanned: str
    success: bool = True
