"""Pydantic request/response schemas."""

from savekeep.schemas.accounts import (
    AccountOut,
    BanResponse,
    DeleteResponse,
    IdentifierRequest,
    UnbanResponse,
    UserResponse,
    UsersPageResponse,
)
from savekeep.schemas.auth import (
    AuthResponse,
    CredentialsRequest,
    PasswordChangeRequest,
    RefreshResponse,
    SuccessResponse,
)
from savekeep.schemas.health import HealthResponse
from savekeep.schemas.saves import LoadResponse, SaveRequest, SaveSlot
from savekeep.schemas.upgrade import PaymentRequest

__all__ = [
    "AccountOut",
    "AuthResponse",
    "BanResponse",
    "CredentialsRequest",
    "DeleteResponse",
    "HealthResponse",
    "IdentifierRequest",
    "LoadResponse",
    "PasswordChangeRequest",
    "PaymentRequest",
    "RefreshResponse",
    "SaveRequest",
    "SaveSlot",
    "SuccessResponse",
    "UnbanResponse",
    "UserResponse",
    "UsersPageResponse",
]
