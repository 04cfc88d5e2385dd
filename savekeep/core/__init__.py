"""Core: configuration, database, errors, and the authentication primitives."""

from savekeep.core.access import Role
from savekeep.core.config import Settings, get_settings
from savekeep.core.database import get_db
from savekeep.core.errors import ErrorKind, ServiceError
from savekeep.core.security import PasswordHasher
from savekeep.core.tokens import TokenClaims, TokenService

__all__ = [
    "ErrorKind",
    "PasswordHasher",
    "Role",
    "ServiceError",
    "Settings",
    "TokenClaims",
    "TokenService",
    "get_db",
    "get_settings",
]
