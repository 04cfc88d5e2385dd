"""Error taxonomy: every failure the core reports, and its external status.

ERROR_TABLE is the single place that decides how an ErrorKind is presented to
callers. Store and hashing failures are translated into a ServiceError at the
operation boundary; nothing else crosses it.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from sqlalchemy.exc import (
    DBAPIError,
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)

logger = logging.getLogger(__name__)

# SQLSTATE classes
PG_UNIQUE_VIOLATION = "23505"
PG_CONNECTION_EXCEPTION_CLASS = "08"


class ErrorClass(str, Enum):
    """External status class of a failure."""

    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    BANNED = "banned"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


class ErrorKind(str, Enum):
    MISSING_TOKEN = "missing_token"
    INVALID_TOKEN = "invalid_token"
    INVALID_CREDENTIALS = "invalid_credentials"
    BANNED = "banned"
    NO_PERMISSION = "no_permission"
    NOT_UPGRADED = "not_upgraded"
    CREDS_FORMAT = "creds_format"
    PAYMENT_DETAILS = "payment_details"
    PAYLOAD = "payload"
    PARAMETER = "parameter"
    PAGE = "page"
    INVALID_SLOT = "invalid_slot"
    TOKEN_DURATION = "token_duration"
    USERNAME_TAKEN = "username_taken"
    PRIOR_BAN = "prior_ban"
    NOT_BANNED = "not_banned"
    UPGRADED = "upgraded"
    ACCOUNT_NOT_FOUND = "account_not_found"
    DATABASE_UNREACHABLE = "database_unreachable"
    TRANSACTION = "transaction"
    DATABASE = "database"


@dataclass(frozen=True)
class ErrorInfo:
    error_class: ErrorClass
    status_code: int
    message: str


ERROR_TABLE: dict[ErrorKind, ErrorInfo] = {
    ErrorKind.MISSING_TOKEN: ErrorInfo(ErrorClass.AUTHENTICATION, 401, "Not Authenticated"),
    ErrorKind.INVALID_TOKEN: ErrorInfo(ErrorClass.AUTHENTICATION, 401, "Invalid Token"),
    ErrorKind.INVALID_CREDENTIALS: ErrorInfo(
        ErrorClass.AUTHENTICATION, 401, "Supplied Values Dont Match A User"
    ),
    ErrorKind.BANNED: ErrorInfo(ErrorClass.BANNED, 401, "Account Banned"),
    ErrorKind.NO_PERMISSION: ErrorInfo(ErrorClass.AUTHORIZATION, 403, "Unauthorized"),
    ErrorKind.NOT_UPGRADED: ErrorInfo(ErrorClass.AUTHORIZATION, 403, "Account Is Not Upgraded"),
    ErrorKind.CREDS_FORMAT: ErrorInfo(
        ErrorClass.VALIDATION, 400, "Credential Format Requirements"
    ),
    ErrorKind.PAYMENT_DETAILS: ErrorInfo(ErrorClass.VALIDATION, 400, "Payment Details Formatting"),
    ErrorKind.PAYLOAD: ErrorInfo(ErrorClass.VALIDATION, 400, "Invalid Payload"),
    ErrorKind.PARAMETER: ErrorInfo(ErrorClass.VALIDATION, 400, "Invalid Parameter"),
    ErrorKind.PAGE: ErrorInfo(ErrorClass.VALIDATION, 400, "Nonexistent Page"),
    ErrorKind.INVALID_SLOT: ErrorInfo(ErrorClass.VALIDATION, 400, "Invalid Option"),
    ErrorKind.TOKEN_DURATION: ErrorInfo(ErrorClass.VALIDATION, 400, "Duration Not Met"),
    ErrorKind.USERNAME_TAKEN: ErrorInfo(ErrorClass.CONFLICT, 409, "Username Taken"),
    ErrorKind.PRIOR_BAN: ErrorInfo(ErrorClass.CONFLICT, 409, "User Already Banned"),
    ErrorKind.NOT_BANNED: ErrorInfo(ErrorClass.CONFLICT, 409, "User Is Not Banned"),
    ErrorKind.UPGRADED: ErrorInfo(ErrorClass.CONFLICT, 409, "Account Already Upgraded"),
    ErrorKind.ACCOUNT_NOT_FOUND: ErrorInfo(ErrorClass.NOT_FOUND, 404, "User Not Found"),
    ErrorKind.DATABASE_UNREACHABLE: ErrorInfo(ErrorClass.INTERNAL, 500, "Database Unreachable"),
    ErrorKind.TRANSACTION: ErrorInfo(ErrorClass.INTERNAL, 500, "Internal Server Error"),
    ErrorKind.DATABASE: ErrorInfo(ErrorClass.INTERNAL, 500, "Database Error:"),
}


class ServiceError(Exception):
    """Raised by the core for every failure a caller may see.

    detail carries the store's diagnostic code for DATABASE errors and is
    appended to the message; it is never the raw driver text.
    """

    def __init__(self, kind: ErrorKind, detail: str | None = None) -> None:
        self.kind = kind
        self.detail = detail
        self.message = render_message(kind, detail)
        super().__init__(self.message)

    @property
    def info(self) -> ErrorInfo:
        return ERROR_TABLE[self.kind]

    @property
    def status_code(self) -> int:
        return ERROR_TABLE[self.kind].status_code

    @property
    def error_class(self) -> ErrorClass:
        return ERROR_TABLE[self.kind].error_class


def render_message(kind: ErrorKind, detail: str | None = None) -> str:
    """External message for an error kind (DATABASE gets its tagged code appended)."""
    base = ERROR_TABLE[kind].message
    if kind is ErrorKind.DATABASE:
        return f"{base} {detail or 'unknown'}"
    return base


def _sqlstate(exc: SQLAlchemyError) -> str | None:
    orig = getattr(exc, "orig", None)
    if orig is None:
        return None
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    return str(code) if code else None


def _is_unique_violation(exc: IntegrityError) -> bool:
    if _sqlstate(exc) == PG_UNIQUE_VIOLATION:
        return True
    # SQLite has no SQLSTATE; fall back to its message
    return "UNIQUE constraint failed" in str(getattr(exc, "orig", ""))


def db_error(exc: SQLAlchemyError) -> ServiceError:
    """Translate a SQLAlchemy error into a ServiceError.

    Unique violations become USERNAME_TAKEN (the only unique key a caller can
    collide with). Connection failures become DATABASE_UNREACHABLE. Everything
    else is a DATABASE error tagged with its SQLSTATE or SQLAlchemy code.
    """
    if isinstance(exc, IntegrityError) and _is_unique_violation(exc):
        return ServiceError(ErrorKind.USERNAME_TAKEN)

    code = _sqlstate(exc)
    if isinstance(exc, (DisconnectionError, InterfaceError)) or (
        isinstance(exc, OperationalError)
        and (
            (code and code.startswith(PG_CONNECTION_EXCEPTION_CLASS))
            or (isinstance(exc, DBAPIError) and exc.connection_invalidated)
        )
    ):
        logger.error("Database unreachable: %s", type(exc).__name__)
        return ServiceError(ErrorKind.DATABASE_UNREACHABLE)

    tag = code or getattr(exc, "code", None) or "unknown"
    logger.error("Database error code=%s type=%s", tag, type(exc).__name__, exc_info=exc)
    return ServiceError(ErrorKind.DATABASE, detail=str(tag))


def transaction_error(exc: SQLAlchemyError) -> ServiceError:
    """Commit or rollback failure of a multi-statement transaction."""
    logger.error("Transaction failed: %s", type(exc).__name__, exc_info=exc)
    return ServiceError(ErrorKind.TRANSACTION)
