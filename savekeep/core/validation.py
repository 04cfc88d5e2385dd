"""Input format checks for credentials, identifiers and the payment form."""

import re
from uuid import UUID

from savekeep.core.errors import ErrorKind, ServiceError

# Case-insensitive alphanumeric plus '-' and '_', 3-15 chars
USERNAME_RE = re.compile(r"^[A-Za-z0-9_-]{3,15}$")

PASSWORD_MIN_LEN = 10
PASSWORD_MAX_LEN = 30
_PASSWORD_CLASSES = (
    re.compile(r"[A-Z]"),
    re.compile(r"[a-z]"),
    re.compile(r"[0-9]"),
    re.compile(r"[^A-Za-z0-9]"),
)

# Payment form (structural only; nothing here is sent to a processor)
NAME_RE = re.compile(r"^[A-Za-z-]{1,50}$")
ADDRESS_RE = re.compile(r"^[A-Za-z0-9,.\s-]{1,125}$")
CARD_NUMBER_RE = re.compile(r"^[0-9]{13,16}$")
CVC_RE = re.compile(r"^[0-9]{3,4}$")
EXP_MONTH_RE = re.compile(r"^(0?[1-9]|1[0-2])$")
EXP_YEAR_RE = re.compile(r"^[0-9]{2}$")


def is_valid_username(value: str) -> bool:
    return bool(USERNAME_RE.fullmatch(value))


def is_valid_password(value: str) -> bool:
    """10-30 chars with an uppercase, a lowercase, a digit and a special character."""
    if not (PASSWORD_MIN_LEN <= len(value) <= PASSWORD_MAX_LEN):
        return False
    return all(pattern.search(value) for pattern in _PASSWORD_CLASSES)


def validate_username(value: str) -> None:
    if not is_valid_username(value):
        raise ServiceError(ErrorKind.CREDS_FORMAT)


def validate_password(value: str) -> None:
    if not is_valid_password(value):
        raise ServiceError(ErrorKind.CREDS_FORMAT)


def validate_credentials(username: str, password: str) -> None:
    validate_username(username)
    validate_password(password)


def validate_payment(
    first_name: str,
    last_name: str,
    address: str,
    card_number: str,
    cvc: str,
    exp_month: str,
    exp_year: str,
) -> None:
    """Raise PAYMENT_DETAILS if any field is malformed. No per-field error is reported."""
    compliant = (
        NAME_RE.fullmatch(first_name)
        and NAME_RE.fullmatch(last_name)
        and ADDRESS_RE.fullmatch(address)
        and CARD_NUMBER_RE.fullmatch(card_number)
        and CVC_RE.fullmatch(cvc)
        and EXP_MONTH_RE.fullmatch(exp_month)
        and EXP_YEAR_RE.fullmatch(exp_year)
    )
    if not compliant:
        raise ServiceError(ErrorKind.PAYMENT_DETAILS)


def parse_identifier(value: str) -> UUID | str:
    """Account identifier: a UUID if it parses as one, otherwise a well-formed username."""
    try:
        return UUID(value)
    except (TypeError, ValueError, AttributeError):
        pass
    if not isinstance(value, str) or not is_valid_username(value):
        raise ServiceError(ErrorKind.CREDS_FORMAT)
    return value
