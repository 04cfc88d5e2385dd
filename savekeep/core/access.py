"""Roles and the role predicates that gate each protected operation."""

from enum import Enum

from savekeep.core.errors import ErrorKind, ServiceError


class Role(str, Enum):
    STANDARD = "standard"
    UPGRADED = "upgraded"
    ADMIN = "admin"


# Role predicates. Each protected operation declares one of these.
ADMIN_ONLY: frozenset[Role] = frozenset({Role.ADMIN})
SAVE_ACCESS: frozenset[Role] = frozenset({Role.UPGRADED, Role.ADMIN})
# Upgrade only; keeps upgraded and admin accounts from upgrading again
STANDARD_ONLY: frozenset[Role] = frozenset({Role.STANDARD})
ANY_ROLE: frozenset[Role] = frozenset(Role)


def is_permitted(role: Role | str, allowed: frozenset[Role]) -> bool:
    try:
        return Role(role) in allowed
    except ValueError:
        return False


def check_role(
    role: Role | str,
    allowed: frozenset[Role],
    denied: ErrorKind = ErrorKind.NO_PERMISSION,
) -> None:
    """Raise ServiceError(denied) unless role satisfies the predicate.

    Only call this with a role taken from a verified token or from the store;
    an authentication failure must already have been raised before this point.
    """
    if not is_permitted(role, allowed):
        raise ServiceError(denied)
