"""Issuing and verifying signed, time-bounded, role-carrying access tokens.

Tokens are stateless HS256 JWTs with claims iss, id, user, role, iat, exp.
There is no revocation list: a token stays valid until it expires, so its role
claim can go stale. Operations that change security-sensitive state re-read
the account instead of trusting the claim.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any
from uuid import UUID

import jwt
from pydantic import BaseModel, ValidationError

from savekeep.core.access import Role
from savekeep.core.errors import ErrorKind, ServiceError

if TYPE_CHECKING:
    from savekeep.core.config import Settings

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["iss", "id", "user", "role", "iat", "exp"]


class TokenClaims(BaseModel):
    """Verified claim set of an access token."""

    iss: str
    id: UUID
    user: str
    role: Role
    iat: int
    exp: int


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenService:
    """Issues and verifies access tokens for one service domain."""

    def __init__(
        self,
        domain: str,
        secret: str,
        duration: timedelta,
        leeway: timedelta = timedelta(seconds=3),
        refresh_threshold: timedelta = timedelta(seconds=30),
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.domain = domain
        self._secret = secret
        self.duration = duration
        self.leeway = leeway
        self.refresh_threshold = refresh_threshold
        self.algorithm = algorithm
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenService":
        return cls(
            domain=settings.SERVICE_DOMAIN,
            secret=settings.TOKEN_SECRET.get_secret_value(),
            duration=timedelta(seconds=settings.TOKEN_DURATION_SEC),
            leeway=timedelta(seconds=settings.TOKEN_LEEWAY_SEC),
            refresh_threshold=timedelta(seconds=settings.TOKEN_REFRESH_THRESHOLD_SEC),
            algorithm=settings.TOKEN_ALGORITHM,
        )

    def issue(self, username: str, role: Role | str, account_id: UUID) -> str:
        """Create a signed token for the account, valid for the configured duration."""
        now = int(self._clock().timestamp())
        payload: dict[str, Any] = {
            "iss": self.domain,
            "id": str(account_id),
            "user": username,
            "role": Role(role).value,
            "iat": now,
            "exp": now + int(self.duration.total_seconds()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Check signature, issuer and time window; return the claims.
        Raises ServiceError(INVALID_TOKEN) on any failure.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                issuer=self.domain,
                leeway=self.leeway,
                options={"require": REQUIRED_CLAIMS},
            )
            claims = TokenClaims.model_validate(payload)
        except (jwt.PyJWTError, ValidationError) as e:
            logger.info("Rejected token: %s", type(e).__name__)
            raise ServiceError(ErrorKind.INVALID_TOKEN) from e

        # Issued in the future beyond leeway (older PyJWT releases skip this check)
        now = self._clock().timestamp()
        if claims.iat > now + self.leeway.total_seconds():
            logger.info("Rejected token: issued in the future")
            raise ServiceError(ErrorKind.INVALID_TOKEN)
        return claims

    def remaining(self, claims: TokenClaims) -> timedelta:
        return timedelta(seconds=claims.exp - self._clock().timestamp())

    def can_refresh(self, claims: TokenClaims) -> bool:
        return self.remaining(claims) <= self.refresh_threshold

    def refresh(self, claims: TokenClaims, role: Role | str | None = None) -> str:
        """
        Issue a new token for the same account once the current one is near expiry.

        role overrides the claim's role (callers pass the stored role). Raises
        ServiceError(TOKEN_DURATION) while more than refresh_threshold remains.
        """
        if not self.can_refresh(claims):
            raise ServiceError(ErrorKind.TOKEN_DURATION)
        return self.issue(claims.user, role if role is not None else claims.role, claims.id)
