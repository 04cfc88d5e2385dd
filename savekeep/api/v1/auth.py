"""Login and registration routes, plus the auth dependencies every other router uses.

get_current_claims verifies the bearer token; require_roles layers a role
predicate on top of it. Authentication failures (401) are always raised before
any authorization check (403) and before the store is touched.

Routes that hash or verify a password are async: they await the hasher's pool
rather than holding a request thread while it works.
"""

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from savekeep.core.access import Role, check_role
from savekeep.core.database import get_db
from savekeep.core.errors import ErrorKind, ServiceError
from savekeep.core.tokens import TokenClaims, TokenService
from savekeep.schemas.auth import AuthResponse, CredentialsRequest
from savekeep.services.account_store import AccountStore
from savekeep.services.accounts import AccountService

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_account_service(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> AccountService:
    """Dependency: account service bound to this request's DB session."""
    state = request.app.state
    return AccountService(
        store=AccountStore(db),
        hasher=state.hasher,
        tokens=state.tokens,
        page_size=state.settings.USERS_PAGE_SIZE,
        max_save_bytes=state.settings.MAX_SAVE_DATA_BYTES,
    )


def get_current_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> TokenClaims:
    """Dependency: require a valid Bearer token and return its claims. 401 if missing or invalid."""
    if credentials is None:
        raise ServiceError(ErrorKind.MISSING_TOKEN)
    return tokens.verify(credentials.credentials)


def require_roles(
    allowed: frozenset[Role],
    denied: ErrorKind = ErrorKind.NO_PERMISSION,
) -> Callable[[TokenClaims], TokenClaims]:
    """Dependency factory: valid token whose role satisfies `allowed`, else `denied` (403/409)."""

    def dependency(
        claims: Annotated[TokenClaims, Depends(get_current_claims)],
    ) -> TokenClaims:
        check_role(claims.role, allowed, denied)
        return claims

    return dependency


@router.post("/auth", response_model=AuthResponse)
async def login(
    body: CredentialsRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AuthResponse:
    """
    Authenticate with username and password; returns an access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    token = await service.authenticate(body.username, body.password)
    return AuthResponse(access_token=token)


@router.post("/register", response_model=AuthResponse)
async def register(
    body: CredentialsRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AuthResponse:
    """Create a standard account and sign in as it."""
    token = await service.register(body.username, body.password)
    return AuthResponse(access_token=token)
