"""Admin routes: create admins, list and inspect accounts, ban, unban, delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from savekeep.api.v1.auth import get_account_service, require_roles
from savekeep.core.access import ADMIN_ONLY
from savekeep.core.tokens import TokenClaims
from savekeep.schemas.accounts import (
    AccountOut,
    BanResponse,
    DeleteResponse,
    IdentifierRequest,
    UnbanResponse,
    UserResponse,
    UsersPageResponse,
)
from savekeep.schemas.auth import CredentialsRequest, SuccessResponse
from savekeep.services.accounts import AccountService

router = APIRouter()
require_admin = require_roles(ADMIN_ONLY)


@router.post("/create_admin", response_model=SuccessResponse)
async def create_admin(
    body: CredentialsRequest,
    _admin: Annotated[TokenClaims, Depends(require_admin)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> SuccessResponse:
    """Create another admin account. No token is returned for it."""
    await service.register_admin(body.username, body.password)
    return SuccessResponse()


@router.get("/users", response_model=UsersPageResponse)
def list_users(
    _admin: Annotated[TokenClaims, Depends(require_admin)],
    service: Annotated[AccountService, Depends(get_account_service)],
    page: Annotated[int, Query()],
) -> UsersPageResponse:
    """One page of accounts, oldest first."""
    result = service.list_accounts(page)
    users = [AccountOut.model_validate(a) for a in result.accounts]
    return UsersPageResponse(page=result.page, pages=result.pages, count=len(users), users=users)


@router.get("/user", response_model=UserResponse)
def get_user(
    _admin: Annotated[TokenClaims, Depends(require_admin)],
    service: Annotated[AccountService, Depends(get_account_service)],
    identifier: Annotated[str, Query(max_length=64)],
) -> UserResponse:
    return UserResponse(user=AccountOut.model_validate(service.get_account(identifier)))


@router.delete("/delete", response_model=DeleteResponse)
def delete_user(
    _admin: Annotated[TokenClaims, Depends(require_admin)],
    service: Annotated[AccountService, Depends(get_account_service)],
    identifier: Annotated[str, Query(max_length=64)],
) -> DeleteResponse:
    return DeleteResponse(deleted=service.delete(identifier))


@router.post("/ban", response_model=BanResponse)
def ban(
    body: IdentifierRequest,
    _admin: Annotated[TokenClaims, Depends(require_admin)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> BanResponse:
    return BanResponse(banned=service.ban(body.identifier).username)


@router.post("/unban", response_model=UnbanResponse)
def unban(
    body: IdentifierRequest,
    _admin: Annotated[TokenClaims, Depends(require_admin)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> UnbanResponse:
    return UnbanResponse(unbanned=service.unban(body.identifier).username)
