"""Routes for signed-in players: token refresh, password change, upgrade, save and load."""

from typing import Annotated

from fastapi import APIRouter, Depends

from savekeep.api.v1.auth import get_account_service, get_current_claims, require_roles
from savekeep.core.access import SAVE_ACCESS, STANDARD_ONLY
from savekeep.core.errors import ErrorKind
from savekeep.core.tokens import TokenClaims
from savekeep.schemas.auth import (
    AuthResponse,
    PasswordChangeRequest,
    RefreshResponse,
    SuccessResponse,
)
from savekeep.schemas.saves import LoadResponse, SaveRequest, SaveSlot
from savekeep.schemas.upgrade import PaymentRequest
from savekeep.services.accounts import AccountService, PaymentDetails

router = APIRouter()

require_standard = require_roles(STANDARD_ONLY, denied=ErrorKind.UPGRADED)
require_save_access = require_roles(SAVE_ACCESS, denied=ErrorKind.NOT_UPGRADED)


@router.get("/refresh", response_model=RefreshResponse)
def refresh(
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> RefreshResponse:
    """Exchange a token that is about to expire for a fresh one."""
    return RefreshResponse(access_token=service.refresh(claims))


@router.post("/update_password", response_model=SuccessResponse)
async def update_password(
    body: PasswordChangeRequest,
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> SuccessResponse:
    await service.change_password(claims, body.password, body.new_password)
    return SuccessResponse()


@router.post("/upgrade", response_model=AuthResponse)
def upgrade(
    body: PaymentRequest,
    claims: Annotated[TokenClaims, Depends(require_standard)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AuthResponse:
    """
    Upgrade a standard account. The payment step is a placeholder: the form is
    checked for shape only and nothing is charged.
    Returns a new token carrying the upgraded role.
    """
    payment = PaymentDetails(**body.model_dump())
    return AuthResponse(access_token=service.upgrade(claims, payment))


@router.post("/save", response_model=SuccessResponse)
def save(
    body: SaveRequest,
    claims: Annotated[TokenClaims, Depends(require_save_access)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> SuccessResponse:
    service.save(claims, body.slot, body.data)
    return SuccessResponse()


@router.get("/load", response_model=LoadResponse)
def load(
    claims: Annotated[TokenClaims, Depends(require_save_access)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> LoadResponse:
    states = service.load(claims)
    return LoadResponse(
        slots=[SaveSlot(slot=s.slot, data=s.data, saved_at=s.saved_at) for s in states]
    )
