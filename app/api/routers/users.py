"""Current-user endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from app.api.dependencies import get_actor, get_user_service
from app.schemas.user import UserResponse, WalletLink
from app.services.context import ActorContext, require_actor
from app.services.users import UserService

router = APIRouter()


@router.get("/me", response_model=UserResponse)
def read_me(
    service: UserService = Depends(get_user_service),
    actor: Optional[ActorContext] = Depends(get_actor),
) -> UserResponse:
    current = require_actor(actor)
    return UserResponse.model_validate(service.get(current.id), from_attributes=True)


@router.patch("/me/wallet", response_model=UserResponse)
def link_wallet(
    payload: WalletLink,
    service: UserService = Depends(get_user_service),
    actor: Optional[ActorContext] = Depends(get_actor),
) -> UserResponse:
    """Permanently link a wallet; tenants need one before an agreement can be finalized."""
    user = service.link_wallet(actor, payload.wallet_address)
    return UserResponse.model_validate(user, from_attributes=True)
