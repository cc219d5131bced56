"""User lookups and one-way wallet linking."""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from web3 import Web3

from app.models.user import User
from app.services.context import ActorContext, require_actor
from app.services.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError


class UserService:
    def __init__(self, session: Session) -> None:
        self._session = session
        self._logger = logging.getLogger("app.services.users")

    def get(self, user_id: UUID) -> User:
        user = self._session.get(User, user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def resolve_actor(self, user_id: Optional[UUID]) -> Optional[ActorContext]:
        """Map an authenticated user id to an actor context; unknown ids yield None."""

        if user_id is None:
            return None
        user = self._session.get(User, user_id)
        return ActorContext.from_user(user) if user else None

    def link_wallet(self, actor: Optional[ActorContext], wallet_address: str) -> User:
        """
        Attach a wallet to the caller. Once set, the address can never change.

        Raises:
            ValidationError: Not a valid EVM address
            ForbiddenError: The caller already has a wallet
            ConflictError: Another user owns the address
        """
        current = require_actor(actor)
        if not wallet_address or not Web3.is_address(wallet_address):
            raise ValidationError("Invalid wallet address format")
        normalized = Web3.to_checksum_address(wallet_address).lower()

        user = self.get(current.id)
        if user.wallet_address:
            raise ForbiddenError("A wallet is already permanently linked to this account and cannot be changed")

        taken = self._session.scalar(
            select(User.id).where(User.wallet_address == normalized, User.id != user.id)
        )
        if taken:
            raise ConflictError("This wallet address is already linked to another account")

        user.wallet_address = normalized
        try:
            self._session.flush()
        except IntegrityError as exc:
            self._session.rollback()
            raise ConflictError("This wallet address is already linked to another account") from exc

        self._logger.info("wallet_linked", extra={"user_id": str(user.id), "wallet_address": normalized})
        return user
