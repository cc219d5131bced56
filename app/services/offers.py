"""Offer lifecycle: place, accept, reject, withdraw."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.offer import Offer, OfferAction, OfferStatus
from app.models.property import Property
from app.models.user import UserRole
from app.services.availability import PropertyAvailabilityGate
from app.services.context import ActorContext, require_actor
from app.services.errors import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)


_CENT = Decimal("0.01")
_MAX_RENT = Decimal("1e12")

_TARGET_STATUS = {
    OfferAction.ACCEPT: OfferStatus.ACCEPTED,
    OfferAction.REJECT: OfferStatus.REJECTED,
    OfferAction.WITHDRAW: OfferStatus.WITHDRAWN,
}


class OfferService:
    """State machine for offers. Callers commit; failures leave nothing flushed."""

    def __init__(self, session: Session, availability: Optional[PropertyAvailabilityGate] = None) -> None:
        self._session = session
        self._availability = availability or PropertyAvailabilityGate(session)
        self._logger = logging.getLogger("app.services.offers")

    def get(self, offer_id: UUID) -> Offer:
        offer = self._session.get(Offer, offer_id)
        if not offer:
            raise NotFoundError(f"Offer {offer_id} not found")
        return offer

    def place(
        self,
        actor: Optional[ActorContext],
        *,
        property_id: UUID,
        rent_amount: Decimal | int | float | str,
        message: Optional[str] = None,
    ) -> Offer:
        tenant = require_actor(actor, UserRole.TENANT)
        amount = self._parse_amount(rent_amount)

        property_entity = self._session.get(Property, property_id)
        if not property_entity:
            raise NotFoundError(f"Property {property_id} not found")
        self._availability.ensure_available(property_entity)

        existing = self._session.scalar(
            select(Offer.id).where(
                Offer.property_id == property_id,
                Offer.tenant_id == tenant.id,
                Offer.status == OfferStatus.PENDING,
            )
        )
        if existing:
            raise ConflictError("You already have a pending offer on this property")

        offer = Offer(
            property_id=property_id,
            tenant_id=tenant.id,
            rent_amount=amount,
            message=message,
            status=OfferStatus.PENDING,
        )
        self._session.add(offer)
        try:
            self._session.flush()
        except IntegrityError as exc:
            self._session.rollback()
            raise ConflictError("You already have a pending offer on this property") from exc

        self._logger.info(
            "offer_placed",
            extra={
                "offer_id": str(offer.id),
                "property_id": str(property_id),
                "tenant_id": str(tenant.id),
                "rent_amount": str(amount),
            },
        )
        return offer

    def transition(self, actor: Optional[ActorContext], offer_id: UUID, action: OfferAction | str) -> Offer:
        """
        Apply an owner or tenant decision to a pending offer.

        Accepting an offer rejects every other pending offer on the same
        property in the same transaction.

        Raises:
            ValidationError: Unknown action
            NotFoundError: Offer does not exist
            InvalidStateError: Offer is no longer pending
            ForbiddenError: Actor is not the tenant (withdraw) or owner (accept/reject)
        """
        current = require_actor(actor)
        try:
            action = OfferAction(action)
        except ValueError as exc:
            raise ValidationError(f"Invalid action: {action!r}") from exc

        offer = self.get(offer_id)
        if offer.status != OfferStatus.PENDING:
            raise InvalidStateError("Offer is no longer pending")

        if action is OfferAction.WITHDRAW:
            if offer.tenant_id != current.id:
                raise ForbiddenError("Only the tenant who placed the offer can withdraw it")
        elif offer.property.owner_id != current.id:
            raise ForbiddenError("Only the property owner can accept or reject offers")

        new_status = _TARGET_STATUS[action]
        result = self._session.execute(
            update(Offer)
            .where(Offer.id == offer.id, Offer.status == OfferStatus.PENDING)
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise InvalidStateError("Offer is no longer pending")

        rejected = 0
        if action is OfferAction.ACCEPT:
            rejected = self._session.execute(
                update(Offer)
                .where(
                    Offer.property_id == offer.property_id,
                    Offer.id != offer.id,
                    Offer.status == OfferStatus.PENDING,
                )
                .values(status=OfferStatus.REJECTED)
                .execution_options(synchronize_session=False)
            ).rowcount
        # Bulk updates bypass the identity map.
        self._session.expire_all()

        self._logger.info(
            "offer_transitioned",
            extra={
                "offer_id": str(offer_id),
                "action": action.value,
                "status": new_status.value,
                "actor_id": str(current.id),
                "siblings_rejected": rejected,
            },
        )
        return self.get(offer_id)

    def list_for(self, actor: Optional[ActorContext], *, property_id: Optional[UUID] = None) -> List[Offer]:
        current = require_actor(actor)
        stmt = select(Offer)
        if current.role is UserRole.TENANT:
            stmt = stmt.where(Offer.tenant_id == current.id)
            if property_id:
                stmt = stmt.where(Offer.property_id == property_id)
        elif current.role is UserRole.OWNER:
            if property_id:
                owned = self._session.scalar(
                    select(Property.id).where(Property.id == property_id, Property.owner_id == current.id)
                )
                if not owned:
                    raise ForbiddenError("Property is not owned by the caller")
                stmt = stmt.where(Offer.property_id == property_id)
            else:
                stmt = stmt.join(Offer.property).where(Property.owner_id == current.id)
        elif property_id:
            stmt = stmt.where(Offer.property_id == property_id)
        return list(self._session.scalars(stmt.order_by(Offer.created_at.desc())).unique().all())

    @staticmethod
    def _parse_amount(value: Decimal | int | float | str) -> Decimal:
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid rent amount: {value!r}") from exc
        if not amount.is_finite() or amount <= 0:
            raise ValidationError("Rent amount must be greater than zero")
        # Stored as Numeric(14, 2).
        if amount >= _MAX_RENT:
            raise ValidationError("Rent amount must be less than 1000000000000")
        if amount != amount.quantize(_CENT):
            raise ValidationError("Rent amount cannot have more than 2 decimal places")
        return amount
