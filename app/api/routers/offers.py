"""Offer lifecycle endpoints."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_actor, get_offer_service
from app.schemas.offer import OfferCreate, OfferResponse, OfferTransition
from app.services.context import ActorContext
from app.services.offers import OfferService

router = APIRouter()


@router.post(
    "",
    response_model=OfferResponse,
    status_code=status.HTTP_201_CREATED,
)
def place_offer(
    payload: OfferCreate,
    service: OfferService = Depends(get_offer_service),
    actor: Optional[ActorContext] = Depends(get_actor),
) -> OfferResponse:
    """Tenant places an offer on an available property."""
    offer = service.place(
        actor,
        property_id=payload.property_id,
        rent_amount=payload.rent_amount,
        message=payload.message,
    )
    return OfferResponse.model_validate(offer, from_attributes=True)


@router.get(
    "",
    response_model=List[OfferResponse],
)
def list_offers(
    property_id: Optional[UUID] = Query(default=None, alias="propertyId"),
    service: OfferService = Depends(get_offer_service),
    actor: Optional[ActorContext] = Depends(get_actor),
) -> List[OfferResponse]:
    offers = service.list_for(actor, property_id=property_id)
    return [OfferResponse.model_validate(offer, from_attributes=True) for offer in offers]


@router.patch(
    "/{offer_id}",
    response_model=OfferResponse,
)
def transition_offer(
    offer_id: UUID,
    payload: OfferTransition,
    service: OfferService = Depends(get_offer_service),
    actor: Optional[ActorContext] = Depends(get_actor),
) -> OfferResponse:
    """
    Accept, reject or withdraw a pending offer.

    Accepting rejects every other pending offer on the same property.
    """
    offer = service.transition(actor, offer_id, payload.action)
    return OfferResponse.model_validate(offer, from_attributes=True)
