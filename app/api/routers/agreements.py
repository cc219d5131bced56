"""Agreement finalization and read endpoints."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_actor, get_agreement_finalizer, get_agreement_service
from app.schemas.agreement import AgreementFinalize, AgreementResponse, AgreementVerification
from app.services.agreements import AgreementFinalizer, AgreementService
from app.services.context import ActorContext

router = APIRouter()


@router.post(
    "",
    response_model=AgreementResponse,
    status_code=status.HTTP_201_CREATED,
)
def finalize_agreement(
    payload: AgreementFinalize,
    finalizer: AgreementFinalizer = Depends(get_agreement_finalizer),
    actor: Optional[ActorContext] = Depends(get_actor),
) -> AgreementResponse:
    """
    Finalize an accepted offer.

    Pins the agreement document to IPFS, records it on-chain and blocks until
    the transaction is confirmed, so expect multi-second latency.
    """
    agreement = finalizer.finalize(
        actor,
        offer_id=payload.offer_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
    )
    return AgreementResponse.model_validate(agreement, from_attributes=True)


@router.get(
    "",
    response_model=List[AgreementResponse],
)
def list_agreements(
    service: AgreementService = Depends(get_agreement_service),
    actor: Optional[ActorContext] = Depends(get_actor),
) -> List[AgreementResponse]:
    return [AgreementResponse.model_validate(item, from_attributes=True) for item in service.list_for(actor)]


@router.get(
    "/{agreement_id}",
    response_model=AgreementResponse,
)
def get_agreement(
    agreement_id: UUID,
    service: AgreementService = Depends(get_agreement_service),
    actor: Optional[ActorContext] = Depends(get_actor),
) -> AgreementResponse:
    return AgreementResponse.model_validate(service.get(actor, agreement_id), from_attributes=True)


@router.get(
    "/{agreement_id}/verify",
    response_model=AgreementVerification,
)
def verify_agreement(
    agreement_id: UUID,
    service: AgreementService = Depends(get_agreement_service),
    actor: Optional[ActorContext] = Depends(get_actor),
) -> AgreementVerification:
    """Compare the stored content id with the one recorded on-chain."""
    agreement, verified = service.verify_on_chain(actor, agreement_id)
    return AgreementVerification(
        agreement_id=agreement.id,
        on_chain_id=agreement.on_chain_id,
        content_id=agreement.content_id,
        verified=verified,
    )
