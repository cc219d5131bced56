"""Agreement API schemas."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.agreement import AgreementStatus


class AgreementFinalize(BaseModel):
    """
    Request to finalize an accepted offer.

    Dates stay strings here; the finalizer parses them as calendar days after
    the caller's role has been checked.
    """

    offer_id: UUID
    start_date: str = Field(..., description="First day of the tenancy (YYYY-MM-DD)")
    end_date: str = Field(..., description="Last day of the tenancy (YYYY-MM-DD)")

    model_config = ConfigDict(extra="forbid")


class AgreementResponse(BaseModel):
    id: UUID
    offer_id: UUID
    property_id: UUID
    owner_id: UUID
    tenant_id: UUID
    monthly_rent: Decimal
    start_date: date
    end_date: date
    content_id: str
    on_chain_id: int
    tx_hash: str
    status: AgreementStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AgreementVerification(BaseModel):
    agreement_id: UUID
    on_chain_id: int
    content_id: str
    verified: bool
