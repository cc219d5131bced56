"""Offer API schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.offer import OfferAction, OfferStatus


class OfferCreate(BaseModel):
    """Schema for placing an offer."""

    property_id: UUID = Field(..., description="Property the offer targets")
    rent_amount: Decimal = Field(..., description="Proposed monthly rent")
    message: Optional[str] = Field(default=None, max_length=2000)

    model_config = ConfigDict(extra="forbid")


class OfferTransition(BaseModel):
    action: OfferAction

    model_config = ConfigDict(extra="forbid")


class OfferResponse(BaseModel):
    id: UUID
    property_id: UUID
    tenant_id: UUID
    rent_amount: Decimal
    message: Optional[str] = None
    status: OfferStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
