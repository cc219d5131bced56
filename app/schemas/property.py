"""Property API schemas."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class PropertyResponse(BaseModel):
    id: UUID
    owner_id: UUID
    title: str
    location: str
    description: Optional[str] = None
    monthly_rent: Optional[Decimal] = None
    is_available: bool

    model_config = ConfigDict(from_attributes=True)
