"""User API schemas."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.user import UserRole


class WalletLink(BaseModel):
    wallet_address: str = Field(..., min_length=1, description="EVM address (0x-prefixed)")

    model_config = ConfigDict(extra="forbid")


class UserResponse(BaseModel):
    id: UUID
    name: str
    email: str
    role: UserRole
    wallet_address: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
