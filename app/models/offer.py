"""Tenant rent offers."""

from __future__ import annotations

import uuid
from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlalchemy import ForeignKey, Index, Numeric, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, TimestampMixin, status_enum
from app.models.property import Property
from app.models.types import GUID
from app.models.user import User


class OfferStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class OfferAction(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"
    WITHDRAW = "withdraw"


class Offer(TimestampMixin, Base):
    """A tenant's proposed monthly rent for a property."""

    __tablename__ = "offers"
    __table_args__ = (
        Index("ix_offers_property_status", "property_id", "status"),
        Index("ix_offers_tenant", "tenant_id"),
        # One open offer per tenant and property.
        Index(
            "uq_offers_pending_property_tenant",
            "property_id",
            "tenant_id",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    property_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("properties.id"), nullable=False)
    tenant_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("users.id"), nullable=False)
    rent_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[OfferStatus] = mapped_column(
        status_enum(OfferStatus, "offer_status"),
        default=OfferStatus.PENDING,
        nullable=False,
    )

    property: Mapped[Property] = relationship(Property, lazy="joined")
    tenant: Mapped[User] = relationship(User, lazy="joined")
