"""Notarized rental agreements."""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from enum import Enum

from sqlalchemy import BigInteger, CheckConstraint, Date, ForeignKey, Index, Numeric, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, TimestampMixin, status_enum
from app.models.offer import Offer
from app.models.property import Property
from app.models.types import GUID

# Recorded when the confirmation receipt carried no AgreementCreated event.
UNKNOWN_ON_CHAIN_ID = 0


class AgreementStatus(str, Enum):
    ACTIVE = "active"
    TERMINATED = "terminated"
    EXPIRED = "expired"


class Agreement(TimestampMixin, Base):
    """Final, notarized terms of an accepted offer."""

    __tablename__ = "agreements"
    __table_args__ = (
        CheckConstraint("end_date > start_date", name="ck_agreements_date_order"),
        Index("ix_agreements_owner", "owner_id"),
        Index("ix_agreements_tenant", "tenant_id"),
        Index(
            "uq_agreements_active_property",
            "property_id",
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    offer_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("offers.id"), unique=True, nullable=False)
    property_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("properties.id"), nullable=False)
    owner_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("users.id"), nullable=False)
    tenant_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("users.id"), nullable=False)
    monthly_rent: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    content_id: Mapped[str] = mapped_column(String(length=128), nullable=False)
    on_chain_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    tx_hash: Mapped[str] = mapped_column(String(length=66), unique=True, nullable=False)
    status: Mapped[AgreementStatus] = mapped_column(
        status_enum(AgreementStatus, "agreement_status"),
        default=AgreementStatus.ACTIVE,
        nullable=False,
    )

    offer: Mapped[Offer] = relationship(Offer)
    property: Mapped[Property] = relationship(Property, lazy="joined")
