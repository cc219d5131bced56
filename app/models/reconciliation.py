"""Ledger transactions that confirmed without a matching local agreement."""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import BigInteger, Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin
from app.models.types import GUID


class AgreementReconciliation(TimestampMixin, Base):
    """Operator work item: an on-chain agreement whose local write failed."""

    __tablename__ = "agreement_reconciliations"
    __table_args__ = (Index("ix_agreement_reconciliations_offer", "offer_id"),)

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    offer_id: Mapped[uuid.UUID] = mapped_column(GUID(), nullable=False)
    content_id: Mapped[str] = mapped_column(String(length=128), nullable=False)
    on_chain_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    tx_hash: Mapped[str] = mapped_column(String(length=66), unique=True, nullable=False)
    error: Mapped[Optional[str]] = mapped_column(String(length=1024), nullable=True)
    resolved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
