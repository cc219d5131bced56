"""Agreement finalization: validate, pin, notarize on-chain, persist."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Callable, List, Optional, Tuple, Union
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import AppSettings, get_settings
from app.models.agreement import UNKNOWN_ON_CHAIN_ID, Agreement, AgreementStatus
from app.models.offer import Offer, OfferStatus
from app.models.reconciliation import AgreementReconciliation
from app.models.user import UserRole
from app.schemas.notarization import NotarizationDocument, OwnerRef, PropertyRef, TenantRef
from app.services.availability import PropertyAvailabilityGate
from app.services.content_store import ContentStoreClient
from app.services.context import ActorContext, require_actor
from app.services.errors import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    PreconditionError,
    ReconciliationRequiredError,
    ValidationError,
)
from app.services.ledger import LedgerClient, LedgerReceipt, to_epoch_seconds, to_minor_units

logger = logging.getLogger("app.services.agreements")

DateInput = Union[str, date]


def parse_calendar_date(value: DateInput, field: str) -> date:
    """
    Interpret ``value`` as a calendar day.

    Accepts ``YYYY-MM-DD`` or an ISO timestamp whose date part is taken as
    written; no timezone conversion is applied.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be an ISO calendar date")

    text = value.strip()
    if len(text) > 10:
        if text[10] not in ("T", "t", " "):
            raise ValidationError(f"{field} must be an ISO calendar date")
        try:
            datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValidationError(f"{field} must be an ISO calendar date") from exc
        text = text[:10]
    try:
        return date.fromisoformat(text)
    except ValueError as exc:
        raise ValidationError(f"{field} must be an ISO calendar date") from exc


class AgreementFinalizer:
    """
    Turns an accepted offer into a notarized agreement.

    The content store and ledger are called at most once each. Everything up
    to the ledger call is side-effect free locally; after ledger confirmation
    the agreement row and the property flag commit together, and a failed
    commit is recorded for manual reconciliation instead of being rolled
    back on-chain.
    """

    def __init__(
        self,
        session: Session,
        *,
        content_store: ContentStoreClient,
        ledger: LedgerClient,
        availability: Optional[PropertyAvailabilityGate] = None,
        settings: Optional[AppSettings] = None,
        today: Callable[[], date] = date.today,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._session = session
        self._content_store = content_store
        self._ledger = ledger
        self._availability = availability or PropertyAvailabilityGate(session)
        self._rent_decimals = (settings or get_settings()).ledger_rent_decimals
        self._today = today
        self._now = now

    def finalize(
        self,
        actor: Optional[ActorContext],
        *,
        offer_id: UUID,
        start_date: DateInput,
        end_date: DateInput,
    ) -> Agreement:
        owner = require_actor(actor, UserRole.OWNER)

        start = parse_calendar_date(start_date, "startDate")
        end = parse_calendar_date(end_date, "endDate")
        if start < self._today():
            raise ValidationError("startDate cannot be in the past")
        if end <= start:
            raise ValidationError("endDate must be after startDate")

        offer = self._session.get(Offer, offer_id)
        if not offer:
            raise NotFoundError(f"Offer {offer_id} not found")
        if offer.status != OfferStatus.ACCEPTED:
            raise InvalidStateError("Offer must be accepted first")
        if offer.property.owner_id != owner.id:
            raise ForbiddenError("Only the property owner can finalize this offer")
        self._ensure_not_finalized(offer.id)
        if not offer.tenant.wallet_address:
            raise PreconditionError("Tenant has no wallet address on file")
        if not offer.property.is_available:
            raise ConflictError("Property already has an active agreement")

        document = self.build_document(offer, start, end)
        content_id = self._content_store.pin_document(document.to_payload(), name=f"agreement-{offer.id}")

        receipt = self._ledger.submit(
            tenant_address=offer.tenant.wallet_address,
            property_id=str(offer.property_id),
            rent_minor_units=to_minor_units(offer.rent_amount, self._rent_decimals),
            start_epoch_seconds=to_epoch_seconds(start),
            end_epoch_seconds=to_epoch_seconds(end),
            content_id=content_id,
        )
        on_chain_id = receipt.on_chain_id
        if on_chain_id is None:
            # The transaction succeeded; keep the sentinel and rely on tx_hash for reconciliation.
            logger.warning(
                "agreement_created_event_missing",
                extra={"offer_id": str(offer.id), "tx_hash": receipt.tx_hash, "content_id": content_id},
            )
            on_chain_id = UNKNOWN_ON_CHAIN_ID

        return self._persist(offer, start, end, content_id, on_chain_id, receipt)

    def build_document(self, offer: Offer, start: date, end: date) -> NotarizationDocument:
        property_entity = offer.property
        return NotarizationDocument(
            property=PropertyRef(id=property_entity.id, title=property_entity.title, location=property_entity.location),
            owner=OwnerRef(id=property_entity.owner_id),
            tenant=TenantRef(id=offer.tenant.id, name=offer.tenant.name, email=offer.tenant.email),
            monthly_rent=offer.rent_amount,
            start_date=start,
            end_date=end,
            offer_id=offer.id,
            generated_at=self._now(),
        )

    def _ensure_not_finalized(self, offer_id: UUID) -> None:
        if self._session.scalar(select(Agreement.id).where(Agreement.offer_id == offer_id)):
            raise ConflictError("Agreement already created for this offer")
        pending = self._session.scalar(
            select(AgreementReconciliation.tx_hash).where(
                AgreementReconciliation.offer_id == offer_id,
                AgreementReconciliation.resolved.is_(False),
            )
        )
        if pending:
            raise ConflictError(f"Offer has an on-chain agreement awaiting reconciliation (tx {pending})")

    def _persist(
        self,
        offer: Offer,
        start: date,
        end: date,
        content_id: str,
        on_chain_id: int,
        receipt: LedgerReceipt,
    ) -> Agreement:
        offer_id = offer.id
        agreement = Agreement(
            offer_id=offer_id,
            property_id=offer.property_id,
            owner_id=offer.property.owner_id,
            tenant_id=offer.tenant_id,
            monthly_rent=offer.rent_amount,
            start_date=start,
            end_date=end,
            content_id=content_id,
            on_chain_id=on_chain_id,
            tx_hash=receipt.tx_hash,
            status=AgreementStatus.ACTIVE,
        )
        try:
            self._session.add(agreement)
            self._session.flush()
            self._availability.mark_leased(offer.property_id)
            self._session.commit()
        except (SQLAlchemyError, ConflictError) as exc:
            self._session.rollback()
            self._record_reconciliation(offer_id, content_id, on_chain_id, receipt.tx_hash, exc)
            if isinstance(exc, (IntegrityError, ConflictError)):
                raise ConflictError(
                    f"Offer {offer_id} or its property was finalized concurrently; "
                    f"transaction {receipt.tx_hash} requires reconciliation"
                ) from exc
            raise ReconciliationRequiredError(
                f"Transaction {receipt.tx_hash} confirmed on-chain but the agreement could not be stored",
                offer_id=str(offer_id),
                tx_hash=receipt.tx_hash,
            ) from exc

        logger.info(
            "agreement_finalized",
            extra={
                "agreement_id": str(agreement.id),
                "offer_id": str(offer_id),
                "property_id": str(agreement.property_id),
                "content_id": content_id,
                "on_chain_id": on_chain_id,
                "tx_hash": receipt.tx_hash,
            },
        )
        return agreement

    def _record_reconciliation(
        self,
        offer_id: UUID,
        content_id: str,
        on_chain_id: int,
        tx_hash: str,
        error: Exception,
    ) -> None:
        logger.error(
            "agreement_reconciliation_required",
            extra={
                "offer_id": str(offer_id),
                "content_id": content_id,
                "on_chain_id": on_chain_id,
                "tx_hash": tx_hash,
                "error": str(error),
            },
        )
        try:
            self._session.add(
                AgreementReconciliation(
                    offer_id=offer_id,
                    content_id=content_id,
                    on_chain_id=on_chain_id,
                    tx_hash=tx_hash,
                    error=str(error)[:1024],
                )
            )
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            logger.exception("agreement_reconciliation_record_failed", extra={"tx_hash": tx_hash})


class AgreementService:
    """Read side of agreements plus the audit-only ledger integrity check."""

    def __init__(self, session: Session, ledger: Optional[LedgerClient] = None) -> None:
        self._session = session
        self._ledger = ledger

    def get(self, actor: Optional[ActorContext], agreement_id: UUID) -> Agreement:
        current = require_actor(actor)
        agreement = self._session.get(Agreement, agreement_id)
        if not agreement:
            raise NotFoundError(f"Agreement {agreement_id} not found")
        if current.role is not UserRole.ADMIN and current.id not in (agreement.owner_id, agreement.tenant_id):
            raise ForbiddenError("Agreement is not visible to the caller")
        return agreement

    def list_for(self, actor: Optional[ActorContext]) -> List[Agreement]:
        current = require_actor(actor)
        stmt = select(Agreement)
        if current.role is UserRole.OWNER:
            stmt = stmt.where(Agreement.owner_id == current.id)
        elif current.role is UserRole.TENANT:
            stmt = stmt.where(Agreement.tenant_id == current.id)
        return list(self._session.scalars(stmt.order_by(Agreement.created_at.desc())).all())

    def verify_on_chain(self, actor: Optional[ActorContext], agreement_id: UUID) -> Tuple[Agreement, bool]:
        """Return the agreement and whether the ledger still holds its content id."""

        agreement = self.get(actor, agreement_id)
        if self._ledger is None:
            raise PreconditionError("Ledger client is not configured")
        if agreement.on_chain_id == UNKNOWN_ON_CHAIN_ID:
            raise PreconditionError("Agreement has no recorded on-chain id")
        return agreement, self._ledger.verify(agreement.on_chain_id, agreement.content_id)
