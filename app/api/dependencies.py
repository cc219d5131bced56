"""Dependency injection helpers for FastAPI routes."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.core.database import get_session
from app.services.agreements import AgreementFinalizer, AgreementService
from app.services.content_store import ContentStoreClient, get_content_store_client
from app.services.context import ActorContext
from app.services.ledger import LedgerClient, get_ledger_client
from app.services.offers import OfferService
from app.services.users import UserService


def get_db_session() -> Session:
    yield from get_session()


def get_content_store() -> ContentStoreClient:
    return get_content_store_client()


def get_ledger() -> LedgerClient:
    return get_ledger_client()


def get_actor(
    session: Session = Depends(get_db_session),
    x_actor_id: Optional[UUID] = Header(default=None, alias="X-Actor-Id"),
) -> Optional[ActorContext]:
    """Actor identity asserted by the upstream authentication gateway."""

    return UserService(session).resolve_actor(x_actor_id)


def get_user_service(session: Session = Depends(get_db_session)) -> UserService:
    return UserService(session)


def get_offer_service(session: Session = Depends(get_db_session)) -> OfferService:
    return OfferService(session)


def get_agreement_service(
    session: Session = Depends(get_db_session),
    ledger: LedgerClient = Depends(get_ledger),
) -> AgreementService:
    return AgreementService(session, ledger=ledger)


def get_agreement_finalizer(
    session: Session = Depends(get_db_session),
    content_store: ContentStoreClient = Depends(get_content_store),
    ledger: LedgerClient = Depends(get_ledger),
) -> AgreementFinalizer:
    return AgreementFinalizer(session, content_store=content_store, ledger=ledger)
