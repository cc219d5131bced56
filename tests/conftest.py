import os
import sys
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("RNS_ENVIRONMENT", "test")
os.environ.setdefault("RNS_DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("RNS_LOG_JSON", "false")
os.environ.setdefault("RNS_PINATA_JWT", "")
os.environ.setdefault("RNS_LEDGER_RPC_URL", "")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from app.core.config import get_settings

get_settings.cache_clear()

from app.api.dependencies import get_content_store, get_ledger  # noqa: E402
from app.core.database import engine, session_scope  # noqa: E402
from app.main import create_app  # noqa: E402
from app.models import Base, Offer, OfferStatus, Property, User, UserRole  # noqa: E402
from app.services.errors import StoreUnavailableError  # noqa: E402
from app.services.ledger import LedgerReceipt  # noqa: E402

TENANT_WALLET = "0x" + "ab" * 20
OTHER_WALLET = "0x" + "cd" * 20


class FakeContentStore:
    """Records pinned documents instead of calling Pinata."""

    def __init__(self) -> None:
        self.pinned: List[Dict[str, Any]] = []
        self.fail = False

    def pin_document(self, document, name="metadata"):  # noqa: ANN001
        if self.fail:
            raise StoreUnavailableError("Pinata pin_document failed: 500")
        self.pinned.append({"name": name, "document": document})
        return f"QmTestCid{len(self.pinned)}"


class FakeLedger:
    """Confirms every submission with an incrementing agreement id."""

    def __init__(self) -> None:
        self.submissions: List[Dict[str, Any]] = []
        self.records: Dict[int, str] = {}
        self.emit_event = True
        self.error: Optional[Exception] = None

    def submit(self, **kwargs: Any) -> LedgerReceipt:
        if self.error is not None:
            raise self.error
        self.submissions.append(kwargs)
        tx_hash = "0x" + f"{len(self.submissions):064x}"
        if not self.emit_event:
            return LedgerReceipt(on_chain_id=None, tx_hash=tx_hash, block_number=1)
        on_chain_id = len(self.submissions)
        self.records[on_chain_id] = kwargs["content_id"]
        return LedgerReceipt(on_chain_id=on_chain_id, tx_hash=tx_hash, block_number=1)

    def verify(self, on_chain_id: int, content_id: str) -> bool:
        return self.records.get(on_chain_id) == content_id


@dataclass
class Marketplace:
    owner_id: str
    tenant_id: str
    other_tenant_id: str
    stranger_owner_id: str
    admin_id: str
    property_id: str


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def content_store() -> FakeContentStore:
    return FakeContentStore()


@pytest.fixture()
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture()
def client(content_store, ledger) -> TestClient:  # noqa: ANN001
    app = create_app()
    app.dependency_overrides[get_content_store] = lambda: content_store
    app.dependency_overrides[get_ledger] = lambda: ledger
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def marketplace() -> Marketplace:
    """One owner with one available property, two tenants (one with a wallet), a second owner and an admin."""

    with session_scope() as session:
        owner = User(name="Olivia Owner", email="owner@example.com", role=UserRole.OWNER)
        tenant = User(
            name="Tariq Tenant",
            email="tenant@example.com",
            role=UserRole.TENANT,
            wallet_address=TENANT_WALLET,
        )
        other_tenant = User(name="Uma Tenant", email="uma@example.com", role=UserRole.TENANT)
        stranger = User(name="Sam Owner", email="sam@example.com", role=UserRole.OWNER)
        admin = User(name="Ada Admin", email="admin@example.com", role=UserRole.ADMIN)
        session.add_all([owner, tenant, other_tenant, stranger, admin])
        session.flush()

        listing = Property(
            owner_id=owner.id,
            title="P1",
            location="Lisbon",
            description="Two bedroom flat",
            monthly_rent=Decimal("15000"),
        )
        session.add(listing)
        session.flush()

        return Marketplace(
            owner_id=str(owner.id),
            tenant_id=str(tenant.id),
            other_tenant_id=str(other_tenant.id),
            stranger_owner_id=str(stranger.id),
            admin_id=str(admin.id),
            property_id=str(listing.id),
        )


def as_actor(user_id: str) -> Dict[str, str]:
    return {"X-Actor-Id": user_id}


def seed_accepted_offer(market: Marketplace, rent: str = "15000") -> str:
    """Insert an already-accepted offer for the wallet-holding tenant and return its id."""

    with session_scope() as session:
        offer = Offer(
            property_id=market.property_id,
            tenant_id=market.tenant_id,
            rent_amount=Decimal(rent),
            status=OfferStatus.ACCEPTED,
        )
        session.add(offer)
        session.flush()
        return str(offer.id)
