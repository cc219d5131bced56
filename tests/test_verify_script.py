"""Tests for the agreement verification CLI."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from app.core.database import session_scope
from app.models import Agreement, AgreementStatus
from conftest import FakeLedger, Marketplace, seed_accepted_offer
from scripts import verify_agreements


def store_agreement(market: Marketplace, on_chain_id: int, content_id: str) -> None:
    offer_id = seed_accepted_offer(market)
    with session_scope() as session:
        session.add(
            Agreement(
                offer_id=offer_id,
                property_id=market.property_id,
                owner_id=market.owner_id,
                tenant_id=market.tenant_id,
                monthly_rent=Decimal("15000"),
                start_date=date(2025, 6, 1),
                end_date=date(2025, 12, 1),
                content_id=content_id,
                on_chain_id=on_chain_id,
                tx_hash="0x" + f"{on_chain_id + 100:064x}",
                status=AgreementStatus.ACTIVE,
            )
        )


@pytest.fixture()
def script_ledger(monkeypatch: pytest.MonkeyPatch, ledger: FakeLedger) -> FakeLedger:
    monkeypatch.setattr(verify_agreements, "get_ledger_client", lambda: ledger)
    return ledger


def test_matching_agreements_exit_zero(marketplace: Marketplace, script_ledger: FakeLedger) -> None:
    store_agreement(marketplace, 5, "QmGood")
    script_ledger.records[5] = "QmGood"

    assert verify_agreements.main([]) == 0


def test_mismatch_exits_one(marketplace: Marketplace, script_ledger: FakeLedger) -> None:
    store_agreement(marketplace, 5, "QmGood")
    script_ledger.records[5] = "QmTampered"

    assert verify_agreements.main(["--verbose"]) == 1


def test_sentinel_agreements_are_skipped(marketplace: Marketplace, script_ledger: FakeLedger) -> None:
    store_agreement(marketplace, 0, "QmUnknown")

    assert verify_agreements.main([]) == 0


def test_property_filter_limits_checked_agreements(marketplace: Marketplace, script_ledger: FakeLedger) -> None:
    store_agreement(marketplace, 5, "QmGood")
    script_ledger.records[5] = "QmTampered"

    assert verify_agreements.main(["--property-id", str(uuid4())]) == 0
    assert verify_agreements.main(["--property-id", marketplace.property_id]) == 1


def test_malformed_property_id_is_a_usage_error(script_ledger: FakeLedger) -> None:
    with pytest.raises(SystemExit) as excinfo:
        verify_agreements.main(["--property-id", "not-a-uuid"])
    assert excinfo.value.code == 2
