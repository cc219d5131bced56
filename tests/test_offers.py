"""Tests for the offer lifecycle endpoints."""

from __future__ import annotations

from decimal import Decimal

from fastapi.testclient import TestClient

from conftest import Marketplace, as_actor


def place_offer(client: TestClient, market: Marketplace, tenant_id: str, rent: float | str = 15000) -> dict:
    response = client.post(
        "/api/v1/offers",
        json={"property_id": market.property_id, "rent_amount": rent, "message": "Happy to sign for a year"},
        headers=as_actor(tenant_id),
    )
    assert response.status_code == 201, response.text
    return response.json()


def decide(client: TestClient, offer_id: str, action: str, actor_id: str):
    return client.patch(f"/api/v1/offers/{offer_id}", json={"action": action}, headers=as_actor(actor_id))


def test_place_offer_is_pending(client: TestClient, marketplace: Marketplace) -> None:
    offer = place_offer(client, marketplace, marketplace.tenant_id)

    assert offer["status"] == "pending"
    assert offer["property_id"] == marketplace.property_id
    assert offer["tenant_id"] == marketplace.tenant_id


def test_place_offer_requires_tenant_role(client: TestClient, marketplace: Marketplace) -> None:
    response = client.post(
        "/api/v1/offers",
        json={"property_id": marketplace.property_id, "rent_amount": 100},
        headers=as_actor(marketplace.owner_id),
    )
    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"


def test_place_offer_requires_actor(client: TestClient, marketplace: Marketplace) -> None:
    response = client.post("/api/v1/offers", json={"property_id": marketplace.property_id, "rent_amount": 100})
    assert response.status_code == 401


def test_place_offer_rejects_non_positive_rent(client: TestClient, marketplace: Marketplace) -> None:
    response = client.post(
        "/api/v1/offers",
        json={"property_id": marketplace.property_id, "rent_amount": 0},
        headers=as_actor(marketplace.tenant_id),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


def test_second_pending_offer_from_same_tenant_conflicts(client: TestClient, marketplace: Marketplace) -> None:
    place_offer(client, marketplace, marketplace.tenant_id)

    response = client.post(
        "/api/v1/offers",
        json={"property_id": marketplace.property_id, "rent_amount": 16000},
        headers=as_actor(marketplace.tenant_id),
    )
    assert response.status_code == 409
    assert response.json()["error"] == "conflict"


def test_accept_rejects_sibling_offers(client: TestClient, marketplace: Marketplace) -> None:
    first = place_offer(client, marketplace, marketplace.tenant_id)
    second = place_offer(client, marketplace, marketplace.other_tenant_id, rent=14000)

    response = decide(client, first["id"], "accept", marketplace.owner_id)
    assert response.status_code == 200
    assert response.json()["status"] == "accepted"

    offers = client.get(
        "/api/v1/offers",
        params={"propertyId": marketplace.property_id},
        headers=as_actor(marketplace.owner_id),
    ).json()
    statuses = {offer["id"]: offer["status"] for offer in offers}
    assert statuses == {first["id"]: "accepted", second["id"]: "rejected"}


def test_only_owner_can_accept(client: TestClient, marketplace: Marketplace) -> None:
    offer = place_offer(client, marketplace, marketplace.tenant_id)

    response = decide(client, offer["id"], "accept", marketplace.stranger_owner_id)
    assert response.status_code == 403

    response = decide(client, offer["id"], "accept", marketplace.tenant_id)
    assert response.status_code == 403


def test_tenant_withdraws_own_offer(client: TestClient, marketplace: Marketplace) -> None:
    offer = place_offer(client, marketplace, marketplace.tenant_id)

    response = decide(client, offer["id"], "withdraw", marketplace.other_tenant_id)
    assert response.status_code == 403

    response = decide(client, offer["id"], "withdraw", marketplace.tenant_id)
    assert response.status_code == 200
    assert response.json()["status"] == "withdrawn"

    # A withdrawn offer no longer blocks a new one.
    place_offer(client, marketplace, marketplace.tenant_id, rent=15500)


def test_decided_offer_cannot_transition_again(client: TestClient, marketplace: Marketplace) -> None:
    offer = place_offer(client, marketplace, marketplace.tenant_id)
    assert decide(client, offer["id"], "reject", marketplace.owner_id).status_code == 200

    response = decide(client, offer["id"], "accept", marketplace.owner_id)
    assert response.status_code == 409
    assert response.json()["error"] == "invalid_state"


def test_unknown_action_is_rejected(client: TestClient, marketplace: Marketplace) -> None:
    offer = place_offer(client, marketplace, marketplace.tenant_id)

    response = decide(client, offer["id"], "counter", marketplace.owner_id)
    assert response.status_code == 400


def test_offer_on_missing_property(client: TestClient, marketplace: Marketplace) -> None:
    response = client.post(
        "/api/v1/offers",
        json={"property_id": "00000000-0000-0000-0000-000000000000", "rent_amount": 100},
        headers=as_actor(marketplace.tenant_id),
    )
    assert response.status_code == 404


def test_tenant_lists_only_own_offers(client: TestClient, marketplace: Marketplace) -> None:
    mine = place_offer(client, marketplace, marketplace.tenant_id)
    place_offer(client, marketplace, marketplace.other_tenant_id, rent=14000)

    response = client.get("/api/v1/offers", headers=as_actor(marketplace.tenant_id))
    assert response.status_code == 200
    assert [offer["id"] for offer in response.json()] == [mine["id"]]


def test_owner_cannot_list_offers_for_foreign_property(client: TestClient, marketplace: Marketplace) -> None:
    response = client.get(
        "/api/v1/offers",
        params={"propertyId": marketplace.property_id},
        headers=as_actor(marketplace.stranger_owner_id),
    )
    assert response.status_code == 403


def test_rent_with_sub_cent_precision_is_rejected(client: TestClient, marketplace: Marketplace) -> None:
    for rent in ("0.001", "1500.005"):
        response = client.post(
            "/api/v1/offers",
            json={"property_id": marketplace.property_id, "rent_amount": rent},
            headers=as_actor(marketplace.tenant_id),
        )
        assert response.status_code == 400, rent
        assert response.json()["error"] == "validation_error"

    response = client.get("/api/v1/offers", headers=as_actor(marketplace.tenant_id))
    assert response.json() == []


def test_rent_beyond_column_range_is_rejected(client: TestClient, marketplace: Marketplace) -> None:
    response = client.post(
        "/api/v1/offers",
        json={"property_id": marketplace.property_id, "rent_amount": "1000000000000"},
        headers=as_actor(marketplace.tenant_id),
    )
    assert response.status_code == 400


def test_two_decimal_rent_is_stored_exactly(client: TestClient, marketplace: Marketplace) -> None:
    placed = place_offer(client, marketplace, marketplace.tenant_id, rent="1250.50")

    stored = client.get("/api/v1/offers", headers=as_actor(marketplace.tenant_id)).json()
    assert stored[0]["id"] == placed["id"]
    assert Decimal(stored[0]["rent_amount"]) == Decimal("1250.50")
