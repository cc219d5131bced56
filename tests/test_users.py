"""Tests for wallet linking."""

from __future__ import annotations

from fastapi.testclient import TestClient

from conftest import OTHER_WALLET, TENANT_WALLET, Marketplace, as_actor

CHECKSUMMED = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


def link(client: TestClient, user_id: str, address: str):
    return client.patch("/api/v1/users/me/wallet", json={"wallet_address": address}, headers=as_actor(user_id))


def test_link_wallet_stores_lowercase_address(client: TestClient, marketplace: Marketplace) -> None:
    response = link(client, marketplace.other_tenant_id, CHECKSUMMED)

    assert response.status_code == 200
    assert response.json()["wallet_address"] == CHECKSUMMED.lower()

    me = client.get("/api/v1/users/me", headers=as_actor(marketplace.other_tenant_id)).json()
    assert me["wallet_address"] == CHECKSUMMED.lower()


def test_linked_wallet_cannot_change(client: TestClient, marketplace: Marketplace) -> None:
    response = link(client, marketplace.tenant_id, OTHER_WALLET)

    assert response.status_code == 403
    me = client.get("/api/v1/users/me", headers=as_actor(marketplace.tenant_id)).json()
    assert me["wallet_address"] == TENANT_WALLET


def test_wallet_taken_by_another_user_conflicts(client: TestClient, marketplace: Marketplace) -> None:
    response = link(client, marketplace.other_tenant_id, TENANT_WALLET.upper().replace("0X", "0x"))

    assert response.status_code == 409


def test_invalid_wallet_address_is_rejected(client: TestClient, marketplace: Marketplace) -> None:
    response = link(client, marketplace.other_tenant_id, "0x1234")

    assert response.status_code == 400


def test_me_requires_actor(client: TestClient) -> None:
    assert client.get("/api/v1/users/me").status_code == 401
