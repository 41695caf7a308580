"""Contract tests for the card API endpoints and service health."""

import pytest

pytestmark = pytest.mark.contract


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_create_list_delete(client, auth_headers):
    created = client.post(
        "/api/cards",
        json={
            "name": "Gold",
            "bank": "Banco X",
            "card_type": "credit",
            "credit_limit": "2500",
            "closing_day": 3,
            "due_day": 10,
        },
        headers=auth_headers,
    )
    assert created.status_code == 201
    card = created.json()
    assert card["credit_limit"] == "2500.00"
    assert card["due_day"] == 10

    assert [c["id"] for c in client.get("/api/cards", headers=auth_headers).json()] == [card["id"]]

    deleted = client.delete(f"/api/cards/{card['id']}", headers=auth_headers)
    assert deleted.json() == {"message": "Card deleted"}
    assert client.get("/api/cards", headers=auth_headers).json() == []


def test_invalid_day(client, auth_headers):
    response = client.post(
        "/api/cards",
        json={"name": "Gold", "bank": "Banco X", "closing_day": 40},
        headers=auth_headers,
    )
    assert response.status_code == 422


def test_debt_keeps_existing_after_card_delete(client, auth_headers):
    card = client.post(
        "/api/cards", json={"name": "Gold", "bank": "Banco X"}, headers=auth_headers
    ).json()
    debt = client.post(
        "/api/debts",
        json={"name": "Sofa", "amount": "900", "card_id": card["id"]},
        headers=auth_headers,
    ).json()["debt"]
    assert debt["card"] == {"id": card["id"], "name": "Gold", "bank": "Banco X"}

    client.delete(f"/api/cards/{card['id']}", headers=auth_headers)

    debts = client.get("/api/debts", headers=auth_headers).json()
    assert debts[0]["id"] == debt["id"]
    assert debts[0]["card"] is None


def test_foreign_card_not_found(client, auth_headers, other_owner):
    other_headers = {"X-User-Id": str(other_owner.id)}
    card = client.post(
        "/api/cards", json={"name": "Black", "bank": "Banco Y"}, headers=other_headers
    ).json()
    response = client.delete(f"/api/cards/{card['id']}", headers=auth_headers)
    assert response.status_code == 404


def test_card_types(client, auth_headers):
    response = client.get("/api/cards/types", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert {"value": "credit_debit", "label": "Credit and debit"} in body["types"]
    assert body["banks"][-1] == "Other"


def test_card_types_require_user(client):
    assert client.get("/api/cards/types").status_code == 401


def test_update_card(client, auth_headers):
    card = client.post(
        "/api/cards", json={"name": "Gold", "bank": "Banco X", "due_day": 10}, headers=auth_headers
    ).json()

    response = client.put(
        f"/api/cards/{card['id']}",
        json={"card_type": "debit", "credit_limit": "800"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    updated = response.json()
    assert updated["card_type"] == "debit"
    assert updated["credit_limit"] == "800.00"
    assert updated["name"] == "Gold"
    assert updated["due_day"] == 10


def test_update_foreign_card_not_found(client, auth_headers, other_owner):
    other_headers = {"X-User-Id": str(other_owner.id)}
    card = client.post(
        "/api/cards", json={"name": "Black", "bank": "Banco Y"}, headers=other_headers
    ).json()

    response = client.put(f"/api/cards/{card['id']}", json={"name": "Stolen"}, headers=auth_headers)

    assert response.status_code == 404
    assert client.get("/api/cards", headers=other_headers).json()[0]["name"] == "Black"


def test_update_card_invalid_day(client, auth_headers):
    card = client.post(
        "/api/cards", json={"name": "Gold", "bank": "Banco X"}, headers=auth_headers
    ).json()
    response = client.put(f"/api/cards/{card['id']}", json={"closing_day": 0}, headers=auth_headers)
    assert response.status_code == 422
