# tests/v1/test_tenants.py
"""Tests for tenant administration endpoints."""

from fastapi import status


def test_admin_creates_tenant_and_guest_can_log_in(client, admin_headers) -> None:
    response = client.post(
        "/api/v1/tenants",
        json={"label": "Terminal Norte", "pin": "4321"},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    tenant = response.json()
    assert tenant["label"] == "Terminal Norte"
    assert tenant["tenant_id"]

    login = client.post("/api/v1/auth/pin", json={"pin": "4321"})
    assert login.json()["session"]["tenant_id"] == tenant["tenant_id"]


def test_guest_cannot_manage_tenants(client, guest_headers) -> None:
    response = client.get("/api/v1/tenants", headers=guest_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.post(
        "/api/v1/tenants", json={"label": "X", "pin": "1"}, headers=guest_headers
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_duplicate_pin_conflicts(client, admin_headers, operator) -> None:
    response = client.post(
        "/api/v1/tenants",
        json={"label": "Copy", "pin": operator.pin},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_409_CONFLICT


def test_list_and_rotate_pin(client, admin_headers, operator) -> None:
    listing = client.get("/api/v1/tenants", headers=admin_headers)
    assert [row["label"] for row in listing.json()] == ["Terminal Principal"]

    response = client.patch(
        f"/api/v1/tenants/{operator.id}/pin",
        json={"pin": "19841984"},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["pin"] == "19841984"

    assert client.post("/api/v1/auth/pin", json={"pin": "1984"}).status_code == 401
    assert client.post("/api/v1/auth/pin", json={"pin": "19841984"}).status_code == 200


def test_rotate_unknown_tenant(client, admin_headers) -> None:
    response = client.patch(
        "/api/v1/tenants/missing/pin", json={"pin": "1"}, headers=admin_headers
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
