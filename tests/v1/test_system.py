"""Tests for system endpoints."""

from fastapi import status
from fastapi.testclient import TestClient


def test_system_config(client: TestClient) -> None:
    """Test system configuration endpoint."""
    r = client.get("/api/v1/system/config")
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert "app" in data and "zones" in data and "reports" in data
    assert data["periods"] == [
        {"slug": "morning", "label": "Manhã"},
        {"slug": "afternoon", "label": "Tarde"},
    ]
    assert "CENTRO OESTE" in data["zones"]
    assert data["frequency_companies"] == ["INNOVATIVE", "NAVEGAM"]
    assert data["purge"]["challenge_ttl_seconds"] == 30


def test_system_config_hides_secrets(client: TestClient) -> None:
    body = client.get("/api/v1/system/config").text.lower()
    assert "secret" not in body
    assert "test-admin-key" not in body
    assert "sqlite" not in body
