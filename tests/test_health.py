"""
tests/test_health.py -- Integration tests for GET /health.

Covers:
  - 200 response with status, version, and components fields
  - components.database reports 'ok' against the test database
  - No authentication required
  - Unmatched routes and methods get the standard error envelope
"""

from __future__ import annotations


def test_health_returns_200_with_components(api_client):
    """Health endpoint returns 200 with status, version, and components."""
    client, _token, _ = api_client
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert "version" in data
    assert data["components"]["app"] == "ok"
    assert data["components"]["database"] == "ok"


def test_health_no_auth_required(api_client):
    """Health endpoint is accessible without any authentication headers."""
    client, _, _ = api_client
    resp = client.get("/health", headers={})
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_unknown_route_uses_error_envelope(api_client):
    """Router-level 404s are rendered with the same error envelope as handlers."""
    client, _, _ = api_client
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.json() == {"error": {"code": "http_404", "message": "Not Found"}}


def test_wrong_method_uses_error_envelope(api_client):
    client, _, _ = api_client
    resp = client.patch("/health")
    assert resp.status_code == 405
    assert resp.json()["error"]["code"] == "http_405"
