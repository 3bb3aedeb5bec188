from __future__ import annotations

from fastapi.testclient import TestClient

from thinking_server.http_app import _compute_tools_hash, create_app


def test_health() -> None:
    client = TestClient(create_app())
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True, "status": "healthy"}


def test_metrics_endpoint_is_prometheus_text() -> None:
    client = TestClient(create_app())
    response = client.get("/metrics")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "thinking_server_healthy 1" in response.text


def test_discovery_lists_tools(monkeypatch) -> None:
    monkeypatch.delenv("PINNED_TOOLS_HASH", raising=False)
    client = TestClient(create_app())
    data = client.get("/mcp/discovery").json()
    names = [tool["name"] for tool in data["tools"]]
    assert "sequentialthinking" in names
    assert data["tool_count"] == len(names)
    assert data["tools_hash"] == _compute_tools_hash(names)
    assert "hash_mismatch" not in data


def test_discovery_reports_pinned_hash_mismatch(monkeypatch) -> None:
    monkeypatch.setenv("PINNED_TOOLS_HASH", "0" * 64)
    client = TestClient(create_app())
    data = client.get("/mcp/discovery").json()
    assert data["pinned_hash"] == "0" * 64
    assert data["hash_mismatch"] is True


def test_tools_hash_ignores_order() -> None:
    assert _compute_tools_hash(["b", "a"]) == _compute_tools_hash(["a", "b"])
