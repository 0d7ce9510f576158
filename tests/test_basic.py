"""
Basic application tests.

Validates that the FastAPI app starts correctly and the
health endpoint responds as expected.
"""

import sys

import pytest
from fastapi.testclient import TestClient

from gatekeeper import __main__ as server
from gatekeeper.main import app

client = TestClient(app)


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    def test_health_returns_200(self) -> None:
        """Health endpoint must return HTTP 200 with status ok."""
        response = client.get("/api/v1/health")
        assert response.status_code == 200

    def test_health_response_body(self) -> None:
        """Health endpoint must return status and version fields."""
        response = client.get("/api/v1/health")
        body = response.json()
        assert body["status"] == "ok"
        assert "version" in body

    def test_health_carries_rate_limit_headers(self) -> None:
        """Every admitted request reports its remaining quota."""
        response = client.get("/api/v1/health")
        assert "RateLimit-Limit" in response.headers
        assert "RateLimit-Remaining" in response.headers
        assert "RateLimit-Reset" in response.headers


class TestServerEntryPoint:
    """Tests for ``python -m gatekeeper``."""

    def test_runs_app_under_uvicorn(self, monkeypatch) -> None:
        calls: list[tuple] = []
        monkeypatch.setattr(
            server.uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs))
        )
        monkeypatch.setattr(sys, "argv", ["gatekeeper", "--port", "8123"])

        server.main()

        assert calls == [
            (
                ("gatekeeper.main:app",),
                {"host": server.settings.host, "port": 8123, "workers": 1},
            )
        ]

    def test_refuses_workers_without_shared_storage(self, monkeypatch) -> None:
        monkeypatch.setattr(server.settings, "rate_limit_storage_uri", None)
        monkeypatch.setattr(server.uvicorn, "run", lambda *args, **kwargs: None)
        monkeypatch.setattr(sys, "argv", ["gatekeeper", "--workers", "2"])

        with pytest.raises(SystemExit) as excinfo:
            server.main()
        assert excinfo.value.code == 2
