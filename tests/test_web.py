"""Tests for the browser-based paging dashboard.

The dashboard exposes one memory system over HTTP.  Tests use
``pytest.importorskip`` so they are skipped gracefully when Flask is
not installed.
"""

from __future__ import annotations

from typing import Any

import pytest

flask = pytest.importorskip("flask")

from py_mmu.config import MemoryConfig  # noqa: E402
from py_mmu.web.app import create_app  # noqa: E402

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
SEED = 7


def _create_client(config: MemoryConfig | None = None) -> Any:
    """Create a test client from a fresh app."""
    app = create_app(config, seed=SEED)
    app.config["TESTING"] = True
    return app.test_client()


class TestAppCreation:
    """Verify app factory and landing page."""

    def test_create_app_returns_flask(self) -> None:
        """create_app should return a Flask application."""
        assert isinstance(create_app(seed=SEED), flask.Flask)

    def test_index_returns_html(self) -> None:
        """GET / should render the page with the geometry summary."""
        response = _create_client().get("/")
        assert response.status_code == HTTP_OK
        assert "text/html" in response.content_type
        assert b"py-mmu" in response.data
        assert b"64 frames" in response.data


class TestTranslateEndpoint:
    """Verify POST /api/translate."""

    def test_first_translation_faults(self) -> None:
        """The first access should fault into frame 0."""
        client = _create_client()
        response = client.post("/api/translate", json={"address": 9})
        assert response.status_code == HTTP_OK
        data = response.get_json()
        assert data["hit"] is False
        assert data["page"] == 2
        assert data["frame"] == 0
        assert data["physical_address"] == 1

    def test_second_translation_hits(self) -> None:
        """A repeat access to the same page should hit."""
        client = _create_client()
        client.post("/api/translate", json={"address": 9})
        data = client.post("/api/translate", json={"address": 10}).get_json()
        assert data["hit"] is True

    def test_missing_address(self) -> None:
        """A body without an address should be rejected."""
        response = _create_client().post("/api/translate", json={})
        assert response.status_code == HTTP_BAD_REQUEST
        assert "error" in response.get_json()

    def test_non_integer_address(self) -> None:
        """A string address should be rejected."""
        response = _create_client().post("/api/translate", json={"address": "12"})
        assert response.status_code == HTTP_BAD_REQUEST

    def test_out_of_range_address(self) -> None:
        """An address outside the space should be rejected."""
        response = _create_client().post("/api/translate", json={"address": 1024})
        assert response.status_code == HTTP_BAD_REQUEST
        assert "outside address space" in response.get_json()["error"]


class TestSimulateAndInspect:
    """Verify batch traffic and state endpoints."""

    def test_simulate_counts(self) -> None:
        """Simulating N accesses should add N to the counters."""
        client = _create_client()
        count = 30
        data = client.post("/api/simulate", json={"count": count}).get_json()
        assert len(data["translations"]) == count
        assert data["stats"]["accesses"] == count

    def test_simulate_rejects_bad_count(self) -> None:
        """A negative count should be rejected."""
        response = _create_client().post("/api/simulate", json={"count": -5})
        assert response.status_code == HTTP_BAD_REQUEST

    def test_stats(self) -> None:
        """GET /api/stats should report faults and hits."""
        client = _create_client()
        client.post("/api/translate", json={"address": 0})
        client.post("/api/translate", json={"address": 1})
        data = client.get("/api/stats").get_json()
        assert data["faults"] == 1
        assert data["hits"] == 1
        assert data["hit_rate"] == 50.0

    def test_page_table(self) -> None:
        """GET /api/page-table should list resident pages and FIFO order."""
        client = _create_client(MemoryConfig(virtual_size=16, physical_size=8, page_size=4))
        for address in (0, 4, 8):
            client.post("/api/translate", json={"address": address})
        data = client.get("/api/page-table").get_json()
        assert data["entries"] == [{"page": 1, "frame": 1}, {"page": 2, "frame": 0}]
        assert data["fifo"] == [1, 0]

    def test_log(self) -> None:
        """GET /api/log should include the start-up entry."""
        data = _create_client().get("/api/log").get_json()
        assert data["entries"][0].startswith("[INFO] mmu: Memory system initialised")
