"""Flask application factory for the paging dashboard.

The ``create_app`` function builds a memory system and returns a Flask
app whose endpoints translate addresses and report paging state as
JSON.  All requests share the one memory system; its internal lock
keeps concurrent translations consistent.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Any

from flask import Flask, Response, jsonify, render_template, request

from py_mmu.driver import build_system, simulate_accesses
from py_mmu.logging import Logger
from py_mmu.memory.errors import AddressOutOfRangeError

if TYPE_CHECKING:
    from py_mmu.config import MemoryConfig
    from py_mmu.memory.mmu import MemoryStats, Translation

_HTTP_BAD_REQUEST = 400
_LOG_CAPACITY = 1000
_MAX_SIMULATE = 10_000


def _translation_json(t: Translation) -> dict[str, Any]:
    return {
        "virtual_address": t.virtual_address,
        "page": t.page_number,
        "offset": t.offset,
        "frame": t.frame_number,
        "physical_address": t.physical_address,
        "hit": t.hit,
        "evicted_page": t.evicted_page,
    }


def _stats_json(stats: MemoryStats) -> dict[str, Any]:
    return {
        "faults": stats.faults,
        "hits": stats.hits,
        "evictions": stats.evictions,
        "accesses": stats.accesses,
        "hit_rate": round(stats.hit_rate, 2),
    }


def _int_field(data: Any, name: str) -> int | None:
    """Return an integer field from a JSON body, or None if absent/invalid."""
    if not isinstance(data, dict) or name not in data:
        return None
    value = data[name]
    if not isinstance(value, int) or isinstance(value, bool):
        return None
    return value


def create_app(config: MemoryConfig | None = None, *, seed: int | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Memory geometry for the simulated system.
        seed: Seed for the backing-store content and random traffic.

    Returns:
        A configured Flask application ready to serve.

    """
    logger = Logger(capacity=_LOG_CAPACITY)
    system = build_system(config, seed=seed, logger=logger)
    traffic = random.Random(seed)

    app = Flask(__name__)

    @app.route("/")
    def index() -> str:  # pyright: ignore[reportUnusedFunction]
        """Render the dashboard page."""
        return render_template("index.html", geometry=system.config.describe())

    @app.route("/api/translate", methods=["POST"])
    def translate() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Translate one virtual address.

        Expects JSON body: ``{"address": <int>}``

        """
        address = _int_field(request.get_json(silent=True), "address")
        if address is None:
            return jsonify({"error": "Missing or non-integer 'address' field"}), _HTTP_BAD_REQUEST
        try:
            translation = system.access(address)
        except AddressOutOfRangeError as e:
            return jsonify({"error": str(e)}), _HTTP_BAD_REQUEST
        return jsonify(_translation_json(translation))

    @app.route("/api/simulate", methods=["POST"])
    def simulate() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Translate a batch of random addresses.

        Expects JSON body: ``{"count": <int>}``

        """
        count = _int_field(request.get_json(silent=True), "count")
        if count is None or not 0 <= count <= _MAX_SIMULATE:
            msg = f"'count' must be an integer in 0..{_MAX_SIMULATE}"
            return jsonify({"error": msg}), _HTTP_BAD_REQUEST
        translations = simulate_accesses(system, count, seed=traffic.getrandbits(32))
        return jsonify(
            {
                "translations": [_translation_json(t) for t in translations],
                "stats": _stats_json(system.stats()),
            }
        )

    @app.route("/api/stats")
    def stats() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return fault and hit counters."""
        return jsonify(_stats_json(system.stats()))

    @app.route("/api/page-table")
    def page_table() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the resident pages and the FIFO order."""
        entries = [
            {"page": e.page_number, "frame": e.frame_number} for e in system.resident_entries()
        ]
        return jsonify({"entries": entries, "fifo": system.fifo_order()})

    @app.route("/api/log")
    def log() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the MMU event log, oldest first."""
        return jsonify({"entries": [str(e) for e in logger.entries]})

    return app


def main() -> None:
    """Run the dashboard development server.

    This is the ``py-mmu-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
