"""Flask application factory for the py-smaps web API.

The ``create_app`` function returns a Flask app with two endpoints:

- ``GET /api/smaps/<pid>``: parse a live process's report.
- ``POST /api/parse``: parse report text supplied by the client.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from flask import Flask, Response, jsonify, request

from py_smaps.config import ReaderConfig, load_config
from py_smaps.logging import Logger, LogLevel
from py_smaps.maps.reader import from_pid, from_str
from py_smaps.maps.smap import SMap
from py_smaps.maps.summary import rollup

if TYPE_CHECKING:
    from pathlib import Path

_HTTP_BAD_REQUEST = 400
_HTTP_NOT_FOUND = 404
_HTTP_UNPROCESSABLE = 422


def _report_json(smaps: list[SMap]) -> dict[str, object]:
    return {
        "mappings": [entry.to_dict() for entry in smaps],
        "rollup": rollup(smaps).to_dict(),
    }


def _diagnostics(logger: Logger) -> list[str]:
    return [str(entry) for entry in logger.filter(min_level=LogLevel.WARNING)]


def create_app(config: ReaderConfig | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Where to find per-process reports; defaults to ``/proc``.

    Returns:
        A configured Flask application ready to serve.

    """
    reader_config = config if config is not None else ReaderConfig()

    app = Flask(__name__)

    @app.route("/api/smaps/<int:pid>")
    def smaps_for_pid(pid: int) -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Return the parsed report of process *pid* as JSON."""
        logger = Logger()
        smaps = from_pid(pid, config=reader_config, logger=logger)
        if smaps is None:
            return jsonify(
                {
                    "error": f"No readable smaps report for pid {pid}",
                    "diagnostics": _diagnostics(logger),
                }
            ), _HTTP_NOT_FOUND
        return jsonify({"pid": pid, **_report_json(smaps)})

    @app.route("/api/parse", methods=["POST"])
    def parse() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Parse report text and return JSON.

        Expects JSON body: ``{"text": "..."}``

        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not isinstance(data.get("text"), str):
            return jsonify({"error": "Missing 'text' field"}), _HTTP_BAD_REQUEST

        logger = Logger()
        smaps = from_str(data["text"], logger=logger)
        if smaps is None:
            return jsonify(
                {"error": "Malformed smaps report", "diagnostics": _diagnostics(logger)}
            ), _HTTP_UNPROCESSABLE
        return jsonify(_report_json(smaps))

    return app


def main(config_path: Path | None = None) -> None:
    """Run the web API development server.

    This is the ``py-smaps-web`` console entry point.

    Args:
        config_path: Optional JSON reader config (see ``load_config``);
            the live ``/proc`` tree is used when omitted.

    """
    config = load_config(config_path) if config_path is not None else None
    app = create_app(config)
    app.run(debug=True, port=8080)
