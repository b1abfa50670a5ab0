# src/xregister/adapters/http/server.py
"""
HTTP Server - Read API for Current Exchange Rates

Flask application exposing:
- GET /status     liveness check, always {"status": "ok"}
- GET /exchanges  current exchanges, optional ?source= and ?target= filters

Listing failures are logged with full detail and reported to the caller as a
generic 500 without internal error text.

Files that USE this module:
- xregister.app (serve command)
- tests.test_http (Flask test client)

Files that this module USES:
- xregister.application.use_cases (ListExchangesUseCase)
"""
from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from xregister.application.use_cases import ListExchangesRequest, ListExchangesUseCase

logger = logging.getLogger(__name__)


def create_app(list_use_case: ListExchangesUseCase) -> Flask:
    """Build the Flask app around a list use case."""
    app = Flask("xregister")

    @app.get("/status")
    def status():
        return jsonify({"status": "ok"}), 200

    @app.get("/exchanges")
    def list_exchanges():
        # Codes are stored upper-case; normalize so ?source=usd matches USD
        req = ListExchangesRequest(
            source_currency=request.args.get("source", "").strip().upper(),
            target_currency=request.args.get("target", "").strip().upper(),
        )
        try:
            views = list_use_case.execute(req)
        except Exception:
            logger.exception(
                "Failed to list exchanges (source=%r, target=%r)",
                req.source_currency, req.target_currency,
            )
            return jsonify({"error": "failed to list exchanges"}), 500
        return jsonify([view.to_dict() for view in views]), 200

    return app
