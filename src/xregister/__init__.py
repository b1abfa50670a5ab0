# src/xregister/__init__.py
"""
XRegister - Currency Exchange Rate Register

Periodically syncs exchange rates for configured currency pairs from an
external provider, keeps the current rate plus a full history trail per
pair, and serves the current rates over a small HTTP API.
"""

__version__ = "1.0.0"
