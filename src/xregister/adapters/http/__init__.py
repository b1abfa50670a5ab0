# src/xregister/adapters/http/__init__.py
"""
HTTP Adapter - Read API

Flask application serving the current exchange rates.
"""

from xregister.adapters.http.server import create_app

__all__ = ["create_app"]
