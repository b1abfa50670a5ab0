# src/xregister/adapters/__init__.py
"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Providers (rate APIs)
- Persistence (exchange store)
- HTTP (read API)
"""

__all__ = []
