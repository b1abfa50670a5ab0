# src/xregister/config/__init__.py
"""
Configuration Module

Provides configuration management using Pydantic Settings.
Settings are loaded explicitly at startup and passed to components.
"""

from xregister.config.settings import (
    PROVIDER_FREECURRENCYAPI,
    PROVIDER_HTTP,
    Settings,
    load_settings,
)

__all__ = ["Settings", "load_settings", "PROVIDER_FREECURRENCYAPI", "PROVIDER_HTTP"]
