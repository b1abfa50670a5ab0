# src/xregister/shared/__init__.py
"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation
- Logging configuration
"""

from xregister.shared.validators import (
    parse_currency_list,
    parse_duration,
    validate_api_key,
    validate_currency_code,
    validate_database_url,
    validate_rate,
)
from xregister.shared.logging_conf import setup_logging

__all__ = [
    "parse_currency_list",
    "parse_duration",
    "validate_api_key",
    "validate_currency_code",
    "validate_database_url",
    "validate_rate",
    "setup_logging",
]
