# src/xregister/shared/validators.py
"""
Input Validation Utilities - Configuration and Data Validation

This module provides validation and parsing helpers for configuration values
and fetched rates: currency codes, delimited currency lists, Go-style
durations, database URLs and rate values.

Files that USE this module:
- xregister.config.settings (Settings field validators)
- xregister.adapters.providers.* (rate sanity checks)
- xregister.app (CLI argument checks)

Files that this module USES:
- None (pure utility functions)
"""
import math
import re
from datetime import timedelta
from typing import Union

_CURRENCY_CODE = re.compile(r'^[A-Z]{2,10}$')
_DURATION_PART = re.compile(r'(\d+(?:\.\d+)?)(h|ms|m|s)')
_DURATION_UNITS = {"h": 3600.0, "m": 60.0, "s": 1.0, "ms": 0.001}


def validate_currency_code(code: str) -> bool:
    """
    Validate a currency code shape (not its real-world existence).
    
    Args:
        code: Currency code to validate, e.g. "USD"
        
    Returns:
        True if the code is a short uppercase identifier, False otherwise
    """
    if not code:
        return False
    return bool(_CURRENCY_CODE.match(code))


def parse_currency_list(raw: str, separator: str = ";") -> list[str]:
    """
    Split a delimited currency list, keeping order and duplicates.
    
    Args:
        raw: Delimited string, e.g. "USD;EUR;GBP"
        separator: Delimiter between codes
        
    Returns:
        List of stripped, upper-cased codes
        
    Raises:
        ValueError: If the list is empty or contains an invalid code
    """
    if raw is None or not raw.strip():
        raise ValueError("currency list is empty")

    codes = [part.strip().upper() for part in raw.split(separator)]
    for code in codes:
        if not validate_currency_code(code):
            raise ValueError(f"invalid currency code {code!r} in {raw!r}")
    return codes


def parse_duration(value: Union[str, int, float, timedelta]) -> timedelta:
    """
    Parse a sync interval.
    
    Accepts Go-style durations ("45s", "30m", "1h30m", "500ms"), plain
    seconds ("90", 90) or a timedelta.
    
    Raises:
        ValueError: If the value cannot be parsed or is not positive
    """
    if isinstance(value, timedelta):
        seconds = value.total_seconds()
    elif isinstance(value, (int, float)):
        seconds = float(value)
    else:
        text = str(value).strip().lower()
        if not text:
            raise ValueError("duration is empty")
        try:
            seconds = float(text)
        except ValueError:
            pos = 0
            seconds = 0.0
            for match in _DURATION_PART.finditer(text):
                if match.start() != pos:
                    raise ValueError(f"invalid duration {value!r}")
                seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
                pos = match.end()
            if pos != len(text):
                raise ValueError(f"invalid duration {value!r}")

    if seconds <= 0:
        raise ValueError(f"duration must be positive, got {value!r}")
    return timedelta(seconds=seconds)


def validate_database_url(url: str) -> bool:
    """
    Validate that a database URL uses a supported scheme.
    
    Supported: sqlite:///path, sqlite:///:memory:, postgresql://...
    """
    if not url:
        return False
    return url.startswith("sqlite:///") or url.startswith(("postgresql://", "postgres://"))


def validate_api_key(api_key: str, min_length: int = 10) -> bool:
    """
    Validate API key format.
    
    Args:
        api_key: API key to validate
        min_length: Minimum length requirement
        
    Returns:
        True if valid, False otherwise
    """
    if not api_key:
        return False
    
    return len(api_key) >= min_length and not api_key.isspace()


def validate_rate(rate: float) -> bool:
    """Return True if the rate is a finite, non-negative number."""
    try:
        value = float(rate)
    except (TypeError, ValueError):
        return False
    return math.isfinite(value) and value >= 0
