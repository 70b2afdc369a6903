"""
Configuration for WiFi Signal Plus.

Values are read from environment variables prefixed with ``SIGNALPLUS_``.
Invalid values fall back to the defaults below.
"""

from __future__ import annotations

import os
from typing import Optional


def _get_env(key: str, default: str) -> str:
    """Get environment variable with SIGNALPLUS_ prefix."""
    return os.environ.get(f'SIGNALPLUS_{key}', default)


def _get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer."""
    try:
        return int(_get_env(key, str(default)))
    except ValueError:
        return default


def _get_env_float(key: str, default: float) -> float:
    """Get environment variable as float."""
    try:
        return float(_get_env(key, str(default)))
    except ValueError:
        return default


def _get_env_bool(key: str, default: bool) -> bool:
    """Get environment variable as boolean."""
    val = _get_env(key, '').lower()
    if not val:
        return default
    return val in ('true', '1', 'yes', 'on')


def _get_env_optional(key: str) -> Optional[str]:
    """Get environment variable, treating empty values as unset."""
    val = _get_env(key, '').strip()
    return val or None


# Logging
LOG_LEVEL = _get_env('LOG_LEVEL', 'INFO').upper()
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

# Wireless interface (None = auto-detect via nmcli)
WIFI_INTERFACE = _get_env_optional('INTERFACE')

# Tool timeouts (seconds)
IW_TIMEOUT = _get_env_float('IW_TIMEOUT', 5.0)
NMCLI_TIMEOUT = _get_env_float('NMCLI_TIMEOUT', 10.0)

# Trigger an nmcli rescan before refreshing the generation cache
SCAN_ON_REQUEST = _get_env_bool('SCAN_ON_REQUEST', True)

# Bounded number of networks returned per request (0 = unlimited)
MAX_NETWORKS = _get_env_int('MAX_NETWORKS', 0)
