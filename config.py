"""Configuration settings for the wifiwatch attack monitor."""

from __future__ import annotations

import logging
import os
import sys

# Application version
VERSION = "1.0.0"


def _get_env(key: str, default: str) -> str:
    """Get environment variable with default."""
    return os.environ.get(f'WIFIWATCH_{key}', default)


def _get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer with default."""
    try:
        return int(os.environ.get(f'WIFIWATCH_{key}', str(default)))
    except ValueError:
        return default


def _get_env_float(key: str, default: float) -> float:
    """Get environment variable as float with default."""
    try:
        return float(os.environ.get(f'WIFIWATCH_{key}', str(default)))
    except ValueError:
        return default


def _get_env_bool(key: str, default: bool) -> bool:
    """Get environment variable as boolean with default."""
    val = os.environ.get(f'WIFIWATCH_{key}', '').lower()
    if val in ('true', '1', 'yes', 'on'):
        return True
    if val in ('false', '0', 'no', 'off'):
        return False
    return default


# Logging configuration
_log_level_str = _get_env('LOG_LEVEL', 'WARNING').upper()
LOG_LEVEL = getattr(logging, _log_level_str, logging.WARNING)
LOG_FORMAT = _get_env('LOG_FORMAT', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')

# Server settings
HOST = _get_env('HOST', '0.0.0.0')
PORT = _get_env_int('PORT', 5060)
DEBUG = _get_env_bool('DEBUG', False)

# Snapshot cadence of the scanning host (advisory; the engine never depends on it)
SCAN_INTERVAL = _get_env_float('SCAN_INTERVAL', 5.0)

# Attack events younger than this many seconds report as active
ATTACK_ACTIVE_WINDOW = _get_env_float('ATTACK_ACTIVE_WINDOW', 60.0)

# Suppress repeat (channel, category) events within this many seconds (0 = off)
ATTACK_DEDUP_WINDOW = _get_env_float('ATTACK_DEDUP_WINDOW', 0.0)


def configure_logging() -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=LOG_LEVEL,
        format=LOG_FORMAT,
        stream=sys.stderr
    )
    # Suppress Flask development server warning
    logging.getLogger('werkzeug').setLevel(LOG_LEVEL)
