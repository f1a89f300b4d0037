"""Configuration management for the expense dashboard.

This module centralizes all configuration values including the backend
URL, paths, defaults, and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base project root - assumes this file is in expense_dashboard/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# REST backend
API_URL = os.getenv("EXPENSE_API_URL", "http://localhost:3000").rstrip("/")
API_TIMEOUT = float(os.getenv("EXPENSE_API_TIMEOUT", "10"))

# Data directories
DATA_DIR = Path(os.getenv("EXPENSE_DASHBOARD_DATA_DIR", _PROJECT_ROOT / "data"))
LOG_DIR = DATA_DIR / "logs"
CACHE_PATH = DATA_DIR / "persistent_cache.json"

# Logging
LOG_LEVEL = os.getenv("EXPENSE_DASHBOARD_LOG_LEVEL", "INFO").upper()

# Display
CURRENCY_CODE = os.getenv("EXPENSE_CURRENCY_CODE", "THB")
CURRENCY_SYMBOL = os.getenv("EXPENSE_CURRENCY_SYMBOL", "฿")
