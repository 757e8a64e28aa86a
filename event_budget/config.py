"""Configuration management for the event budget planner.

This module centralizes all configuration values including paths,
numeric tolerances, logging setup and environment variable overrides.
"""

from __future__ import annotations

import logging
import logging.config
import os
from pathlib import Path

# Base project root - assumes this file is in event_budget/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("EVENT_BUDGET_DATA_DIR", _PROJECT_ROOT / "data"))
BUDGETS_DIR = Path(os.getenv("EVENT_BUDGET_BUDGETS_DIR", DATA_DIR / "budgets"))

# Tolerances used by the reconciliation logic
PAID_EPSILON = 1e-6
OVERPAYMENT_TOLERANCE = 0.005
MISMATCH_TOLERANCE = 0.01

DEFAULT_PRIORITY = "medium"

LOG_LEVEL = os.getenv("EVENT_BUDGET_LOG_LEVEL", "INFO").upper()

LOGGING_CONFIG = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
        },
    },
    'loggers': {
        'event_budget': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
}


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, BUDGETS_DIR]:
        directory.mkdir(parents=True, exist_ok=True)


def configure_logging(level: str | None = None) -> None:
    """Apply ``LOGGING_CONFIG``, optionally overriding the package log level."""
    logging.config.dictConfig(LOGGING_CONFIG)
    if level:
        logging.getLogger("event_budget").setLevel(level.upper())
