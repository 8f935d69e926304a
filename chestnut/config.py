"""Configuration for the budget tracker.

Paths, defaults and feature flags live here, each overridable through a
CHESTNUT_* environment variable.
"""

import logging
import os
from pathlib import Path

from chestnut.domain import DEFAULT_BUDGET as _BUILTIN_DEFAULT_BUDGET
from chestnut.transforms import BudgetPolicy

_TRUTHY = {"1", "true", "yes", "on"}

STORAGE_KEY = "@chestnut/app-data"


def default_data_dir() -> Path:
    """Per-user data directory, ~/.chestnut."""
    return Path.home() / ".chestnut"


DATA_DIR = Path(os.getenv("CHESTNUT_DATA_DIR") or default_data_dir())
STORAGE_PATH = Path(os.getenv("CHESTNUT_STORAGE_PATH", DATA_DIR / "app_data.json"))

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def default_budget() -> int:
    return _env_int("CHESTNUT_DEFAULT_BUDGET", _BUILTIN_DEFAULT_BUDGET)


def use_seed_data() -> bool:
    return os.getenv("CHESTNUT_USE_SEED_DATA", "").strip().lower() in _TRUTHY


def budget_policy() -> BudgetPolicy:
    raw = os.getenv("CHESTNUT_BUDGET_POLICY", BudgetPolicy.SYNC_DEFAULT.value).strip().lower()
    try:
        return BudgetPolicy(raw)
    except ValueError:
        return BudgetPolicy.SYNC_DEFAULT


def log_level() -> int:
    name = os.getenv("CHESTNUT_LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def ensure_data_directories() -> None:
    """Create the data directory if it doesn't exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def configure_logging(level: int | None = None) -> logging.Logger:
    """Attach a stream handler to the package logger once."""
    logger = logging.getLogger("chestnut")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level if level is not None else log_level())
    return logger
