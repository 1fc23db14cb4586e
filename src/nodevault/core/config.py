"""Configuration management for NodeVault core."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def get_env(key: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    return os.getenv(key, default)


def get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get environment variable as boolean."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return default


# NodeVault Data Directory (defaults to ~/.nodevault)
NODEVAULT_DATA_DIR = Path(
    get_env("NODEVAULT_DATA_DIR", os.path.expanduser("~/.nodevault"))
    or os.path.expanduser("~/.nodevault")
).expanduser()

# Ensure data directory exists
NODEVAULT_DATA_DIR.mkdir(parents=True, exist_ok=True)

# Storage backend: memory, json or sqlite
STORE_BACKENDS = ("memory", "json", "sqlite")
NODEVAULT_STORE = (get_env("NODEVAULT_STORE", "sqlite") or "sqlite").lower()

# Backend locations
DATABASE_PATH = NODEVAULT_DATA_DIR / "nodevault.db"
JSON_STORE_PATH = NODEVAULT_DATA_DIR / "records.json"

# Artifacts
BACKUP_DIR = Path(
    get_env("NODEVAULT_BACKUP_DIR", str(NODEVAULT_DATA_DIR / "backups"))
    or NODEVAULT_DATA_DIR / "backups"
).expanduser()
EXPORT_DIR = Path(
    get_env("NODEVAULT_EXPORT_DIR", str(NODEVAULT_DATA_DIR)) or NODEVAULT_DATA_DIR
).expanduser()
EXPORT_FILE_NAME = "export.txt"

# Write a backup after every add/delete made from the menu
AUTO_BACKUP = get_env_bool("NODEVAULT_AUTO_BACKUP", True)

# Number of mutation events kept in memory for the history view
EVENT_HISTORY_LIMIT = get_env_int("NODEVAULT_EVENT_HISTORY", 50)

# Logging
LOG_LEVEL = get_env("LOG_LEVEL", "INFO") or "INFO"


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure and return logger."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
    )
    return logging.getLogger(__name__)


def validate_core_environment() -> tuple[bool, str]:
    """
    Validate configuration needed to open the record store.

    Returns:
        (is_valid, message) - If not valid, message explains what's wrong.
    """
    if NODEVAULT_STORE not in STORE_BACKENDS:
        return (
            False,
            f"Unknown NODEVAULT_STORE '{NODEVAULT_STORE}' - "
            f"expected one of: {', '.join(STORE_BACKENDS)}",
        )

    return True, ""
