# config.py
# Role: Environment-driven settings for the household ledger.
#       Loads an optional .env file and exposes plain module-level values.

import os

from dotenv import load_dotenv

load_dotenv()

# Base directory of the project (where this module lives)
BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _env_truthy(name: str, default: str = "0") -> bool:
    v = os.getenv(name, default)
    return str(v).strip().lower() in ("1", "true", "yes", "y", "on")


def _default_database_url() -> str:
    db_dir = os.path.join(BASE_DIR, "database")
    os.makedirs(db_dir, exist_ok=True)
    return f"sqlite:///{os.path.join(db_dir, 'finance.db')}"


DATABASE_URL = os.getenv("DATABASE_URL") or _default_database_url()

# Shared passphrase gate (empty = disabled)
APP_PASSPHRASE = os.getenv("APP_PASSPHRASE", "").strip()

# External identifier used by /auth/login when the caller doesn't send one
DEFAULT_OPEN_ID = os.getenv("DEFAULT_OPEN_ID", "household").strip() or "household"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_JSON = _env_truthy("LOG_JSON", "0")

SEED_CATEGORIES = _env_truthy("SEED_CATEGORIES", "1")

DEFAULT_ALERT_THRESHOLD = 80
