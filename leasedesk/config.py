"""Backend settings read from the environment (and ``.env`` at the repo root)."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from .utils.coerce import to_int

load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env", override=False)

ALGORITHM = "HS256"
DEFAULT_SECRET_KEY = "leasedesk-dev-secret"


def secret_key() -> str:
    return os.getenv("LEASEDESK_SECRET_KEY") or DEFAULT_SECRET_KEY


def access_token_minutes() -> int:
    return to_int(os.getenv("ACCESS_TOKEN_MINUTES")) or 60


def db_mode() -> str:
    mode = os.getenv("DB_MODE", "memory").lower()
    return mode if mode in ("memory", "json") else "memory"


def api_host() -> str:
    return os.getenv("API_HOST", "127.0.0.1")


def api_port() -> int:
    return to_int(os.getenv("API_PORT")) or 8000


def reset_code_minutes() -> int:
    return to_int(os.getenv("RESET_CODE_MINUTES")) or 15


def expose_reset_codes() -> bool:
    """Echo reset codes in the API response; only for local runs without a mailer."""
    return os.getenv("EXPOSE_RESET_CODES", "").strip().lower() in ("1", "true", "yes")
