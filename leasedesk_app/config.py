"""Stage-aware settings for the dashboard."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from leasedesk.utils.coerce import to_int
from leasedesk.utils.logging import get_logger

LOGGER = get_logger("app.config")

STAGES = ("local", "dev", "stag", "prod")

# Per-stage request timeout (seconds) and debug flag.
STAGE_DEFAULTS: Dict[str, Dict[str, object]] = {
    "local": {"api_timeout": 30, "debug": True},
    "dev": {"api_timeout": 20, "debug": True},
    "stag": {"api_timeout": 15, "debug": False},
    "prod": {"api_timeout": 10, "debug": False},
}

DEFAULT_API_BASE_URL = "http://localhost:8000/api"


@dataclass(frozen=True)
class Settings:
    stage: str
    api_base_url: str
    api_timeout: int
    debug: bool
    search_debounce_ms: int
    default_page_size: int


def resolve_stage(raw: Optional[str]) -> str:
    stage = (raw or "prod").strip().lower()
    if stage not in STAGES:
        LOGGER.warning("invalid_stage value=%s falling_back=prod", stage)
        return "prod"
    return stage


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if env is None else env
    stage = resolve_stage(env.get("LEASEDESK_STAGE"))
    defaults = STAGE_DEFAULTS[stage]
    return Settings(
        stage=stage,
        api_base_url=(env.get("API_BASE_URL") or DEFAULT_API_BASE_URL).rstrip("/"),
        api_timeout=to_int(env.get("API_TIMEOUT")) or int(defaults["api_timeout"]),
        debug=bool(defaults["debug"]),
        search_debounce_ms=to_int(env.get("SEARCH_DEBOUNCE_MS")) or 350,
        default_page_size=to_int(env.get("DEFAULT_PAGE_SIZE")) or 10,
    )
