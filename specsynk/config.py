"""Configuration helpers for the SpecSynk interview service."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
WORKSPACE_ROOT = BASE_DIR.parent

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_REQUEST_TIMEOUT = 120.0
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_EXPORT_DIR = WORKSPACE_ROOT / "exports"


@dataclass(frozen=True)
class Settings:
    """Process-wide settings read from the environment."""

    api_key: str
    model: str = DEFAULT_MODEL
    sheet_url: str | None = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)


def load_settings() -> Settings:
    """Build settings from environment variables.

    A missing API key is logged but never raised: the service still starts and
    the first model call fails through the regular error paths.
    """
    api_key = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or ""
    if not api_key:
        logger.error("API_KEY is missing from environment variables.")
    timeout_raw = os.getenv("SPECSYNK_REQUEST_TIMEOUT")
    try:
        timeout = float(timeout_raw) if timeout_raw else DEFAULT_REQUEST_TIMEOUT
    except ValueError:
        logger.warning("Ignoring invalid SPECSYNK_REQUEST_TIMEOUT=%r", timeout_raw)
        timeout = DEFAULT_REQUEST_TIMEOUT
    return Settings(
        api_key=api_key,
        model=os.getenv("SPECSYNK_MODEL") or DEFAULT_MODEL,
        sheet_url=os.getenv("SPECSYNK_SHEET_URL") or None,
        request_timeout=timeout,
        log_level=(os.getenv("SPECSYNK_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached settings so the credential check runs once."""
    return load_settings()


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=level or get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
