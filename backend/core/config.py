"""
core/config.py
──────────────
Centralised application settings via ``pydantic-settings``.

All configuration is driven by environment variables (or a ``.env`` file
in the ``backend/`` directory).  ``pydantic-settings`` validates types at
startup, so bad values fail fast with a clear error message.

Usage
-----
    from core.config import get_settings

    settings = get_settings()
    print(settings.LOG_LEVEL)
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the backend/ directory so relative .env paths work from any cwd.
_BACKEND_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables / ``.env`` file.

    Attributes:
        APP_TITLE:       Human-readable API name shown in OpenAPI docs.
        APP_VERSION:     Semantic version string.
        APP_DESCRIPTION: Short description shown in the OpenAPI UI.
        DEBUG:           Enable verbose (DEBUG-level) logging.
        LOG_LEVEL:       Root log level when ``DEBUG`` is off.
        FRONTEND_URL:    Optional deployed frontend origin for CORS.
        SORT_CANDLES:    Sort incoming candles by time when they arrive
                         out of order instead of trusting the caller.
    """

    model_config = SettingsConfigDict(
        env_file=str(_BACKEND_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        # Extra env vars are ignored — don't raise on unexpected keys.
        extra="ignore",
    )

    # ── API metadata ──────────────────────────────────────────────────────
    APP_TITLE: str = "Price Forecast API"
    APP_VERSION: str = "1.0.0"
    APP_DESCRIPTION: str = (
        "Deterministic price forecasting engine. "
        "Turns historical candles into a point forecast, trend label and confidence score."
    )

    # ── Logging ───────────────────────────────────────────────────────────
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ── CORS ──────────────────────────────────────────────────────────────
    # Optional extra origin injected by the hosting environment.
    FRONTEND_URL: str = ""

    # ── Forecast engine ───────────────────────────────────────────────────
    SORT_CANDLES: bool = True

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """
        Build the full CORS allow-list.

        Hard-coded dev origins plus the optional ``FRONTEND_URL`` env var.

        Returns:
            List of allowed origin strings.
        """
        origins: List[str] = [
            "http://localhost:8081",   # Expo dev server
            "http://127.0.0.1:8081",
            "http://localhost:19006",  # Expo web
            "http://127.0.0.1:19006",
        ]
        if self.FRONTEND_URL:
            origins.append(self.FRONTEND_URL)
        return origins

    @field_validator("LOG_LEVEL")
    @classmethod
    def _must_be_log_level(cls, v: str) -> str:
        """Normalise and reject names the logging module does not know."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown LOG_LEVEL '{v}'")
        return level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return a cached ``Settings`` singleton.

    The instance is created (and the ``.env`` file parsed) only once per
    process lifetime, courtesy of ``functools.lru_cache``.

    Returns:
        Settings: Validated application configuration.
    """
    return Settings()
