# app/config.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Backend/.env, resolved from Backend/app/config.py
ENV_FILE = Path(__file__).resolve().parents[1] / ".env"
load_dotenv(ENV_FILE, override=False)  # pre-load into the process environment

class Settings(BaseSettings):
    # ---- App ----
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    CORS_ALLOW_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])

    # ---- Upstream site ----
    NEU_YZ_BASE_URL: str = "http://yz.neu.edu.cn"

    # ---- HTTP client ----
    HTTP_TIMEOUT_S: int = 15
    HTTP_USER_AGENT: str = "neu-yz-feed/1.0"

    # ---- Content cache ----
    # 0 keeps entries for the lifetime of the process
    FEED_CACHE_TTL_SECONDS: int = 3600

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

settings = Settings()


def get_base_url() -> str:
    """
    Site origin without a trailing slash, used to absolutize every upstream href.
    """
    return settings.NEU_YZ_BASE_URL.rstrip("/")


def get_log_level() -> int:
    level = logging.getLevelName(settings.LOG_LEVEL.strip().upper())
    if not isinstance(level, int):
        raise RuntimeError(
            f"LOG_LEVEL '{settings.LOG_LEVEL}' is not a valid log level "
            f"(loaded from: {ENV_FILE})."
        )
    return level
