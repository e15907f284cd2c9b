from __future__ import annotations

import functools
import json
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE_URL = "http://localhost:8000"
DEFAULT_PAGE_URL = "http://localhost:3000"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    # App / env
    app_env: str = Field("dev", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    cors_origins: str = Field("", alias="CORS_ORIGINS")

    # Remote analysis service
    api_base_url: str = Field(DEFAULT_API_BASE_URL, alias="REVIEWBOT_API_BASE_URL")
    request_timeout_seconds: float = Field(30.0, alias="REVIEWBOT_TIMEOUT_SECONDS")
    connect_timeout_seconds: float = Field(10.0, alias="REVIEWBOT_CONNECT_TIMEOUT_SECONDS")

    # Workflow
    quota_cooldown_seconds: int = Field(60, alias="REVIEWBOT_QUOTA_COOLDOWN_SECONDS")
    surface_optimize_failures: bool = Field(False, alias="REVIEWBOT_SURFACE_OPTIMIZE_FAILURES")

    # Feedback effects
    copy_feedback_seconds: float = Field(2.0, alias="REVIEWBOT_COPY_FEEDBACK_SECONDS")
    page_url: str = Field(DEFAULT_PAGE_URL, alias="REVIEWBOT_PAGE_URL")

    @field_validator("api_base_url", mode="before")
    @classmethod
    def normalize_base_url(cls, v: Any) -> str:
        text = str(v or "").strip()
        if not text:
            return DEFAULT_API_BASE_URL
        return text.rstrip("/")

    @field_validator("quota_cooldown_seconds")
    @classmethod
    def clamp_cooldown(cls, v: int) -> int:
        return max(1, v)

    @field_validator("request_timeout_seconds", "connect_timeout_seconds", "copy_feedback_seconds")
    @classmethod
    def clamp_positive(cls, v: float) -> float:
        return max(0.1, v)

    @field_validator("app_env")
    @classmethod
    def normalize_env(cls, v: str) -> str:
        return (v or "dev").lower()

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return (v or "INFO").upper()

    def cors_origins_list(self) -> List[str]:
        text = (self.cors_origins or "").strip()
        if not text:
            return []
        if text == "*":
            return ["*"]
        try:
            parsed = json.loads(text)
        except ValueError:
            parsed = None
        if isinstance(parsed, list):
            return [str(item).strip() for item in parsed if str(item).strip()]
        return [item.strip() for item in text.split(",") if item.strip()]


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def settings_public_summary(settings: Optional[Settings] = None) -> Dict[str, Any]:
    s = settings or get_settings()
    return {
        "env": s.app_env,
        "api_base_url": s.api_base_url,
        "timeouts": {
            "request": s.request_timeout_seconds,
            "connect": s.connect_timeout_seconds,
        },
        "quota_cooldown_seconds": s.quota_cooldown_seconds,
        "surface_optimize_failures": s.surface_optimize_failures,
    }


__all__ = ["DEFAULT_API_BASE_URL", "DEFAULT_PAGE_URL", "Settings", "get_settings", "settings_public_summary"]
