from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


load_dotenv()


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here. Values are read when the
    instance is created; keyword arguments override the environment.
    """

    def __init__(self, **overrides) -> None:
        self.app_env: str = os.getenv("APP_ENV", "development")
        self.gemini_api_key: Optional[str] = (
            os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or None
        )
        self.gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
        self.temperature: float = _env_float("MODEL_TEMPERATURE", 0.7)
        self.top_p: float = _env_float("MODEL_TOP_P", 0.95)
        self.relay_base_url: Optional[str] = os.getenv("RELAY_BASE_URL") or None
        self.relay_timeout: Optional[float] = _env_float("RELAY_TIMEOUT", None)
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.session_max_count: int = int(os.getenv("SESSION_MAX_COUNT", "1000"))
        self.session_ttl: float = _env_float("SESSION_TTL_SECONDS", 3600.0)
        self.host: str = os.getenv("HOST", "127.0.0.1")
        self.port: int = int(os.getenv("PORT", "8000"))

        for name, value in overrides.items():
            if not hasattr(self, name):
                raise TypeError(f"Unknown setting: {name}")
            setattr(self, name, value)

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() in {"dev", "development", "local"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
