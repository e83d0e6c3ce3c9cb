import os
from dataclasses import dataclass
from typing import Optional


def _env_float(name: str, default: str) -> float:
    return float(os.getenv(name, default))


def _env_int(name: str, default: str) -> int:
    return int(os.getenv(name, default))


@dataclass(frozen=True)
class Settings:
    # Vision model
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    VISION_MODEL: str = "gpt-4o"
    VISION_TEMPERATURE: float = 0.1
    VISION_MAX_TOKENS: int = 150
    REQUEST_TIMEOUT_SECONDS: float = 30.0
    # Storage origin images must come from
    SUPABASE_URL: str = ""
    # Security
    JWT_SECRET: Optional[str] = None
    JWT_ALG: str = "HS256"
    JWT_AUD: Optional[str] = None
    # Rate limiting, 0 disables
    RATE_LIMIT_PER_MIN: int = 60
    RATE_LIMIT_BURST: int = 30
    # Logging
    LOG_LEVEL: str = "INFO"
    # API
    API_PREFIX: str = ""

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            OPENAI_API_KEY=os.getenv("OPENAI_API_KEY") or None,
            OPENAI_BASE_URL=os.getenv("OPENAI_BASE_URL", cls.OPENAI_BASE_URL),
            VISION_MODEL=os.getenv("VISION_MODEL", cls.VISION_MODEL),
            VISION_TEMPERATURE=_env_float("VISION_TEMPERATURE", "0.1"),
            VISION_MAX_TOKENS=_env_int("VISION_MAX_TOKENS", "150"),
            REQUEST_TIMEOUT_SECONDS=_env_float("REQUEST_TIMEOUT_SECONDS", "30"),
            SUPABASE_URL=os.getenv("SUPABASE_URL", ""),
            JWT_SECRET=os.getenv("JWT_SECRET") or None,
            JWT_ALG=os.getenv("JWT_ALG", "HS256"),
            JWT_AUD=os.getenv("JWT_AUD") or None,
            RATE_LIMIT_PER_MIN=_env_int("RATE_LIMIT_PER_MIN", "60"),
            RATE_LIMIT_BURST=_env_int("RATE_LIMIT_BURST", "30"),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
            API_PREFIX=os.getenv("API_PREFIX", ""),
        )
