# appia/core/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


@dataclass(frozen=True)
class Settings:
    app_env: str = "production"
    log_level: str = "INFO"
    log_file: str = ""

    database_url: str = "sqlite:///./appia.db"

    anthropic_api_key: str = ""
    model_expensive: str = "claude-sonnet-4-20250514"
    model_cheap: str = "claude-3-5-haiku-20241022"
    max_tokens_expensive: int = 8000
    max_tokens_cheap: int = 4000
    patch_tokens_expensive: int = 800
    patch_tokens_cheap: int = 400
    anthropic_timeout: float = 120.0
    response_cache_size: int = 100

    rate_limit_per_min: int = 60

    free_tokens_limit: int = 108000
    pro_tokens_limit: int = 1000000
    usage_period_days: int = 30

    vercel_token: str = ""
    vercel_team_id: str = ""
    github_client_id: str = ""
    github_client_secret: str = ""
    http_timeout: float = 30.0

    cors_origins: str = "*"

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() == "development"

    @property
    def allowed_origins(self) -> List[str]:
        if self.cors_origins.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @staticmethod
    def from_env() -> "Settings":
        load_dotenv()
        return Settings(
            app_env=os.getenv("APP_ENV", "production"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", ""),
            database_url=os.getenv("DATABASE_URL", "sqlite:///./appia.db"),
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or os.getenv("CLAUDE_API_KEY", ""),
            model_expensive=os.getenv("CLAUDE_MODEL_EXPENSIVE", "claude-sonnet-4-20250514"),
            model_cheap=os.getenv("CLAUDE_MODEL_CHEAP", "claude-3-5-haiku-20241022"),
            max_tokens_expensive=_env_int("MAX_TOKENS_EXPENSIVE", 8000),
            max_tokens_cheap=_env_int("MAX_TOKENS_CHEAP", 4000),
            patch_tokens_expensive=_env_int("PATCH_TOKENS_EXPENSIVE", 800),
            patch_tokens_cheap=_env_int("PATCH_TOKENS_CHEAP", 400),
            anthropic_timeout=_env_float("ANTHROPIC_TIMEOUT", 120.0),
            response_cache_size=_env_int("RESPONSE_CACHE_SIZE", 100),
            rate_limit_per_min=_env_int("RATE_LIMIT_PER_MIN", 60),
            free_tokens_limit=_env_int("FREE_TOKENS_LIMIT", 108000),
            pro_tokens_limit=_env_int("PRO_TOKENS_LIMIT", 1000000),
            usage_period_days=_env_int("USAGE_PERIOD_DAYS", 30),
            vercel_token=os.getenv("VERCEL_TOKEN", ""),
            vercel_team_id=os.getenv("VERCEL_TEAM_ID", ""),
            github_client_id=os.getenv("GITHUB_CLIENT_ID", ""),
            github_client_secret=os.getenv("GITHUB_CLIENT_SECRET", ""),
            http_timeout=_env_float("HTTP_TIMEOUT", 30.0),
            cors_origins=os.getenv("CORS_ORIGINS", "*"),
        )
