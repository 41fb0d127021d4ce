"""Application configuration utilities.

This module centralizes environment configuration for the backend, including
JWT secrets, the persistence provider, logging, and the generative text
service used for roadmaps and compatibility scoring.

PySecure-4-Minimal controls:
- Do not log secrets.
- Validate enum-like env values.
- Avoid crashing on missing env; provide safe defaults for dev.

Environment variables (to be provided via .env by orchestrator):
- DATA_PROVIDER: 'sqlite' (default) or 'memory'
- DB_PATH: Optional path to the sqlite database; defaults to ../career_coach.db
- JWT_SECRET / JWT_ALGORITHM / ACCESS_TOKEN_EXPIRE_MINUTES: token settings
- APP_ENV: 'development' (default), 'test' or 'production'
- LOG_LEVEL / LOG_FORMAT: logging level and 'text' or 'json' output
- OPENAI_API_KEY / OPENAI_MODEL / OPENAI_BASE_URL / OPENAI_MAX_RETRIES
- ROADMAP_FALLBACK_ENABLED: use the fixed roadmap template when the
  generative service is unreachable or misconfigured (default true)
- ATOMIC_REGENERATION: generate before deleting the old roadmap (default false)
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional
from pydantic import BaseModel, Field, ValidationError


class Settings(BaseModel):
    """Configuration settings loaded from environment with secure defaults."""
    data_provider: Literal["memory", "sqlite"] = Field(
        default="sqlite", description="Persistence provider for users and roadmaps."
    )
    db_path: Optional[str] = Field(
        default=None, description="SQLite DB path (used when DATA_PROVIDER=sqlite)."
    )
    jwt_secret: str = Field(
        default="dev-secret-change-me", description="JWT secret key (dev default)."
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm.")
    access_token_expire_minutes: int = Field(
        default=60, description="Access token TTL in minutes."
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Allowed CORS origins.",
    )
    environment: Literal["development", "test", "production"] = Field(
        default="development", description="Deployment environment; controls error detail."
    )
    log_level: str = Field(default="INFO", description="Root log level.")
    log_format: Literal["text", "json"] = Field(default="text", description="Log line format.")

    openai_api_key: Optional[str] = Field(default=None, description="Generative service credential.")
    openai_model: str = Field(default="gpt-4o", description="Chat model used for generation.")
    openai_base_url: Optional[str] = Field(default=None, description="Override for the API base URL.")
    openai_max_retries: int = Field(default=0, ge=0, description="Transport-level retries.")

    roadmap_fallback_enabled: bool = Field(
        default=True, description="Serve the fixed template when generation is unavailable."
    )
    atomic_regeneration: bool = Field(
        default=False, description="Generate the replacement roadmap before deleting the old one."
    )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def _default_db_path() -> str:
    """Resolve the default SQLite file path next to the package directory."""
    return str(Path(__file__).resolve().parents[2] / "career_coach.db")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def load_settings() -> Settings:
    """Load settings from environment with robust defaults and validation.

    Returns:
        Settings: Validated settings object.

    Raises:
        ValidationError: If environment values are invalid.
    """
    data_provider = os.getenv("DATA_PROVIDER", "sqlite").strip().lower()
    if data_provider not in {"memory", "sqlite"}:
        data_provider = "sqlite"  # safe default favoring persistence

    environment = os.getenv("APP_ENV", "development").strip().lower()
    if environment not in {"development", "test", "production"}:
        environment = "development"

    log_format = os.getenv("LOG_FORMAT", "text").strip().lower()
    if log_format not in {"text", "json"}:
        log_format = "text"

    cors_origins_raw = os.getenv("CORS_ORIGINS", "http://localhost:3000")
    cors_origins = [o.strip() for o in cors_origins_raw.split(",") if o.strip()]

    db_path_env = os.getenv("DB_PATH")
    db_path = db_path_env if db_path_env else _default_db_path()

    try:
        settings = Settings(
            data_provider=data_provider,  # type: ignore[arg-type]
            db_path=db_path,
            jwt_secret=os.getenv("JWT_SECRET", "dev-secret-change-me"),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            access_token_expire_minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60")),
            cors_origins=cors_origins,
            environment=environment,  # type: ignore[arg-type]
            log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
            log_format=log_format,  # type: ignore[arg-type]
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o"),
            openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
            openai_max_retries=int(os.getenv("OPENAI_MAX_RETRIES", "0")),
            roadmap_fallback_enabled=_env_flag("ROADMAP_FALLBACK_ENABLED", True),
            atomic_regeneration=_env_flag("ATOMIC_REGENERATION", False),
        )
    except ValidationError as ve:
        # Keep error generic to avoid leaking values
        raise ve
    return settings


# Singleton-style accessor
_settings: Optional[Settings] = None

# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Get cached application settings."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings

# PUBLIC_INTERFACE
def reset_settings_cache() -> None:
    """Reset the cached settings.

    This is primarily intended for tests to ensure that changes to environment
    variables (e.g., DATA_PROVIDER, DB_PATH) take effect on subsequent calls
    to get_settings().
    """
    global _settings
    _settings = None
