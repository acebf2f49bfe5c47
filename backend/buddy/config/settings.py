# /buddy/config/settings.py

import json
from typing import Annotated, List
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


VERSION = "1.0.0"


class Settings(BaseSettings):
    # LLM oracle (Groq exposes an OpenAI-compatible API)
    groq_api_key: str | None = None
    groq_base_url: str = "https://api.groq.com/openai/v1"
    oracle_timeout_seconds: float = 20.0

    # Model pools. "fast" serves field extraction, "smart" serves tool routing and plans.
    fast_models: Annotated[List[str], NoDecode] = Field(default=["llama-3.1-8b-instant", "gemma2-9b-it"])
    smart_models: Annotated[List[str], NoDecode] = Field(default=["llama-3.3-70b-versatile"])
    # Fallbacks are taken from the opposite pool on a rate limit or decommissioned model.
    fast_fallback_model: str = "llama-3.3-70b-versatile"
    smart_fallback_model: str = "llama-3.1-8b-instant"

    # Conversation behaviour
    history_limit: int = 20
    default_language: str = "hinglish"
    log_level: str = "INFO"

    # Deployment
    environment: str = Field(default="production")
    workers: int = 2
    api_version: str = "v1"
    api_key: str | None = None

    cors_allowed_origins: Annotated[List[str], NoDecode] = Field(default=["http://localhost:5173"])
    allowed_hosts: str = Field(default="localhost,127.0.0.1")

    # Limits
    rate_limit_per_minute: int = 60
    request_timeout_seconds: float = 30.0

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # ---------------- Validators ---------------- #

    @field_validator("cors_allowed_origins", "fast_models", "smart_models", mode="before")
    @classmethod
    def parse_comma_separated(cls, v):
        """
        Accept both comma-separated strings and lists so that env variables like
        FAST_MODELS=a,b work the same as JSON lists.
        """
        if isinstance(v, str):
            stripped = v.strip()
            if stripped.startswith("["):
                return json.loads(stripped)
            return [item.strip() for item in stripped.split(",") if item.strip()]
        return v

    @field_validator("default_language")
    @classmethod
    def language_must_be_supported(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("hindi", "english", "hinglish"):
            raise ValueError("DEFAULT_LANGUAGE must be one of hindi, english, hinglish")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("LOG_LEVEL must be a standard logging level name")
        return v

    @model_validator(mode="after")
    def pools_must_not_be_empty(self):
        if not self.fast_models:
            raise ValueError("FAST_MODELS must list at least one model")
        if not self.smart_models:
            raise ValueError("SMART_MODELS must list at least one model")
        return self


settings = Settings()
