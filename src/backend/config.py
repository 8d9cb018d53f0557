"""Configuration for the backend using pydantic-settings."""

from functools import lru_cache
from pathlib import Path

import httpx
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_BACKEND_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _BACKEND_DIR.parent.parent  # src/backend/ → project root
_DATA_DIR = _PROJECT_ROOT / "data"


class Settings(BaseSettings):
    """All backend settings, loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=str(_BACKEND_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Datasets: local paths or http(s) URLs
    # ------------------------------------------------------------------
    analysis_source: str = str(_DATA_DIR / "amazonhelp_analysis.json")
    sentiment_source: str = str(_DATA_DIR / "amazon_monthly_sentiment.json")
    interactions_source: str = str(_DATA_DIR / "amazonhelp_tweets.csv")
    dataset_fetch_timeout_seconds: float = Field(default=30.0, gt=0)

    # ------------------------------------------------------------------
    # Ollama: generation backend
    # ------------------------------------------------------------------
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.1"
    generation_temperature: float = Field(default=0.1, ge=0)
    generation_max_tokens: int = Field(default=500, gt=0)
    generation_timeout_seconds: float = Field(default=120.0, gt=0)

    # ------------------------------------------------------------------
    # Prompt context caps
    # ------------------------------------------------------------------
    interaction_example_limit: int = Field(default=5, ge=0)
    sentiment_trend_periods: int = Field(default=3, ge=0)

    # ------------------------------------------------------------------
    # Logging / HTTP
    # ------------------------------------------------------------------
    log_level: str = "INFO"
    log_json: bool = False
    log_http_requests: bool = False
    cors_origins: list[str] = ["*"]

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------
    def validate_runtime(self) -> None:
        """Check values that only matter once the server is starting.

        Call this at application startup (not at import time) so that
        tests can override settings before validation runs.
        """
        if not self.ollama_base_url.startswith(("http://", "https://")):
            raise ValueError(
                f"OLLAMA_BASE_URL must be an http(s) URL, got {self.ollama_base_url!r}"
            )
        try:
            httpx.URL(self.ollama_base_url)
        except httpx.InvalidURL as exc:
            raise ValueError(f"OLLAMA_BASE_URL is not a valid URL: {exc}") from exc
        if not self.ollama_model:
            raise ValueError("OLLAMA_MODEL not set. Add it to src/backend/.env")


@lru_cache
def get_settings() -> Settings:
    """Return the cached Settings singleton."""
    return Settings()
