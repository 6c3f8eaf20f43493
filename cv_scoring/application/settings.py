from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional, List

# Application settings using pydantic-settings for structured configuration

class Settings(BaseSettings):
    # --- App ---
    app_name: str = "CV Scoring Engine"
    app_env: str = "development"          # e.g., development / staging / production
    debug: bool = True

    # --- Scoring engine ---
    # Independent engine instances, each with its own seed-trained model
    scoring_workers: int = Field(default=1, ge=1)
    # Seconds a caller waits for a correlated response before giving up
    request_timeout_s: float = Field(default=5.0, gt=0)
    # JSON list in the env (SEED_CORPUS='["...", "..."]'); None keeps the built-in corpus
    seed_corpus: Optional[List[str]] = None

    # pydantic v2 / pydantic-settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",     # auto-load from your .env
        case_sensitive=False,  # .env keys can be upper/lower
        extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    """Cache settings so we don’t re-parse .env on every request."""
    return Settings()
