"""Configuration management using Pydantic Settings."""
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Incubation Progression Engine"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database
    database_url: str = "sqlite:///./incubation.db"
    auto_create_tables: bool = False

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0

    # Cache TTLs (seconds)
    cache_ttl_program: int = 3600  # 1 hour, one evaluation cycle
    cache_ttl_template: int = 3600

    # Scoring
    rubric_weight_tolerance: float = 0.01
    evaluation_validity_days: int = 90

    # Storage calls made on behalf of a request
    storage_timeout_seconds: float = 5.0

    # Conflict policy
    conflict_lookup_timeout_seconds: float = 5.0
    risk_warning_threshold: int = 50
    conflict_cooling_off_days: int = 365
    repeat_evaluation_threshold: int = 3
    score_inflation_margin: float = 2.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
