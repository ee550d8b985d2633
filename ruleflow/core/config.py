"""Engine configuration loaded from the environment."""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment."""

    log_level: str = "INFO"

    # Paths
    rules_file: str = "rules.yaml"
    schema_file: str | None = None
    schema_name: str = "facts"

    model_config = SettingsConfigDict(
        env_prefix="RULEFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
