"""Configuration management for the application."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = Field(default="sqlite:///./recipe_finder.db")

    # Spoonacular API (recipe search and details)
    spoonacular_api_key: str | None = Field(default=None)
    spoonacular_base_url: str = Field(default="https://api.spoonacular.com")
    spoonacular_timeout_seconds: float = Field(default=15.0)
    search_max_results: int = Field(default=25)

    # Recipe cache
    recipe_cache_ttl_hours: int = Field(default=24)
    cache_timeout_seconds: float = Field(default=2.0)

    # API
    environment: str = Field(default="development")

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validate that production has secure settings."""
        if self.environment == "production":
            if not self.spoonacular_api_key:
                raise ValueError("SPOONACULAR_API_KEY must be set in production")
            if "localhost" in self.database_url or self.database_url.startswith("sqlite"):
                raise ValueError("DATABASE_URL should point at the production database")
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
