"""Configuration settings for MoviePoll."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # MongoDB settings
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "moviepoll"
    mongodb_timeout_ms: int = 30000

    # TMDB API settings
    tmdb_api_key: str = ""
    tmdb_base_url: str = "https://api.themoviedb.org/3"

    # Application settings
    app_name: str = "MoviePoll"
    debug: bool = False
    cors_origins: str = "*"

    # Scoring settings
    visibility_floor: float = 0.1
    match_flexible_threshold: float = 15.0
    match_year_penalty: float = 10.0

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
