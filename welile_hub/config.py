"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "welile-hub"
    log_level: str = "INFO"

    # Dashboards
    trend_window_days: int = 30
    leaderboard_badge_preview: int = 3


settings = Settings()
