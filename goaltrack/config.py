from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./goaltrack.db"
    goaltrack_api_key: str | None = None
    log_level: str = "INFO"

    # Blob store keys (shared with the mobile client's storage layout)
    goals_storage_key: str = "goals"
    theme_storage_key: str = "theme"

    # Insights
    goals_recent_activity_limit: int = 5  # Check-ins shown in recent activity

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
