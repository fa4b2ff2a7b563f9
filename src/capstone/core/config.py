from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Capstone Workflow Engine"
    app_env: str = "development"  # development, testing, production
    debug: bool = False

    # Security
    log_user_emails: bool = False  # Set to False in production for GDPR compliance

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_echo: bool = False

    # Review queue
    review_queue_days: int = 7
    review_queue_limit: int = 50

    # Notifications
    notification_page_size: int = 20

    # Projects created from approved pre-requests fall back to this title
    default_project_title: str = "Project"

    @field_validator("review_queue_days", "review_queue_limit", "notification_page_size")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must not be negative")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
