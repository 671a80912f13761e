from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database - SQLite for development, PostgreSQL in production
    database_url: str = "sqlite:///./curator.db"
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Application
    app_name: str = "Library Curator"
    debug: bool = False
    log_level: str = "INFO"
    logs_dir: Path = Path("logs")

    # Discord
    discord_bot_token: str | None = None
    discord_api_base_url: str = "https://discord.com/api/v10"
    discord_guild_id: str | None = None
    recommendations_channel_id: str | None = None
    fiction_vault_forum_id: str | None = None
    athenaeum_forum_id: str | None = None
    growth_lab_forum_id: str | None = None

    # Language model
    anthropic_api_key: str | None = None
    synthesis_model: str = "anthropic:claude-sonnet-4-5-20250929"
    llm_timeout_seconds: float = 60.0
    max_content_chars: int = 50_000

    # Processing
    max_processing_attempts: int = 3
    max_tags_per_post: int = 5

    # Backfill / bulk import pacing
    backfill_enabled: bool = True
    backfill_max_messages: int = 100
    backfill_batch_delay_seconds: float = 1.0
    bulk_import_delay_seconds: float = 1.0

    # HTTP client
    http_timeout_seconds: float = 15.0
    http_max_retries: int = 3

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v):
        if not v:
            raise ValueError("DATABASE_URL must be set")
        return v

    @field_validator("max_tags_per_post")
    @classmethod
    def validate_max_tags(cls, v):
        # Discord forums accept at most 5 applied tags per thread
        if v < 1 or v > 5:
            raise ValueError("MAX_TAGS_PER_POST must be between 1 and 5")
        return v

    def forum_ids(self) -> dict[str, str | None]:
        """Forum channel id per library type."""
        return {
            "fiction": self.fiction_vault_forum_id,
            "athenaeum": self.athenaeum_forum_id,
            "growth": self.growth_lab_forum_id,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
