"""Configuration management using Pydantic Settings."""

from enum import Enum

from pydantic import field_validator
from pydantic_settings import BaseSettings


class PostLayout(str, Enum):
    """Where post content is stored."""
    EMBEDDED = "embedded"
    PER_POST = "per_post"


class ContentLayout(str, Enum):
    """Post content length policy."""
    FIXED = "fixed"
    VARIABLE = "variable"


class StoreBackend(str, Enum):
    """Account store backend type."""
    SQLITE = "sqlite"
    REDIS = "redis"
    MEMORY = "memory"


class LogFormat(str, Enum):
    """Log output format."""
    JSON = "json"
    CONSOLE = "console"


class SocialConfig(BaseSettings):
    """Configuration for the socialchain program and its host runtime."""

    # Program settings
    program_id: str | None = None
    max_follower_count: int = 200
    max_post_count: int = 100
    post_layout: PostLayout = PostLayout.EMBEDDED
    content_layout: ContentLayout = ContentLayout.VARIABLE
    content_size: int = 280

    # Rent settings
    lamports_per_byte_year: int = 3480
    exemption_threshold_years: float = 2.0
    airdrop_lamports: int = 1_000_000_000

    # Store settings
    store_backend: StoreBackend = StoreBackend.SQLITE
    sqlite_path: str = ".socialchain.db"
    redis_url: str = "redis://localhost:6379/0"

    # Logging
    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.CONSOLE

    model_config = {
        "env_prefix": "SOCIALCHAIN_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("max_follower_count")
    @classmethod
    def _follower_count_fits_u16(cls, value: int) -> int:
        if not 0 <= value <= 0xFFFF:
            raise ValueError("max_follower_count must be between 0 and 65535")
        return value

    @field_validator("max_post_count", "content_size")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("must not be negative")
        return value
