import sys
from datetime import timedelta
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from expirycache.clock import TimeUnit

MAX_LIMIT = sys.maxsize


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="EXPIRYCACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_timeout: int = Field(default=0, ge=0)
    default_time_unit: TimeUnit = TimeUnit.milliseconds
    default_limit: int = Field(default=MAX_LIMIT, ge=1)

    min_sweep_interval_seconds: float = Field(default=0.001, gt=0)
    # datetime arithmetic inside the scheduler overflows past year 9999
    max_sweep_interval_seconds: float = Field(
        default=timedelta(days=365 * 1000).total_seconds(),
        gt=0,
    )
    scheduler_thread_name: str = "expirycache-sweeper"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
