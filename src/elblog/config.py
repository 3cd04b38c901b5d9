"""Configuration via pydantic-settings, loaded from the environment."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """elblog configuration, read from ELBLOG_* env vars or a .env file."""

    skip_errors: bool = Field(default=True, description="Log and skip malformed lines instead of aborting")
    max_workers: int = Field(default=1, ge=0, description="Worker processes for parsing (0 = one per CPU)")
    chunksize: int = Field(default=1000, ge=1, description="Lines handed to a worker at a time")
    default_output: str = Field(default="table", description="Default output for 'elblog parse' (table|json|stream)")
    log_level: str = Field(default="WARNING", description="Root log level used by the CLI")

    class Config:
        env_prefix = "ELBLOG_"
        env_file = ".env"


settings = Settings()
