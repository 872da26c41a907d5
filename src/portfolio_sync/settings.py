from __future__ import annotations

import os

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Runtime settings for portfolio-sync, read from the environment."""

    github_token: str | None = Field(default=None, description="GitHub API token.")
    log_level: str = Field(default="WARNING", description="Log level name.")
    log_file: str = Field(default="", description="Log file path, stderr when empty.")

    @classmethod
    def from_env(cls, dotenv: bool = True) -> Settings:
        """Build settings from environment variables, loading the nearest .env first."""
        if dotenv:
            env_file = find_dotenv(usecwd=True)
            if env_file:
                load_dotenv(env_file, override=False)
        return cls(
            github_token=os.environ.get("GITHUB_TOKEN") or None,
            log_level=os.environ.get("PORTFOLIO_SYNC_LOG_LEVEL", "WARNING"),
            log_file=os.environ.get("PORTFOLIO_SYNC_LOG_FILE", ""),
        )
