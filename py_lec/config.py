"""Configuration management."""

import os
from pathlib import Path

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env for local runs only where values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    for key, value in file_env.items():
        if key not in os.environ and value is not None:
            os.environ[key] = value


class Settings(BaseSettings):
    """Application settings pulled from LEC_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LEC_",
        extra="ignore",
    )

    # API
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    # Computation
    max_sites: int = Field(default=20000, ge=3, description="Largest site count accepted by the API")
    margin_factor: float = Field(default=1.0, gt=0, description="Clipping box margin relative to the site extent")
    workers: int = Field(default=1, ge=1, description="Threads used to evaluate candidate centres")


settings = Settings()
