from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Runtime configuration loaded from Environment Variables or .env file.
    Sync pairs themselves come from the command line (or CONFIG_FILE).
    """

    POLLING_INTERVAL: float = 5
    CONTROL_INTERVAL: float = 0.1
    DOCKER_BASE_URL: str | None = None  # Optional: Connect to remote docker

    AWS_REGION: str = "us-east-1"
    INSTANCE_ID: str | None = None  # Skips the instance metadata lookup
    METADATA_URL: str = "http://169.254.169.254"
    METADATA_TIMEOUT: float = 2.0

    CONFIG_FILE: Path | None = None
    FAIL_FAST: bool = True
    VERBOSE: bool = False

    model_config = SettingsConfigDict(env_prefix="ELB_SYNC_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> AppSettings:
    """
    Creates a singleton instance of AppSettings.
    Uses lru_cache to ensure the .env file is read only once.
    """
    return AppSettings()
