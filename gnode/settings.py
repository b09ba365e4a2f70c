# gnode/settings.py
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Manages the application's settings, loading from environment variables
    and .env files. Node identity is never configured here; it arrives with `init`.
    """
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8')

    # Logging settings (always written to stderr; stdout carries the protocol)
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s [%(levelname)s] (%(name)s) %(message)s"

    # Node settings
    NODE_VARIANT: Literal["echo", "unique-ids", "broadcast"] = "broadcast"
    MAX_LINE_BYTES: int = 1024 * 1024


# Create a single, globally accessible instance of the settings.
settings = Settings()
