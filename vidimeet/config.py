# vidimeet/config.py
from typing import List

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Core
    app_name: str = "Vidimeet"
    debug: bool = False
    log_level: str = "INFO"

    # Listeners
    host: str = "0.0.0.0"
    port: int = Field(
        default=3000,
        validation_alias=AliasChoices("VIDIMEET_PORT", "PORT"),
    )
    http_port: int = 3001

    # WebSocket
    max_message_size: int = 2**20   # bytes

    # HTTP
    cors_origins: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_prefix="VIDIMEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
