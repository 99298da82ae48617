from __future__ import annotations
import logging
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class HashConnectSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="HASHCONNECT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = Field(default=False, description="Verbose lifecycle logging")
    log_level: str = Field(default="INFO", description="Level for the hashconnect logger")

    codec: Literal["json", "msgpack"] = Field(default="json", description="Envelope serialization")
    transport: Literal["memory", "zyre"] = Field(default="memory", description="Relay transport label")

    auto_acknowledge: bool = Field(
        default=True,
        description="Acknowledge every inbound message (except acks) to its sender",
    )
    extension_query_delay_ms: int = Field(
        default=50,
        ge=0,
        description="Delay before broadcasting the local wallet-extension query",
    )


def configure_logging(settings: Optional[HashConnectSettings] = None) -> None:
    """Set the package logger's level; debug wins over log_level."""
    settings = settings or HashConnectSettings()
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.getLogger("hashconnect").setLevel(level)
