"""
Configuration for Herald.

Settings come from the environment:

    HERALD_DSN              DSN of the "default" channel
    HERALD_DSN_<NAME>       DSN of the "<name>" channel (name lowercased)
    HERALD_HTTP_TIMEOUT     HTTP timeout in seconds (default 30)
    HERALD_RETRY_PERIOD     Cooldown for failed composite children (default 0)
    HERALD_NULL_CATCH_ALL   "true" makes the null factory claim every scheme
    HERALD_LOG_LEVEL        Logging level (default INFO)

Security:
    DSNs embed credentials, so they are stored as SecretStr to prevent
    accidental logging. Access the value with `.get_secret_value()`.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Mapping

import httpx
from pydantic import BaseModel, Field, SecretStr, field_validator

from .events import EventDispatcher
from .transports import Transports, TransportResolver

logger = logging.getLogger(__name__)

ENV_PREFIX = "HERALD_"
CHANNEL_PREFIX = f"{ENV_PREFIX}DSN_"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class HeraldSettings(BaseModel):
    """
    Application settings model.

    Used for type-safe settings access.
    """

    channels: dict[str, SecretStr] = Field(
        default_factory=dict, description="Channel name -> DSN string"
    )
    http_timeout: float = Field(30.0, gt=0, description="HTTP timeout in seconds")
    retry_period: float = Field(0.0, ge=0, description="Composite child cooldown")
    null_catch_all: bool = Field(False, description="Null factory claims every scheme")
    log_level: str = Field("INFO", description="Logging level name")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return value

    def dsns(self) -> dict[str, str]:
        """Channel DSNs with secrets revealed (for resolution only)."""
        return {name: dsn.get_secret_value() for name, dsn in self.channels.items()}


def settings_from_env(environ: Mapping[str, str] | None = None) -> HeraldSettings:
    """Build settings from an environment mapping (os.environ by default)."""
    environ = os.environ if environ is None else environ

    channels: dict[str, str] = {}
    if environ.get(f"{ENV_PREFIX}DSN"):
        channels["default"] = environ[f"{ENV_PREFIX}DSN"]
    for key, value in environ.items():
        if key.startswith(CHANNEL_PREFIX) and value:
            channels[key[len(CHANNEL_PREFIX):].lower()] = value

    return HeraldSettings(
        channels=channels,
        http_timeout=float(environ.get(f"{ENV_PREFIX}HTTP_TIMEOUT", "30.0")),
        retry_period=float(environ.get(f"{ENV_PREFIX}RETRY_PERIOD", "0")),
        null_catch_all=environ.get(f"{ENV_PREFIX}NULL_CATCH_ALL", "false").lower() == "true",
        log_level=environ.get(f"{ENV_PREFIX}LOG_LEVEL", "INFO"),
    )


@lru_cache()
def get_settings() -> HeraldSettings:
    """
    Get application settings from environment.

    Uses lru_cache for singleton pattern.
    """
    return settings_from_env()


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with Herald's format."""
    logging.basicConfig(level=getattr(logging, level.upper()), format=LOG_FORMAT)


def build_transports(
    settings: HeraldSettings,
    dispatcher: EventDispatcher | None = None,
    client: httpx.Client | None = None,
) -> Transports:
    """
    Resolve every configured channel.

    Raises:
        ConfigurationError: If any channel DSN is invalid
    """
    if client is None:
        client = httpx.Client(timeout=settings.http_timeout)

    resolver = TransportResolver(
        TransportResolver.default_factories(
            dispatcher, client, catch_all=settings.null_catch_all
        ),
        retry_period=settings.retry_period,
    )
    transports = resolver.from_strings(settings.dsns())
    logger.info(f"Configured {len(transports)} channel(s): {transports.describe()}")
    return transports


# Global instance (initialized on first access)
_transports: Transports | None = None


def get_transports() -> Transports:
    """
    Get the transports configured from the environment.

    Resolves all channels on first call.
    """
    global _transports
    if _transports is None:
        _transports = build_transports(get_settings())
    return _transports


def reset_transports() -> None:
    """
    Reset the global transports and cached settings (for testing).
    """
    global _transports
    _transports = None
    get_settings.cache_clear()
