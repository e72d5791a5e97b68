"""Settings — environment-driven configuration via pydantic-settings.

Every field can be set through a ``GESEDELS_``-prefixed environment variable
or a ``.env`` file; the command line overrides ``addr``, ``path`` and
``log_level`` on top.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_prefix="GESEDELS_", env_file=".env", case_sensitive=False)

    # Server
    addr: str = "127.0.0.1:8080"

    # Database
    path: str = "./gesedels.db"

    # Observability
    log_level: str = "INFO"
    log_format: str = "text"

    @field_validator("addr")
    @classmethod
    def check_addr(cls, v: str) -> str:
        host, sep, port = v.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ValueError(f"address must look like host:port, got {v!r}")
        return v

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, v: str) -> str:
        if v.upper() not in _LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(_LOG_LEVELS).lower()}, got {v!r}")
        return v

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        if v not in ("text", "json"):
            raise ValueError(f"log format must be 'text' or 'json', got {v!r}")
        return v

    @property
    def host(self) -> str:
        return self.addr.rpartition(":")[0]

    @property
    def port(self) -> int:
        return int(self.addr.rpartition(":")[2])


@lru_cache
def get_settings() -> Settings:
    return Settings()
