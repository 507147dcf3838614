import os

from pathlib import Path
from typing import Any, Dict, List

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def model_post_init(self, __context: Any) -> None:
        """Pick up the legacy Bungee key name when the Socket one is unset."""

        super().model_post_init(__context)

        if not self.socket_api_key:
            fallback = os.getenv("BUNGEE_API_KEY")
            if fallback:
                object.__setattr__(self, "socket_api_key", fallback)

    log_level: str = Field(default="INFO", description="Logging level")

    # Socket API
    socket_api_key: str = Field(
        default="",
        description="Socket API key sent as the API-KEY header",
        validation_alias=AliasChoices("socket_api_key", "SOCKET_API_KEY"),
    )
    socket_base_url: str = Field(
        default="https://api.socket.tech",
        description="Base URL for the Socket API",
    )
    request_timeout_seconds: int = Field(default=20, ge=1, description="Request timeout")

    # Route execution
    status_check_interval_ms: int = Field(
        default=10000,
        ge=0,
        description="How often to poll the route status while a step is pending (milliseconds)",
    )
    socket_extra_allowed_addresses: str = Field(
        default="",
        description="Comma separated chain:address pairs accepted as routed-funds destinations",
    )

    @property
    def has_socket_key(self) -> bool:
        return bool(self.socket_api_key)

    @property
    def extra_allowed_addresses(self) -> Dict[int, List[str]]:
        """Parse ``socket_extra_allowed_addresses`` into a chain -> addresses map."""
        parsed: Dict[int, List[str]] = {}
        for entry in self.socket_extra_allowed_addresses.split(","):
            entry = entry.strip()
            if not entry:
                continue
            chain, sep, address = entry.partition(":")
            if not sep or not chain.strip().isdigit() or not address.strip():
                raise ValueError(f"Invalid allow-list entry {entry!r}; expected chain:address")
            parsed.setdefault(int(chain), []).append(address.strip())
        return parsed


# Global settings instance
settings = Settings()
