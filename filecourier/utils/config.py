"""
Configuration management for filecourier.

Uses pydantic-settings to load configuration from environment variables
and .env files.
"""

from functools import lru_cache
from pathlib import Path
from typing import Dict, Literal, Optional

import httpx
from pydantic_settings import BaseSettings, SettingsConfigDict

from filecourier.errors import FatalConfigError
from filecourier.utils.helpers import parse_mapping

UploaderKind = Literal["webhook", "workspace"]


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Watch Configuration
    watch_dir: Optional[Path] = None
    ignore_dotfiles: bool = True
    queue_poll_interval: float = 1.0  # seconds

    # Destination Selection
    uploader: Optional[UploaderKind] = None

    # Webhook Configuration
    webhook_url: Optional[str] = None

    # Workspace API Configuration
    workspace_token: Optional[str] = None
    workspace_api_url: str = "https://slack.com/api"
    workspace_channel: Optional[str] = None
    workspace_channel_map: str = ""
    workspace_announce: bool = False

    # Transport Configuration
    http_timeout: float = 30.0  # seconds

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def get_channel_map(self) -> Dict[str, str]:
        """Parse the context to channel mapping."""
        try:
            return parse_mapping(self.workspace_channel_map)
        except ValueError as e:
            raise FatalConfigError(f"invalid WORKSPACE_CHANNEL_MAP: {e}") from e

    def get_uploader_kind(self) -> UploaderKind:
        """
        Work out which destination to use.

        An explicit ``uploader`` wins; otherwise a webhook URL selects the
        webhook and a workspace token selects the workspace API.

        Raises:
            FatalConfigError: no destination, or its credentials are missing
        """
        kind = self.uploader
        if kind is None:
            if self.webhook_url:
                kind = "webhook"
            elif self.workspace_token:
                kind = "workspace"
            else:
                raise FatalConfigError(
                    "no destination configured: set WEBHOOK_URL or WORKSPACE_TOKEN"
                )

        if kind == "webhook" and not self.webhook_url:
            raise FatalConfigError("UPLOADER=webhook requires WEBHOOK_URL")
        if kind == "workspace" and not self.workspace_token:
            raise FatalConfigError("UPLOADER=workspace requires WORKSPACE_TOKEN")

        return kind

    def get_webhook_url(self) -> str:
        """Return WEBHOOK_URL once it parses as an http(s) URL."""
        return check_url("WEBHOOK_URL", self.webhook_url)

    def get_workspace_api_url(self) -> str:
        """Return WORKSPACE_API_URL once it parses as an http(s) URL."""
        return check_url("WORKSPACE_API_URL", self.workspace_api_url)


def check_url(setting: str, value: Optional[str]) -> str:
    """
    Validate a destination URL at startup.

    Raises:
        FatalConfigError: missing, unparsable, not http(s), or without a host
    """
    if not value:
        raise FatalConfigError(f"{setting} not provided")

    try:
        url = httpx.URL(value)
    except httpx.InvalidURL as e:
        raise FatalConfigError(f"invalid {setting}: {e}") from e

    if url.scheme not in ("http", "https") or not url.host:
        raise FatalConfigError(f"{setting} must be an http(s) URL with a host")

    return value


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
