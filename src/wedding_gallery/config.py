"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    gallery_sections: str | None = None
    dropbox_folders: str | None = None
    dropbox_access_token: str | None = None
    dropbox_refresh_token: str | None = None
    dropbox_client_id: str | None = None
    dropbox_client_secret: str | None = None
    dropbox_api_url: str = "https://api.dropboxapi.com/2"
    dropbox_content_url: str = "https://content.dropboxapi.com/2"
    dropbox_oauth_url: str = "https://api.dropbox.com/oauth2/token"
    session_secret: str | None = None
    session_max_age_seconds: int = 60 * 60 * 24
    cors_origin: str = "http://localhost:5173"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        """Return true when running with production hardening."""
        return self.environment == "production"


def parse_folder_list(raw: str | None) -> list[str]:
    """Parse the positional, comma-separated folder list.

    Blank positions are kept as empty strings so later entries stay aligned
    with their sections.
    """
    if raw is None:
        return []
    return [chunk.strip() for chunk in raw.split(",")]
