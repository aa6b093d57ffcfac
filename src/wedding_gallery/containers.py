"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from wedding_gallery.adapters.dropbox_client import HttpxDropboxClient
from wedding_gallery.adapters.memory_session_store import InMemorySessionStore
from wedding_gallery.api.sessions import SessionCookie, resolve_session_secret
from wedding_gallery.app_logging import configure_logging
from wedding_gallery.config import Settings
from wedding_gallery.services.authorization import AuthorizationService
from wedding_gallery.services.gallery import GalleryService
from wedding_gallery.services.passphrases import PassphraseVerifier
from wedding_gallery.services.sections import SectionRegistry

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    section_registry: SectionRegistry
    passphrase_verifier: PassphraseVerifier
    authorization_service: AuthorizationService
    session_cookie: SessionCookie
    gallery_service: GalleryService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.environment)
    section_registry = SectionRegistry.load(
        resolved_settings.gallery_sections, resolved_settings.dropbox_folders
    )
    dropbox_client = HttpxDropboxClient.create(
        access_token=resolved_settings.dropbox_access_token,
        refresh_token=resolved_settings.dropbox_refresh_token,
        client_id=resolved_settings.dropbox_client_id,
        client_secret=resolved_settings.dropbox_client_secret,
        api_url=resolved_settings.dropbox_api_url,
        content_url=resolved_settings.dropbox_content_url,
        oauth_url=resolved_settings.dropbox_oauth_url,
    )
    if not dropbox_client.is_configured:
        logger.error("Dropbox credentials not configured; photo requests will fail")
    authorization_service = AuthorizationService(
        store=InMemorySessionStore(),
        ttl_seconds=resolved_settings.session_max_age_seconds,
    )
    session_cookie = SessionCookie.create(
        resolve_session_secret(resolved_settings.session_secret),
        max_age_seconds=resolved_settings.session_max_age_seconds,
        secure=resolved_settings.is_production,
    )
    gallery_service = GalleryService(client=dropbox_client, registry=section_registry)

    async def close_resources() -> None:
        await dropbox_client.close()

    return AppContainer(
        settings=resolved_settings,
        section_registry=section_registry,
        passphrase_verifier=PassphraseVerifier(section_registry),
        authorization_service=authorization_service,
        session_cookie=session_cookie,
        gallery_service=gallery_service,
        close_resources=close_resources,
    )
