"""Session-scoped authorization state."""

import logging
import secrets
from dataclasses import dataclass
from typing import Protocol

from wedding_gallery.domain.errors import SessionPersistenceError
from wedding_gallery.domain.sessions import GallerySession

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    """Persistence interface for visitor sessions."""

    async def load(self, session_id: str) -> list[str] | None:
        """Return the authorized section ids for a live session, if present."""

    async def save(
        self, session_id: str, authorized_sections: list[str], ttl_seconds: int
    ) -> None:
        """Persist the authorized ids, merging with what is already stored."""

    async def destroy(self, session_id: str) -> None:
        """Remove the session entirely."""


@dataclass
class AuthorizationService:
    """Grants, checks and revokes section access for a session."""

    store: SessionStore
    ttl_seconds: int

    async def open(self, session_id: str | None) -> GallerySession:
        """Resume a stored session or start a fresh, unsaved one."""
        if session_id:
            stored = await self.store.load(session_id)
            if stored is not None:
                return GallerySession(
                    id=session_id, authorized_sections=list(stored), is_new=False
                )
        return GallerySession(id=secrets.token_urlsafe(32))

    def is_authorized(self, session: GallerySession, section_id: str) -> bool:
        """Return true when the session has unlocked the section."""
        return section_id in session.authorized_sections

    def grant(self, session: GallerySession, section_id: str) -> bool:
        """Add a section to the session; return false if it was already there.

        The grant is not durable until ``commit`` succeeds.
        """
        if section_id in session.authorized_sections:
            return False
        session.authorized_sections.append(section_id)
        return True

    def list_authorized(self, session: GallerySession) -> list[str]:
        """Return the session's authorized section ids in unlock order."""
        return list(session.authorized_sections)

    async def commit(self, session: GallerySession) -> None:
        """Persist the session; raise SessionPersistenceError on failure."""
        try:
            await self.store.save(
                session.id, list(session.authorized_sections), self.ttl_seconds
            )
        except Exception as exc:
            logger.exception(
                "Failed to save session",
                extra={"section_count": len(session.authorized_sections)},
            )
            raise SessionPersistenceError("Verification failed") from exc
        session.is_new = False

    async def revoke_all(self, session: GallerySession) -> None:
        """Destroy the session; raise SessionPersistenceError on failure."""
        try:
            await self.store.destroy(session.id)
        except Exception as exc:
            logger.exception("Failed to destroy session")
            raise SessionPersistenceError("Logout failed") from exc
        session.authorized_sections.clear()
        session.is_new = True
