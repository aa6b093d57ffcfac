"""Signed session cookie handling and the per-request session dependency."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fastapi import Request, Response
from itsdangerous import BadData, URLSafeTimedSerializer

from wedding_gallery.domain.sessions import GallerySession  # noqa: TC001

if TYPE_CHECKING:
    from wedding_gallery.containers import AppContainer

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "gallery_session"


def resolve_session_secret(secret: str | None) -> str:
    """Return the configured secret or a random one that lasts until restart."""
    if secret:
        return secret
    logger.warning(
        "SESSION_SECRET not set; using a random secret. "
        "Sessions will not survive a restart."
    )
    return secrets.token_urlsafe(32)


@dataclass
class SessionCookie:
    """Reads and writes the cookie carrying the signed session id."""

    serializer: URLSafeTimedSerializer
    max_age_seconds: int
    secure: bool = False

    @classmethod
    def create(
        cls, secret: str, max_age_seconds: int, secure: bool = False
    ) -> SessionCookie:
        """Create a cookie codec bound to a signing secret."""
        return cls(
            serializer=URLSafeTimedSerializer(secret, salt="wedding_gallery.session"),
            max_age_seconds=max_age_seconds,
            secure=secure,
        )

    def read(self, request: Request) -> str | None:
        """Return the session id from a valid, unexpired cookie."""
        token = request.cookies.get(SESSION_COOKIE_NAME)
        if not token:
            return None
        try:
            session_id = self.serializer.loads(token, max_age=self.max_age_seconds)
        except BadData:
            logger.debug("Ignoring invalid session cookie")
            return None
        return session_id if isinstance(session_id, str) else None

    def write(self, response: Response, session_id: str) -> None:
        """Attach the signed session id to a response."""
        response.set_cookie(
            SESSION_COOKIE_NAME,
            self.serializer.dumps(session_id),
            max_age=self.max_age_seconds,
            httponly=True,
            secure=self.secure,
            samesite="lax",
        )

    def clear(self, response: Response) -> None:
        """Expire the session cookie."""
        response.delete_cookie(
            SESSION_COOKIE_NAME, httponly=True, secure=self.secure, samesite="lax"
        )


async def get_session(request: Request) -> GallerySession:
    """Resolve the visitor's session for the current request."""
    container: AppContainer = request.app.state.container
    session_id = container.session_cookie.read(request)
    return await container.authorization_service.open(session_id)
