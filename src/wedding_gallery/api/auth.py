"""Passphrase unlock and session endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, Response

from wedding_gallery.api.models import VerifyRequest  # noqa: TC001
from wedding_gallery.api.sessions import get_session
from wedding_gallery.domain.errors import (
    AuthenticationError,
    InvalidRequestError,
    SectionNotFoundError,
)
from wedding_gallery.domain.sessions import GallerySession  # noqa: TC001

if TYPE_CHECKING:
    from wedding_gallery.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/sections")
async def list_sections(
    request: Request, session: GallerySession = Depends(get_session)
) -> dict[str, object]:
    """Return configured sections with the visitor's unlock state."""
    container: AppContainer = request.app.state.container
    authorization = container.authorization_service
    sections = [
        {
            "id": summary.id,
            "name": summary.name,
            "isAuthorized": authorization.is_authorized(session, summary.id),
        }
        for summary in container.section_registry.get_all()
    ]
    return {"sections": sections}


@router.post("/verify")
async def verify_passphrase(
    payload: VerifyRequest,
    request: Request,
    response: Response,
    session: GallerySession = Depends(get_session),
) -> dict[str, object]:
    """Unlock a section for the current session."""
    container: AppContainer = request.app.state.container
    if not payload.section_id or not payload.passphrase:
        logger.warning(
            "Verification request missing fields",
            extra={
                "has_section_id": bool(payload.section_id),
                "has_passphrase": bool(payload.passphrase),
            },
        )
        raise InvalidRequestError("Section ID and passphrase are required")

    section = container.section_registry.get_by_id(payload.section_id)
    if section is None:
        await container.passphrase_verifier.verify(
            payload.section_id, payload.passphrase
        )
        raise SectionNotFoundError
    if not await container.passphrase_verifier.verify(section.id, payload.passphrase):
        raise AuthenticationError

    authorization = container.authorization_service
    if authorization.grant(session, section.id):
        logger.info(
            "Section access granted",
            extra={
                "section_id": section.id,
                "authorized_count": len(session.authorized_sections),
            },
        )
    await authorization.commit(session)
    container.session_cookie.write(response, session.id)
    return {
        "success": True,
        "message": "Access granted",
        "section": {"id": section.id, "name": section.name},
    }


@router.get("/status")
async def auth_status(
    request: Request, session: GallerySession = Depends(get_session)
) -> dict[str, object]:
    """Report which sections the session has unlocked."""
    container: AppContainer = request.app.state.container
    authorized = container.authorization_service.list_authorized(session)
    return {"isAuthenticated": bool(authorized), "authorizedSections": authorized}


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    session: GallerySession = Depends(get_session),
) -> dict[str, object]:
    """Destroy the session and its grants."""
    container: AppContainer = request.app.state.container
    logger.info(
        "Logout initiated",
        extra={"authorized_count": len(session.authorized_sections)},
    )
    await container.authorization_service.revoke_all(session)
    container.session_cookie.clear(response)
    return {"success": True, "message": "Logged out successfully"}
