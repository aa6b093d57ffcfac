"""Photo listing, thumbnail and link endpoints for unlocked sections."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from wedding_gallery.api.models import PhotoUrlRequest, ThumbnailsRequest  # noqa: TC001
from wedding_gallery.api.sessions import get_session
from wedding_gallery.domain.errors import (
    AuthorizationError,
    InvalidRequestError,
    SectionNotFoundError,
)
from wedding_gallery.domain.sessions import GallerySession  # noqa: TC001
from wedding_gallery.services.path_scope import require_paths_in_section

if TYPE_CHECKING:
    from wedding_gallery.containers import AppContainer
    from wedding_gallery.domain.photos import Photo
    from wedding_gallery.domain.sections import Section
    from wedding_gallery.services.gallery import GalleryOverview

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/gallery", tags=["gallery"])


@router.get("/overview")
async def gallery_overview(
    request: Request, session: GallerySession = Depends(get_session)
) -> dict[str, object]:
    """Summarize every section the session has unlocked."""
    container: AppContainer = request.app.state.container
    authorized = container.authorization_service.list_authorized(session)
    galleries = await container.gallery_service.overview(authorized)
    logger.info(
        "Gallery overview built",
        extra={
            "gallery_count": len(galleries),
            "error_count": sum(1 for gallery in galleries if gallery.error),
        },
    )
    return {"galleries": [_serialize_overview(gallery) for gallery in galleries]}


@router.get("/{section_id}/photos")
async def list_photos(
    section_id: str, request: Request, session: GallerySession = Depends(get_session)
) -> dict[str, object]:
    """List the photos of an unlocked section."""
    container: AppContainer = request.app.state.container
    _require_authorized(container, session, section_id)
    section = _require_section(container, section_id)
    photos = await container.gallery_service.list_photos(section.storage_prefix)
    return {
        "section": {"id": section.id, "name": section.name},
        "photos": [_serialize_photo(photo) for photo in photos],
        "count": len(photos),
    }


@router.post("/{section_id}/photo-url")
async def photo_url(
    section_id: str,
    payload: PhotoUrlRequest,
    request: Request,
    session: GallerySession = Depends(get_session),
) -> dict[str, object]:
    """Return direct preview and download links for one photo."""
    container: AppContainer = request.app.state.container
    _require_authorized(container, session, section_id)
    if not payload.photo_path:
        raise InvalidRequestError("Photo path is required")
    section = _require_section(container, section_id)
    require_paths_in_section(section, [payload.photo_path])
    urls = await container.gallery_service.get_photo_urls(payload.photo_path)
    return {
        "photoPath": payload.photo_path,
        "downloadUrl": urls.download_url,
        "previewUrl": urls.preview_url,
    }


@router.post("/{section_id}/thumbnails")
async def thumbnails(
    section_id: str,
    payload: ThumbnailsRequest,
    request: Request,
    session: GallerySession = Depends(get_session),
) -> dict[str, object]:
    """Return data-URI thumbnails for a batch of photos in one section."""
    container: AppContainer = request.app.state.container
    _require_authorized(container, session, section_id)
    if not isinstance(payload.paths, list):
        raise InvalidRequestError("Paths array is required")
    section = _require_section(container, section_id)
    require_paths_in_section(section, payload.paths)
    result = await container.gallery_service.get_thumbnail_batch(payload.paths)
    return {"thumbnails": result}


def _require_authorized(
    container: AppContainer, session: GallerySession, section_id: str
) -> None:
    if not container.authorization_service.is_authorized(session, section_id):
        logger.warning("Unauthorized section access", extra={"section_id": section_id})
        raise AuthorizationError


def _require_section(container: AppContainer, section_id: str) -> Section:
    section = container.section_registry.get_by_id(section_id)
    if section is None:
        raise SectionNotFoundError
    return section


def _serialize_photo(photo: Photo) -> dict[str, object]:
    data: dict[str, object] = {
        "id": photo.id,
        "name": photo.name,
        "path": photo.path,
        "size": photo.size,
        "modifiedTime": photo.modified_time,
    }
    optional = {
        "thumbnailUrl": photo.thumbnail_url,
        "downloadUrl": photo.download_url,
        "previewUrl": photo.preview_url,
    }
    data.update({key: value for key, value in optional.items() if value})
    return data


def _serialize_overview(gallery: GalleryOverview) -> dict[str, object]:
    data: dict[str, object] = {
        "id": gallery.id,
        "name": gallery.name,
        "photoCount": gallery.photo_count,
        "previewPhoto": (
            _serialize_photo(gallery.preview_photo) if gallery.preview_photo else None
        ),
    }
    if gallery.error:
        data["error"] = gallery.error
    return data
