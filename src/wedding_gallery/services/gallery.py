"""Gallery gateway over the storage provider."""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from wedding_gallery.domain.errors import UpstreamError
from wedding_gallery.domain.photos import (
    FolderPage,
    Photo,
    StorageEntry,
    ThumbnailResult,
    ThumbnailSuccess,
)
from wedding_gallery.domain.sections import Section
from wedding_gallery.services.sections import SectionRegistry

logger = logging.getLogger(__name__)

THUMBNAIL_BATCH_SIZE = 25
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".heic", ".heif")


class StorageClient(Protocol):
    """Interface for the storage provider API."""

    async def list_folder(self, path: str) -> FolderPage:
        """List the first page of a folder, non-recursively."""

    async def list_folder_continue(self, cursor: str) -> FolderPage:
        """Fetch the next page of a folder listing."""

    async def get_thumbnail_batch(self, paths: list[str]) -> list[ThumbnailResult]:
        """Render thumbnails for up to 25 files in one call."""

    async def get_temporary_link(self, path: str) -> str:
        """Return a short-lived direct link for a file."""


@dataclass(frozen=True)
class PhotoUrls:
    """Direct links for viewing and downloading a photo."""

    download_url: str
    preview_url: str


@dataclass(frozen=True)
class GalleryOverview:
    """Per-section summary shown on the landing page."""

    id: str
    name: str
    photo_count: int
    preview_photo: Photo | None
    error: str | None = None


def is_image_file(name: str) -> bool:
    """Return true when the file name has an allowed image extension."""
    return name.lower().endswith(IMAGE_EXTENSIONS)


def chunk_paths(paths: list[str], size: int = THUMBNAIL_BATCH_SIZE) -> list[list[str]]:
    """Split paths into provider-sized batches."""
    return [paths[start : start + size] for start in range(0, len(paths), size)]


@dataclass
class GalleryService:
    """Translates authorized requests into storage provider calls."""

    client: StorageClient
    registry: SectionRegistry
    batch_size: int = field(default=THUMBNAIL_BATCH_SIZE)

    async def list_photos(self, prefix: str) -> list[Photo]:
        """List image files directly inside ``prefix``, sorted by name."""
        try:
            entries = await self._list_all_entries(prefix)
        except Exception as exc:
            logger.exception("Failed to list photos", extra={"folder": prefix})
            raise UpstreamError("Failed to fetch photos") from exc
        photos = [
            _to_photo(entry)
            for entry in entries
            if entry.tag == "file" and is_image_file(entry.name)
        ]
        logger.info(
            "Photos listed",
            extra={
                "folder": prefix,
                "entry_count": len(entries),
                "photo_count": len(photos),
            },
        )
        return sorted(photos, key=lambda photo: (photo.name.casefold(), photo.name))

    async def get_thumbnail_batch(self, paths: list[str]) -> dict[str, str]:
        """Fetch thumbnails as data URIs keyed by the provider's lowercase path.

        Entries the provider fails to render are left out of the result.
        """
        thumbnails: dict[str, str] = {}
        for number, batch in enumerate(chunk_paths(paths, self.batch_size), start=1):
            try:
                results = await self.client.get_thumbnail_batch(batch)
            except Exception as exc:
                logger.exception(
                    "Thumbnail batch failed",
                    extra={"batch_number": number, "batch_size": len(batch)},
                )
                raise UpstreamError("Failed to fetch thumbnails") from exc
            thumbnails.update(_successful_thumbnails(results, number))
        if paths:
            logger.info(
                "Thumbnails fetched",
                extra={"requested": len(paths), "received": len(thumbnails)},
            )
        return thumbnails

    async def get_temporary_url(self, path: str) -> str:
        """Return a short-lived direct link for one photo."""
        try:
            return await self.client.get_temporary_link(path)
        except Exception as exc:
            logger.exception("Failed to get temporary link", extra={"path": path})
            raise UpstreamError("Failed to fetch photo URL") from exc

    async def get_photo_urls(self, path: str) -> PhotoUrls:
        """Resolve the preview and download links for a photo."""
        url = await self.get_temporary_url(path)
        return PhotoUrls(download_url=url, preview_url=url)

    async def overview(self, section_ids: Iterable[str]) -> list[GalleryOverview]:
        """Summarize authorized sections in the given order.

        Unknown ids are skipped and failures degrade per section.
        """
        sections: list[Section] = []
        seen: set[str] = set()
        missing: list[str] = []
        for section_id in section_ids:
            if section_id in seen:
                continue
            seen.add(section_id)
            section = self.registry.get_by_id(section_id)
            if section is None:
                missing.append(section_id)
            else:
                sections.append(section)
        if missing:
            logger.warning(
                "Authorized sections missing from configuration",
                extra={"section_ids": missing},
            )
        return list(
            await asyncio.gather(*(self._summarize(section) for section in sections))
        )

    async def _summarize(self, section: Section) -> GalleryOverview:
        try:
            photos = await self.list_photos(section.storage_prefix)
        except UpstreamError:
            return GalleryOverview(
                id=section.id,
                name=section.name,
                photo_count=0,
                preview_photo=None,
                error="Failed to load photos",
            )
        return GalleryOverview(
            id=section.id,
            name=section.name,
            photo_count=len(photos),
            preview_photo=photos[0] if photos else None,
        )

    async def _list_all_entries(self, prefix: str) -> list[StorageEntry]:
        page = await self.client.list_folder(prefix)
        entries = list(page.entries)
        while page.has_more and page.cursor:
            page = await self.client.list_folder_continue(page.cursor)
            entries.extend(page.entries)
        return entries


def _to_photo(entry: StorageEntry) -> Photo:
    return Photo(
        id=entry.id,
        name=entry.name,
        path=entry.path_display or entry.path_lower or "",
        size=entry.size,
        modified_time=entry.client_modified,
    )


def _successful_thumbnails(
    results: list[ThumbnailResult], batch_number: int
) -> dict[str, str]:
    thumbnails: dict[str, str] = {}
    for result in results:
        if isinstance(result, ThumbnailSuccess):
            thumbnails[result.path_lower] = f"data:image/jpeg;base64,{result.thumbnail}"
        else:
            logger.warning(
                "Thumbnail entry failed",
                extra={"batch_number": batch_number, "reason": result.reason},
            )
    return thumbnails
