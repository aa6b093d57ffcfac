"""Domain models for photos and storage provider results."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Photo:
    """Projection of an image file stored with the provider."""

    id: str
    name: str
    path: str
    size: int | None = None
    modified_time: str | None = None
    thumbnail_url: str | None = None
    download_url: str | None = None
    preview_url: str | None = None


@dataclass(frozen=True)
class StorageEntry:
    """Single entry returned by a folder listing."""

    tag: str
    id: str
    name: str
    path_display: str | None
    path_lower: str | None
    size: int | None = None
    client_modified: str | None = None


@dataclass(frozen=True)
class FolderPage:
    """One page of a folder listing."""

    entries: list[StorageEntry]
    cursor: str | None
    has_more: bool


@dataclass(frozen=True)
class ThumbnailSuccess:
    """Thumbnail batch entry that resolved to image data."""

    path_lower: str
    thumbnail: str


@dataclass(frozen=True)
class ThumbnailFailure:
    """Thumbnail batch entry the provider could not render."""

    reason: str


ThumbnailResult = ThumbnailSuccess | ThumbnailFailure
