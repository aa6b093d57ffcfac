"""Dropbox HTTP API client."""

import time
from dataclasses import dataclass, field

import httpx

from wedding_gallery.domain.photos import (
    FolderPage,
    StorageEntry,
    ThumbnailFailure,
    ThumbnailResult,
    ThumbnailSuccess,
)
from wedding_gallery.services.gallery import StorageClient

THUMBNAIL_FORMAT = "jpeg"
THUMBNAIL_SIZE = "w256h256"
# Refresh access tokens this many seconds before Dropbox expires them.
TOKEN_EXPIRY_MARGIN = 60


class DropboxCredentialsError(RuntimeError):
    """Raised when no usable Dropbox credentials are configured."""


@dataclass
class HttpxDropboxClient(StorageClient):
    """Dropbox client implemented with httpx."""

    http_client: httpx.AsyncClient
    access_token: str | None = None
    refresh_token: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    api_url: str = "https://api.dropboxapi.com/2"
    content_url: str = "https://content.dropboxapi.com/2"
    oauth_url: str = "https://api.dropbox.com/oauth2/token"
    _token_expires_at: float | None = field(default=None, init=False, repr=False)

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        access_token: str | None = None,
        refresh_token: str | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        api_url: str = "https://api.dropboxapi.com/2",
        content_url: str = "https://content.dropboxapi.com/2",
        oauth_url: str = "https://api.dropbox.com/oauth2/token",
    ) -> "HttpxDropboxClient":
        """Create a Dropbox client with a managed httpx session."""
        return cls(
            http_client=httpx.AsyncClient(),
            access_token=access_token,
            refresh_token=refresh_token,
            client_id=client_id,
            client_secret=client_secret,
            api_url=api_url,
            content_url=content_url,
            oauth_url=oauth_url,
        )

    @property
    def is_configured(self) -> bool:
        """Return true when a token or refresh credentials are available."""
        return bool(self.access_token or self._can_refresh())

    async def list_folder(self, path: str) -> FolderPage:
        """List a folder without recursing into subfolders."""
        payload = await self._rpc(
            f"{self.api_url}/files/list_folder",
            {"path": path, "recursive": False},
        )
        return _parse_folder_page(payload)

    async def list_folder_continue(self, cursor: str) -> FolderPage:
        """Continue a paginated folder listing."""
        payload = await self._rpc(
            f"{self.api_url}/files/list_folder/continue", {"cursor": cursor}
        )
        return _parse_folder_page(payload)

    async def get_thumbnail_batch(self, paths: list[str]) -> list[ThumbnailResult]:
        """Render JPEG thumbnails for a batch of files."""
        payload = await self._rpc(
            f"{self.content_url}/files/get_thumbnail_batch",
            {
                "entries": [
                    {
                        "path": path,
                        "format": {".tag": THUMBNAIL_FORMAT},
                        "size": {".tag": THUMBNAIL_SIZE},
                    }
                    for path in paths
                ]
            },
            timeout=30,
        )
        return [_parse_thumbnail_entry(entry) for entry in payload.get("entries", [])]

    async def get_temporary_link(self, path: str) -> str:
        """Return a four-hour direct link for a file."""
        payload = await self._rpc(
            f"{self.api_url}/files/get_temporary_link", {"path": path}
        )
        return str(payload["link"])

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _rpc(
        self, url: str, body: dict[str, object], timeout: float = 15
    ) -> dict[str, object]:
        response = await self._post_authorized(url, body, timeout)
        if response.status_code == httpx.codes.UNAUTHORIZED and self._can_refresh():
            # Static or cached token expired; exchange the refresh token once.
            self.access_token = None
            self._token_expires_at = None
            response = await self._post_authorized(url, body, timeout)
        response.raise_for_status()
        return response.json()

    async def _post_authorized(
        self, url: str, body: dict[str, object], timeout: float
    ) -> httpx.Response:
        token = await self._get_access_token()
        return await self.http_client.post(
            url,
            json=body,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
        )

    async def _get_access_token(self) -> str:
        if self.access_token and not self._token_expired():
            return self.access_token
        if not self._can_refresh():
            raise DropboxCredentialsError("Dropbox credentials are not configured")
        response = await self.http_client.post(
            self.oauth_url,
            data={
                "grant_type": "refresh_token",
                "refresh_token": self.refresh_token,
            },
            auth=(self.client_id, self.client_secret),
            timeout=15,
        )
        response.raise_for_status()
        payload = response.json()
        self.access_token = str(payload["access_token"])
        expires_in = payload.get("expires_in")
        self._token_expires_at = (
            time.monotonic() + float(expires_in) - TOKEN_EXPIRY_MARGIN
            if expires_in
            else None
        )
        return self.access_token

    def _can_refresh(self) -> bool:
        return bool(self.refresh_token and self.client_id and self.client_secret)

    def _token_expired(self) -> bool:
        if self._token_expires_at is None:
            return False
        return time.monotonic() >= self._token_expires_at


def _parse_folder_page(payload: dict[str, object]) -> FolderPage:
    entries = payload.get("entries", [])
    return FolderPage(
        entries=[_parse_entry(entry) for entry in entries if isinstance(entry, dict)],
        cursor=payload.get("cursor"),
        has_more=bool(payload.get("has_more", False)),
    )


def _parse_entry(entry: dict[str, object]) -> StorageEntry:
    return StorageEntry(
        tag=str(entry.get(".tag", "")),
        id=str(entry.get("id", "")),
        name=str(entry.get("name", "")),
        path_display=entry.get("path_display"),
        path_lower=entry.get("path_lower"),
        size=entry.get("size"),
        client_modified=entry.get("client_modified"),
    )


def _parse_thumbnail_entry(entry: dict[str, object]) -> ThumbnailResult:
    if entry.get(".tag") == "success":
        metadata = entry.get("metadata") or {}
        path_lower = metadata.get("path_lower") if isinstance(metadata, dict) else None
        thumbnail = entry.get("thumbnail")
        if path_lower and thumbnail:
            return ThumbnailSuccess(
                path_lower=str(path_lower), thumbnail=str(thumbnail)
            )
        return ThumbnailFailure(reason="incomplete_success_entry")
    failure = entry.get("failure")
    if isinstance(failure, dict):
        return ThumbnailFailure(reason=str(failure.get(".tag", "unknown")))
    return ThumbnailFailure(reason=str(entry.get(".tag", "unknown")))
