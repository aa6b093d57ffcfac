"""Shared test fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field

import bcrypt
import httpx
import pytest
from fastapi.testclient import TestClient

from wedding_gallery.adapters.dropbox_client import HttpxDropboxClient
from wedding_gallery.adapters.memory_session_store import InMemorySessionStore
from wedding_gallery.api.app import create_app
from wedding_gallery.api.sessions import SessionCookie
from wedding_gallery.config import Settings
from wedding_gallery.containers import AppContainer
from wedding_gallery.domain.photos import (
    FolderPage,
    StorageEntry,
    ThumbnailFailure,
    ThumbnailResult,
    ThumbnailSuccess,
)
from wedding_gallery.domain.sections import Section
from wedding_gallery.services.authorization import AuthorizationService
from wedding_gallery.services.gallery import GalleryService, StorageClient
from wedding_gallery.services.passphrases import PassphraseVerifier
from wedding_gallery.services.sections import SectionRegistry

PASSPHRASES = {"ceremony": "rings", "reception": "cake", "party": "dance"}
PREFIXES = {
    "ceremony": "/wedding/ceremony",
    "reception": "/wedding/reception",
    "party": "/party/photos",
}


def _fast_hash(passphrase: str) -> str:
    return bcrypt.hashpw(passphrase.encode(), bcrypt.gensalt(4)).decode()


HASHES = {section_id: _fast_hash(value) for section_id, value in PASSPHRASES.items()}


def file_entry(folder: str, name: str, size: int = 1024) -> StorageEntry:
    """Build a Dropbox-style file entry inside ``folder``."""
    path = f"{folder}/{name}"
    return StorageEntry(
        tag="file",
        id=f"id:{name}",
        name=name,
        path_display=path,
        path_lower=path.lower(),
        size=size,
        client_modified="2024-06-01T12:00:00Z",
    )


@dataclass
class FakeDropboxClient(StorageClient):
    """In-memory storage client that records every call."""

    folders: dict[str, list[StorageEntry]] = field(default_factory=dict)
    failing_folders: set[str] = field(default_factory=set)
    unrenderable: set[str] = field(default_factory=set)
    page_size: int | None = None
    fail_thumbnails: bool = False
    list_calls: list[str] = field(default_factory=list)
    batch_calls: list[list[str]] = field(default_factory=list)
    link_calls: list[str] = field(default_factory=list)

    async def list_folder(self, path: str) -> FolderPage:
        self.list_calls.append(path)
        if path in self.failing_folders:
            raise httpx.ConnectError("connection refused")
        return self._page(path, 0)

    async def list_folder_continue(self, cursor: str) -> FolderPage:
        path, _, offset = cursor.rpartition("|")
        return self._page(path, int(offset))

    async def get_thumbnail_batch(self, paths: list[str]) -> list[ThumbnailResult]:
        self.batch_calls.append(list(paths))
        if self.fail_thumbnails:
            raise httpx.ReadTimeout("timed out")
        return [
            ThumbnailFailure(reason="unsupported_extension")
            if path in self.unrenderable
            else ThumbnailSuccess(path_lower=path.lower(), thumbnail="dGh1bWI=")
            for path in paths
        ]

    async def get_temporary_link(self, path: str) -> str:
        self.link_calls.append(path)
        return f"https://dl.example.com{path}"

    def _page(self, path: str, offset: int) -> FolderPage:
        entries = self.folders.get(path, [])
        size = self.page_size or len(entries) or 1
        chunk = entries[offset : offset + size]
        has_more = offset + size < len(entries)
        return FolderPage(
            entries=chunk,
            cursor=f"{path}|{offset + size}" if has_more else None,
            has_more=has_more,
        )


class FailingSessionStore(InMemorySessionStore):
    """Session store whose writes can be switched off."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_saves = False
        self.fail_destroy = False

    async def save(
        self, session_id: str, authorized_sections: list[str], ttl_seconds: int
    ) -> None:
        if self.fail_saves:
            raise ConnectionError("session backend unavailable")
        await super().save(session_id, authorized_sections, ttl_seconds)

    async def destroy(self, session_id: str) -> None:
        if self.fail_destroy:
            raise ConnectionError("session backend unavailable")
        await super().destroy(session_id)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        gallery_sections=",".join(
            f"{section_id.capitalize()}:{HASHES[section_id]}"
            for section_id in PASSPHRASES
        ),
        dropbox_folders=",".join(PREFIXES.values()),
        dropbox_access_token="dropbox-token",
        session_secret="test-secret",
        environment="test",
    )


@pytest.fixture
def make_entry() -> Callable[..., StorageEntry]:
    return file_entry


@pytest.fixture
def section_registry() -> SectionRegistry:
    return SectionRegistry(
        [
            Section(
                id=section_id,
                name=section_id.capitalize(),
                passphrase_hash=HASHES[section_id],
                storage_prefix=PREFIXES[section_id],
            )
            for section_id in PASSPHRASES
        ]
    )


@pytest.fixture
def dropbox_client() -> FakeDropboxClient:
    return FakeDropboxClient(
        folders={
            "/wedding/ceremony": [
                file_entry("/wedding/ceremony", "b.png"),
                file_entry("/wedding/ceremony", "A.JPG"),
                file_entry("/wedding/ceremony", "c.txt"),
                file_entry("/wedding/ceremony", "d.heic"),
            ],
            "/wedding/reception": [
                file_entry("/wedding/reception", "toast.jpg"),
            ],
            "/party/photos": [
                file_entry("/party/photos", "dance.webp"),
                file_entry("/party/photos", "cake.gif"),
            ],
        }
    )


@pytest.fixture
def session_store() -> FailingSessionStore:
    return FailingSessionStore()


@pytest.fixture
def authorization_service(
    session_store: FailingSessionStore,
) -> AuthorizationService:
    return AuthorizationService(store=session_store, ttl_seconds=3600)


@pytest.fixture
def gallery_service(
    dropbox_client: FakeDropboxClient, section_registry: SectionRegistry
) -> GalleryService:
    return GalleryService(client=dropbox_client, registry=section_registry)


@pytest.fixture
def container(
    settings: Settings,
    section_registry: SectionRegistry,
    authorization_service: AuthorizationService,
    gallery_service: GalleryService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        section_registry=section_registry,
        passphrase_verifier=PassphraseVerifier(section_registry),
        authorization_service=authorization_service,
        session_cookie=SessionCookie.create("test-secret", max_age_seconds=3600),
        gallery_service=gallery_service,
        close_resources=close_resources,
    )


@pytest.fixture
def client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))


@pytest.fixture
def unlock(client: TestClient) -> Callable[[str], None]:
    """Unlock a section for the test client's session."""

    def _unlock(section_id: str) -> None:
        response = client.post(
            "/api/auth/verify",
            json={"sectionId": section_id, "passphrase": PASSPHRASES[section_id]},
        )
        assert response.status_code == 200

    return _unlock


@pytest.fixture
def mock_dropbox() -> Callable[..., HttpxDropboxClient]:
    """Build an httpx Dropbox client backed by a MockTransport handler."""

    def _build(
        handler: Callable[[httpx.Request], httpx.Response], **kwargs: object
    ) -> HttpxDropboxClient:
        transport = httpx.MockTransport(handler)
        return HttpxDropboxClient(
            http_client=httpx.AsyncClient(transport=transport), **kwargs
        )

    return _build

