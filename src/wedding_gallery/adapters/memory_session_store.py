"""In-memory session store with per-entry expiry."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from wedding_gallery.services.authorization import SessionStore


@dataclass
class _SessionEntry:
    authorized_sections: list[str]
    expires_at: datetime


@dataclass
class InMemorySessionStore(SessionStore):
    """Process-local session store; sessions do not survive restarts."""

    _entries: dict[str, _SessionEntry]

    def __init__(self) -> None:
        self._entries = {}

    async def load(self, session_id: str) -> list[str] | None:
        """Return the authorized ids if the session exists and hasn't expired."""
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(session_id, None)
            return None
        return list(entry.authorized_sections)

    async def save(
        self, session_id: str, authorized_sections: list[str], ttl_seconds: int
    ) -> None:
        """Merge ids into the stored session, reset its TTL, drop expired entries."""
        now = datetime.now(tz=UTC)
        self._evict_expired(now)
        current = await self.load(session_id) or []
        merged = current + [
            section_id
            for section_id in authorized_sections
            if section_id not in current
        ]
        self._entries[session_id] = _SessionEntry(
            authorized_sections=merged,
            expires_at=now + timedelta(seconds=ttl_seconds),
        )

    async def destroy(self, session_id: str) -> None:
        """Drop the session if present."""
        self._entries.pop(session_id, None)

    def _evict_expired(self, now: datetime) -> None:
        expired = [
            session_id
            for session_id, entry in self._entries.items()
            if now >= entry.expires_at
        ]
        for session_id in expired:
            del self._entries[session_id]
