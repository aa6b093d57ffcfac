"""Domain models for gallery sections."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Section:
    """A passphrase-protected photo collection bound to one storage folder."""

    id: str
    name: str
    passphrase_hash: str
    storage_prefix: str


@dataclass(frozen=True)
class SectionSummary:
    """Public view of a section; never carries the hash or the folder."""

    id: str
    name: str
