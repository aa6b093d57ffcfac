"""Section registry loaded once from configuration."""

import logging
from dataclasses import dataclass, field

from wedding_gallery.config import parse_folder_list
from wedding_gallery.domain.errors import ConfigurationError
from wedding_gallery.domain.sections import Section, SectionSummary

logger = logging.getLogger(__name__)

DEFAULT_PREFIX_ROOT = "/wedding"


def parse_sections(raw: str | None, folders: str | None = None) -> list[Section]:
    """Parse ``name:hash`` pairs and their positional storage folders.

    Raises ConfigurationError when no section list is configured.
    """
    if raw is None or not raw.strip():
        raise ConfigurationError("No GALLERY_SECTIONS configured")
    folder_list = parse_folder_list(folders)
    sections: list[Section] = []
    for index, pair in enumerate(raw.split(",")):
        name, separator, passphrase_hash = pair.partition(":")
        name = name.strip()
        if not separator or not name or not passphrase_hash.strip():
            logger.warning(
                "Skipping malformed gallery section entry",
                extra={"position": index},
            )
            continue
        section_id = name.lower()
        folder = folder_list[index] if index < len(folder_list) else ""
        sections.append(
            Section(
                id=section_id,
                name=name,
                passphrase_hash=passphrase_hash.strip(),
                storage_prefix=folder or f"{DEFAULT_PREFIX_ROOT}/{section_id}",
            )
        )
        logger.debug(
            "Loaded gallery section",
            extra={
                "section_id": section_id,
                "has_folder": bool(folder),
            },
        )
    return sections


@dataclass
class SectionRegistry:
    """Read-only lookup table of configured sections."""

    sections: list[Section] = field(default_factory=list)

    @classmethod
    def load(cls, raw: str | None, folders: str | None = None) -> "SectionRegistry":
        """Build a registry, degrading to zero sections on configuration errors."""
        try:
            sections = parse_sections(raw, folders)
        except ConfigurationError:
            logger.error("No GALLERY_SECTIONS configured; gallery has no sections")
            return cls([])
        logger.info(
            "Gallery sections loaded",
            extra={"section_count": len(sections)},
        )
        return cls(sections)

    def get_all(self) -> list[SectionSummary]:
        """Return public summaries in configuration order."""
        return [
            SectionSummary(id=section.id, name=section.name)
            for section in self.sections
        ]

    def get_by_id(self, section_id: str) -> Section | None:
        """Return the first section with a matching id."""
        for section in self.sections:
            if section.id == section_id:
                return section
        logger.debug("Section not found", extra={"section_id": section_id})
        return None
