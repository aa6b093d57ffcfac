"""Containment checks for storage paths supplied by clients."""

import logging
from collections.abc import Iterable

from wedding_gallery.domain.errors import AuthorizationError
from wedding_gallery.domain.sections import Section

logger = logging.getLogger(__name__)

INVALID_PATH_MESSAGE = "Invalid photo path for this section"
_DOT_SEGMENTS = {".", ".."}


def is_path_in_section(section: Section, path: object) -> bool:
    """Return true when ``path`` is a string inside the section's folder.

    The check is lexical: the path must start with the prefix and the prefix
    must end on a segment boundary, so ``/a/b2/x.jpg`` is not inside ``/a/b``.
    Paths with ``.`` or ``..`` segments are never accepted.
    """
    if not isinstance(path, str):
        return False
    prefix = section.storage_prefix
    if not path.startswith(prefix):
        return False
    remainder = path[len(prefix) :]
    if remainder and not prefix.endswith("/") and not remainder.startswith("/"):
        return False
    return not any(segment in _DOT_SEGMENTS for segment in path.split("/"))


def require_paths_in_section(section: Section, paths: Iterable[object]) -> None:
    """Reject the whole request if any path falls outside the section."""
    for path in paths:
        if not is_path_in_section(section, path):
            logger.warning(
                "Rejected photo path outside section folder",
                extra={
                    "section_id": section.id,
                    "path": path,
                    "expected_prefix": section.storage_prefix,
                },
            )
            raise AuthorizationError(INVALID_PATH_MESSAGE)
