"""Domain models for visitor sessions."""

from dataclasses import dataclass, field


@dataclass
class GallerySession:
    """Server-side authorization state for one visitor.

    ``authorized_sections`` holds unique section ids in unlock order and only
    grows; the whole session is dropped on logout or expiry.
    """

    id: str
    authorized_sections: list[str] = field(default_factory=list)
    is_new: bool = True
