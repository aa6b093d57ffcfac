"""Pydantic request models for the gallery API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class VerifyRequest(BaseModel):
    """Passphrase submission for a section."""

    model_config = ConfigDict(populate_by_name=True)

    section_id: str | None = Field(default=None, alias="sectionId")
    passphrase: str | None = None


class PhotoUrlRequest(BaseModel):
    """Request for direct links to one photo."""

    model_config = ConfigDict(populate_by_name=True)

    photo_path: str | None = Field(default=None, alias="photoPath")


class ThumbnailsRequest(BaseModel):
    """Request for a batch of thumbnails.

    ``paths`` is left loose so that non-list input maps to a 400 response.
    """

    paths: Any = None
