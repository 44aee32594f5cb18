#!/usr/bin/env python
"""
Pydantic DTOs for the catalog API and the external song info lookup.

Field aliases follow the wire format (``releaseDate``); Python code uses
snake_case names.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


class AddSongRequest(BaseModel):
    """Body of POST /songs/: the identifying pair sent to the lookup."""

    model_config = ConfigDict(extra="ignore")

    group: StrictStr = ""
    song: StrictStr = ""

    @field_validator("group", "song", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        # Non-strings fall through to StrictStr and are rejected
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        return value


class UpdateSongRequest(BaseModel):
    """Body of PUT /songs/. Omitted fields (None) leave stored values unchanged."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    group: Optional[StrictStr] = None
    song: Optional[StrictStr] = None
    release_date: Optional[StrictStr] = Field(default=None, alias="releaseDate")
    text: Optional[StrictStr] = None
    link: Optional[StrictStr] = None

    def changes(self) -> dict:
        """Provided fields keyed by model attribute name."""
        return self.model_dump(exclude_none=True, by_alias=False)


class SongDetail(BaseModel):
    """Successful response of the external lookup (GET /info)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    release_date: Optional[StrictStr] = Field(default=None, alias="releaseDate")
    text: Optional[StrictStr] = None
    link: Optional[StrictStr] = None

    def missing_fields(self) -> List[str]:
        missing = []
        for name, wire in (("release_date", "releaseDate"), ("text", "text"), ("link", "link")):
            value = getattr(self, name)
            if not value or not value.strip():
                missing.append(wire)
        return missing


class VersePage(BaseModel):
    """Response of GET /songs/text."""

    total: int = Field(ge=0)
    verses: List[str]
    has_more: bool


__all__ = ["AddSongRequest", "UpdateSongRequest", "SongDetail", "VersePage"]
