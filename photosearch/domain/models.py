"""Pydantic models decoded from the Pixabay search API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr


class Photo(BaseModel):
    """A single search hit.

    Photos compare and hash by ``id`` so a result list can be diffed against the
    previous one the way a collection view data source would.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: StrictInt
    image_url: StrictStr = Field(alias="webformatURL")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Photo):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


class PhotoResults(BaseModel):
    """Response envelope; everything except ``hits`` is ignored."""

    hits: list[Photo]


__all__ = ["Photo", "PhotoResults"]
