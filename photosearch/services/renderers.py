"""Display collaborators that receive search results."""

from __future__ import annotations

import sys
from typing import Protocol, Sequence, TextIO

from photosearch.domain.models import Photo


class PhotoRenderer(Protocol):
    """Receives each fresh result set; a new call replaces the previous grid."""

    def render(self, photos: Sequence[Photo]) -> None:
        ...

    def show_error(self, error: Exception) -> None:
        ...


class ConsoleRenderer:
    """Prints results as a plain two-column listing."""

    def __init__(self, stream: TextIO | None = None, columns: int = 2) -> None:
        if columns < 1:
            raise ValueError("columns must be at least 1")
        self._stream = stream or sys.stdout
        self.columns = columns

    def render(self, photos: Sequence[Photo]) -> None:
        if not photos:
            self._write("No photos found.")
            return
        cells = [f"[{photo.id}] {photo.image_url}" for photo in photos]
        width = max(len(cell) for cell in cells)
        for start in range(0, len(cells), self.columns):
            row = cells[start : start + self.columns]
            self._write("  ".join(cell.ljust(width) for cell in row).rstrip())

    def show_error(self, error: Exception) -> None:
        self._write(f"Search failed: {error}")

    def _write(self, line: str) -> None:
        self._stream.write(line + "\n")
        self._stream.flush()


__all__ = ["ConsoleRenderer", "PhotoRenderer"]
