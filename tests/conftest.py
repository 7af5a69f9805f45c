"""Shared fixtures for the photo search tests."""

from __future__ import annotations

from typing import Sequence

import pytest
import structlog
from pydantic import SecretStr

from photosearch.config import PixabaySettings
from photosearch.domain.models import Photo


HITS_PAYLOAD = {
    "total": 2,
    "totalHits": 2,
    "hits": [
        {"id": 1, "webformatURL": "http://x/1.jpg", "tags": "paris, tower"},
        {"id": 2, "webformatURL": "http://x/2.jpg", "tags": "paris, river"},
    ],
}


class RecordingRenderer:
    def __init__(self) -> None:
        self.rendered: list[list[Photo]] = []
        self.errors: list[Exception] = []

    def render(self, photos: Sequence[Photo]) -> None:
        self.rendered.append(list(photos))

    def show_error(self, error: Exception) -> None:
        self.errors.append(error)


@pytest.fixture
def pixabay_settings() -> PixabaySettings:
    return PixabaySettings(api_key=SecretStr("test-key"))


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def hits_payload() -> dict:
    return {
        "total": HITS_PAYLOAD["total"],
        "totalHits": HITS_PAYLOAD["totalHits"],
        "hits": [dict(hit) for hit in HITS_PAYLOAD["hits"]],
    }


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()
