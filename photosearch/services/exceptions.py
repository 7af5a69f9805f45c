"""Photo search exceptions."""

from __future__ import annotations


class PhotoSearchError(RuntimeError):
    """Base class for every failure surfaced by the search client."""


class ConfigurationError(PhotoSearchError):
    pass


class EmptyQueryError(PhotoSearchError, ValueError):
    pass


class EncodingFallback(PhotoSearchError):
    """The query could not be percent-encoded; the fallback literal is used instead."""


class TransportError(PhotoSearchError):
    pass


class HTTPStatusError(PhotoSearchError):
    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(PhotoSearchError):
    pass


__all__ = [
    "ConfigurationError",
    "DecodeError",
    "EmptyQueryError",
    "EncodingFallback",
    "HTTPStatusError",
    "PhotoSearchError",
    "TransportError",
]
