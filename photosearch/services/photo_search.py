"""Pixabay photo search client."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Sequence
from urllib.parse import quote

import httpx
from pydantic import SecretStr, ValidationError

from photosearch.config import PixabaySettings
from photosearch.domain.models import Photo, PhotoResults
from photosearch.logging import logger
from photosearch.services.exceptions import (
    ConfigurationError,
    DecodeError,
    EmptyQueryError,
    EncodingFallback,
    HTTPStatusError,
    TransportError,
)

# Pixabay error bodies are plain text; keep enough to be useful in logs.
ERROR_BODY_CHAR_LIMIT = 500

SuccessCallback = Callable[[Sequence[Photo]], Any]
FailureCallback = Callable[[Exception], Any]


def percent_encode(value: str) -> str:
    """Percent-encode ``value`` so it can sit inside a query-string parameter.

    Only RFC 3986 unreserved characters are left as-is. Raises
    :class:`EncodingFallback` when the text has no UTF-8 representation.
    """

    try:
        return quote(value, safe="")
    except UnicodeEncodeError as exc:
        raise EncodingFallback(f"Query cannot be percent-encoded: {exc.reason}") from exc


class SearchSubscription:
    """Handle for one callback-style search.

    Exactly one of the success/failure callbacks runs on the delivery loop,
    unless the subscription is cancelled first, in which case neither does.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, query: str) -> None:
        self._loop = loop
        self.query = query
        self._task: asyncio.Task | None = None
        self._cancelled = False
        self._delivered = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._cancelled or self._delivered

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def wait(self) -> None:
        """Wait for the request to finish and its delivery to run."""

        if self._task is not None:
            await asyncio.wait({self._task})
        await asyncio.sleep(0)

    def _attach(self, task: asyncio.Task) -> None:
        self._task = task

    def _schedule(self, callback: Callable[[Any], Any], value: Any) -> None:
        if self._cancelled or self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._deliver, callback, value)

    def _deliver(self, callback: Callable[[Any], Any], value: Any) -> None:
        # Cancellation may have happened after the delivery was queued.
        if self._cancelled or self._delivered:
            return
        self._delivered = True
        callback(value)


class PhotoSearchClient:
    """Searches the Pixabay image API for photos matching a query."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: PixabaySettings | None = None,
    ) -> None:
        self._client = http_client
        self._settings = settings or PixabaySettings()

    @staticmethod
    def _read_secret(secret: Any) -> str | None:
        if not secret:
            return None
        if isinstance(secret, SecretStr):
            return secret.get_secret_value()
        return str(secret)

    def encode_query(self, query: str) -> str:
        try:
            return percent_encode(query)
        except EncodingFallback as exc:
            logger.warning(
                "encoding_fallback",
                fallback_query=self._settings.fallback_query,
                error=str(exc),
            )
            return percent_encode(self._settings.fallback_query)

    def build_url(self, query: str) -> str:
        api_key = self._read_secret(self._settings.api_key)
        if not api_key:
            raise ConfigurationError("Pixabay API key is not configured.")

        safesearch = "true" if self._settings.safesearch else "false"
        return (
            f"{self._settings.base_url}?key={percent_encode(api_key)}"
            f"&q={self.encode_query(query)}"
            f"&per_page={self._settings.per_page}"
            f"&safesearch={safesearch}"
        )

    async def search(self, query: str) -> list[Photo]:
        """Run one search and return the hits in response order."""

        if not query or not query.strip():
            raise EmptyQueryError("Search query must not be empty.")

        url = self.build_url(query)
        request_kwargs: dict[str, Any] = {}
        if self._settings.request_timeout_seconds is not None:
            request_kwargs["timeout"] = self._settings.request_timeout_seconds

        logger.debug("photo_search_request", query=query)
        try:
            response = await self._client.get(url, **request_kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            detail = exc.response.text[:ERROR_BODY_CHAR_LIMIT]
            raise HTTPStatusError(
                f"Pixabay request failed ({status_code}): {detail}",
                status_code=status_code,
            ) from exc
        except httpx.RequestError as exc:
            raise TransportError(f"Pixabay request failed: {exc}") from exc

        photos = self._decode(response)
        logger.debug("photo_search_completed", query=query, count=len(photos))
        return photos

    @staticmethod
    def _decode(response: httpx.Response) -> list[Photo]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise DecodeError(f"Response body is not valid JSON: {exc}") from exc

        try:
            results = PhotoResults.model_validate(payload)
        except ValidationError as exc:
            raise DecodeError(
                f"Response does not match the photo schema ({exc.error_count()} errors)"
            ) from exc
        return list(results.hits)

    def search_photos(
        self,
        query: str,
        *,
        on_success: SuccessCallback,
        on_failure: FailureCallback,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> SearchSubscription:
        """Start a search in the background and deliver its outcome on ``loop``.

        The request runs on the current event loop; callbacks are posted to
        ``loop`` (the running loop when omitted), which is where a renderer
        expects to be called from.
        """

        running = asyncio.get_running_loop()
        subscription = SearchSubscription(loop or running, query)
        task = running.create_task(
            self._run_subscription(subscription, on_success, on_failure)
        )
        subscription._attach(task)
        return subscription

    async def _run_subscription(
        self,
        subscription: SearchSubscription,
        on_success: SuccessCallback,
        on_failure: FailureCallback,
    ) -> None:
        try:
            photos = await self.search(subscription.query)
        except asyncio.CancelledError:
            logger.debug("photo_search_cancelled", query=subscription.query)
            raise
        except Exception as exc:
            subscription._schedule(on_failure, exc)
            return
        subscription._schedule(on_success, photos)


__all__ = ["PhotoSearchClient", "SearchSubscription", "percent_encode"]
