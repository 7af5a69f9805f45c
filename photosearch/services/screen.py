"""Photo search screen: debounced input driving the search client."""

from __future__ import annotations

import asyncio
from functools import partial
from typing import Sequence

from photosearch.domain.models import Photo
from photosearch.logging import logger
from photosearch.services.debounce import SearchInputDebouncer
from photosearch.services.photo_search import PhotoSearchClient, SearchSubscription
from photosearch.services.renderers import PhotoRenderer


class PhotoSearchScreen:
    """Owns the search pipeline for one screen's lifetime.

    Text changes go through :class:`SearchInputDebouncer`; each non-empty
    commit starts one search whose outcome is delivered to the renderer on
    ``loop``. Superseded searches keep running unless ``cancel_superseded`` is
    set, so results can arrive out of order. :meth:`close` cancels everything
    still pending and no renderer call happens after it.
    """

    def __init__(
        self,
        client: PhotoSearchClient,
        renderer: PhotoRenderer,
        *,
        quiet_period: float = 1.0,
        cancel_superseded: bool = False,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._client = client
        self._renderer = renderer
        self._quiet_period = quiet_period
        self._cancel_superseded = cancel_superseded
        self._loop = loop
        self._debouncer: SearchInputDebouncer | None = None
        self._subscriptions: set[SearchSubscription] = set()
        self._latest: SearchSubscription | None = None
        self._closed = False
        self.last_query: str | None = None

    @property
    def in_flight(self) -> list[SearchSubscription]:
        return [sub for sub in self._subscriptions if not sub.done]

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        if self._closed:
            raise RuntimeError("Screen has been closed.")
        if self._debouncer is not None:
            return
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        self._debouncer = SearchInputDebouncer(
            self._quiet_period,
            self._on_commit,
            loop=self._loop,
        )
        logger.info("photo_search_screen_started", quiet_period=self._quiet_period)

    def update_search_text(self, text: str | None) -> None:
        """Feed the current contents of the search field."""

        if not text:
            return
        if self._debouncer is None:
            raise RuntimeError("Screen has not been started.")
        self._debouncer.push(text)

    def _on_commit(self, text: str) -> None:
        logger.info("search_committed", query=text)
        if not text.strip():
            logger.debug("search_skipped_empty_query")
            return
        self.search_photos(text)

    def search_photos(self, query: str) -> SearchSubscription | None:
        if self._closed:
            return None
        if self._cancel_superseded and self._latest is not None:
            self._latest.cancel()
            self._subscriptions.discard(self._latest)

        subscription = self._client.search_photos(
            query,
            on_success=partial(self._handle_photos, query),
            on_failure=partial(self._handle_failure, query),
            loop=self._loop,
        )
        self._subscriptions.add(subscription)
        self._latest = subscription
        self.last_query = query
        return subscription

    def _handle_photos(self, query: str, photos: Sequence[Photo]) -> None:
        self._prune()
        if self._closed:
            return
        logger.info("search_completed", query=query, count=len(photos))
        self._renderer.render(photos)

    def _handle_failure(self, query: str, error: Exception) -> None:
        self._prune()
        if self._closed:
            return
        logger.warning(
            "search_failed",
            query=query,
            error_type=error.__class__.__name__,
            error=str(error),
        )
        self._renderer.show_error(error)

    def _prune(self) -> None:
        self._subscriptions = {sub for sub in self._subscriptions if not sub.done}

    async def wait_idle(self) -> None:
        """Wait until no commit is pending and every search has delivered."""

        while not self._closed:
            if self._debouncer is not None and self._debouncer.pending:
                await asyncio.sleep(self._quiet_period)
                continue
            pending = self.in_flight
            if not pending:
                return
            await asyncio.gather(*(sub.wait() for sub in pending))

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._debouncer is not None:
            self._debouncer.close()
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions.clear()
        self._latest = None
        logger.info("photo_search_screen_closed")

    async def __aenter__(self) -> "PhotoSearchScreen":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["PhotoSearchScreen"]
