"""Debounce raw search-text changes into committed queries."""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, AsyncIterator, Callable

from photosearch.logging import logger

CommitCallback = Callable[[str], Any]

_CLOSED = object()


class SearchInputDebouncer:
    """Timer-reset debouncer with change-only emission.

    Every :meth:`push` re-arms a ``quiet_period`` timer and replaces the held
    value. When the timer fires, the held value is committed only if it differs
    from the last committed value (``initial`` before the first commit).
    Commits go to ``on_commit`` and to every async iterator currently open on
    :meth:`commits`; nothing is buffered when no iterator is open.
    """

    def __init__(
        self,
        quiet_period: float = 1.0,
        on_commit: CommitCallback | None = None,
        *,
        initial: str = "",
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        if quiet_period <= 0:
            raise ValueError("quiet_period must be positive")
        self.quiet_period = quiet_period
        self._on_commit = on_commit
        self._loop = loop
        self._held: str | None = None
        self._last_emitted = initial
        self._timer: asyncio.TimerHandle | None = None
        self._consumers: set[asyncio.Queue[Any]] = set()
        self._tasks: set[asyncio.Task] = set()
        self._closed = False

    @property
    def pending(self) -> bool:
        return self._timer is not None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def buffered(self) -> int:
        """Commits queued for open iterators and not yet consumed."""

        return sum(queue.qsize() for queue in self._consumers)

    @property
    def last_emitted(self) -> str:
        return self._last_emitted

    def push(self, text: str) -> None:
        if self._closed:
            return
        if self._timer is not None:
            self._timer.cancel()
        self._held = text
        loop = self._loop or asyncio.get_running_loop()
        self._timer = loop.call_later(self.quiet_period, self._fire)

    def _fire(self) -> None:
        self._timer = None
        value, self._held = self._held, None
        if value is None or value == self._last_emitted:
            return
        self._last_emitted = value
        self._emit(value)

    def _emit(self, value: str) -> None:
        logger.debug("search_text_committed", text=value)
        for queue in self._consumers:
            queue.put_nowait(value)
        if self._on_commit is None:
            return
        result = self._on_commit(value)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result, loop=self._loop)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def commits(self) -> AsyncIterator[str]:
        """Yield queries committed after iteration starts, until the debouncer closes."""

        if self._closed:
            return
        # Commits are only buffered while an iterator is open.
        queue: asyncio.Queue[Any] = asyncio.Queue()
        self._consumers.add(queue)
        try:
            while True:
                item = await queue.get()
                if item is _CLOSED:
                    return
                yield item
        finally:
            self._consumers.discard(queue)

    def __aiter__(self) -> AsyncIterator[str]:
        return self.commits()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._held = None
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()
        for queue in self._consumers:
            queue.put_nowait(_CLOSED)


__all__ = ["SearchInputDebouncer"]
