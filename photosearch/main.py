"""Application entrypoint."""

from __future__ import annotations

import asyncio
import sys
import threading
from typing import TextIO

import httpx

from photosearch.config import get_settings
from photosearch.logging import configure_logging, logger
from photosearch.services.photo_search import PhotoSearchClient
from photosearch.services.renderers import ConsoleRenderer
from photosearch.services.screen import PhotoSearchScreen


READER_THREAD_NAME = "photosearch-stdin"


async def _read_lines(stream: TextIO):
    """Yield lines from a blocking stream without tying up the loop's executor.

    The reader is a daemon thread, so a ``readline`` still blocked on a
    terminal does not keep the process alive after the loop shuts down.
    """

    loop = asyncio.get_running_loop()
    queue: asyncio.Queue[str | None] = asyncio.Queue()

    def post(item: str | None) -> bool:
        try:
            loop.call_soon_threadsafe(queue.put_nowait, item)
        except RuntimeError:
            # Loop already closed.
            return False
        return True

    def pump() -> None:
        for line in iter(stream.readline, ""):
            if not post(line):
                return
        post(None)

    threading.Thread(target=pump, name=READER_THREAD_NAME, daemon=True).start()
    while True:
        line = await queue.get()
        if line is None:
            return
        yield line.rstrip("\r\n")


async def main(stdin: TextIO | None = None) -> None:
    settings = get_settings()
    configure_logging(settings.log_level)

    async with httpx.AsyncClient() as http_client:
        client = PhotoSearchClient(http_client, settings=settings.pixabay)
        screen = PhotoSearchScreen(
            client,
            ConsoleRenderer(),
            quiet_period=settings.debounce.quiet_period_seconds,
            cancel_superseded=settings.debounce.cancel_superseded,
        )
        logger.info("photo_search_starting", environment=settings.environment)
        async with screen:
            # Each line is the full current text of the search field.
            async for text in _read_lines(stdin or sys.stdin):
                screen.update_search_text(text)
            await screen.wait_idle()


if __name__ == "__main__":
    asyncio.run(main())
