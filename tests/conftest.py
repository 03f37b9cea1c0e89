"""Shared fixtures for sortcheck tests."""

import asyncio
import socket
import threading
import time
from collections.abc import Generator
from contextlib import closing

import pytest
from aiohttp import web

from sortcheck.driver.pagination_driver import DriverSettings
from tests.mock_server import (
    ARTICLES,
    create_app,
    generate_listing_html,
    make_articles,
)


@pytest.fixture
def listing_html() -> str:
    """A single listing page with 30 well-formed articles and a More link."""
    return generate_listing_html(ARTICLES[:30], more_href="newest?p=2")


@pytest.fixture
def fast_settings() -> DriverSettings:
    """Driver settings with no pauses between pagination attempts."""
    return DriverSettings(settle_delay=0, retry_backoff=0)


@pytest.fixture
def forty_per_page() -> list[str]:
    """Three listing pages of 40 descending articles each."""
    articles = make_articles(120)
    return [
        generate_listing_html(
            articles[start : start + 40],
            more_href=f"newest?p={start // 40 + 2}",
            first_rank=start + 1,
        )
        for start in range(0, 120, 40)
    ]


# =============================================================================
# aiohttp test server fixtures
# =============================================================================


def find_free_port() -> int:
    """Find a free port on localhost.

    Returns:
        An available port number.
    """
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(("", 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


class AioHttpTestServer:
    """Wrapper to run aiohttp server in a background thread."""

    def __init__(self, app: web.Application, port: int) -> None:
        self.app = app
        self.port = port
        self.host = "127.0.0.1"
        self._loop: asyncio.AbstractEventLoop | None = None
        self._runner: web.AppRunner | None = None
        self._thread: threading.Thread | None = None

    @property
    def url(self) -> str:
        """Get the base URL of the server."""
        return f"http://{self.host}:{self.port}"

    def start(self) -> None:
        """Start the server in a background thread."""
        self._thread = threading.Thread(target=self._run_server, daemon=True)
        self._thread.start()
        # Give the server time to start
        time.sleep(0.1)

    def _run_server(self) -> None:
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)

        async def start() -> None:
            self._runner = web.AppRunner(self.app)
            await self._runner.setup()
            site = web.TCPSite(self._runner, self.host, self.port)
            await site.start()

        self._loop.run_until_complete(start())
        self._loop.run_forever()

    def stop(self) -> None:
        """Stop the server and clean up resources."""
        if self._loop and self._runner:
            runner = self._runner
            future = asyncio.run_coroutine_threadsafe(
                runner.cleanup(), self._loop
            )
            try:
                future.result(timeout=2.0)
            except Exception:
                pass  # Best effort cleanup

        if self._loop:
            self._loop.call_soon_threadsafe(self._loop.stop)

        if self._thread:
            self._thread.join(timeout=2.0)


@pytest.fixture
def listing_server() -> Generator[AioHttpTestServer, None, None]:
    """Start an aiohttp server serving 120 articles, 30 per page.

    Yields:
        AioHttpTestServer with the mock listing at ``/newest``.
    """
    server = AioHttpTestServer(create_app(), find_free_port())
    server.start()
    yield server
    server.stop()
