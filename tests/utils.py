"""Test utilities for driving sortcheck without a browser.

FakePage implements the slice of the Playwright ``Page`` API that the
extractor and pagination driver use, over a list of pre-rendered HTML
documents. Clicking the "More" link loads the next document.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from sortcheck.common.data_models import Article

LISTING_URL = "https://news.ycombinator.com/newest"


class FakeLink:
    """Stand-in for the "More" link element handle."""

    def __init__(self, page: "FakePage") -> None:
        self._page = page

    async def click(self) -> None:
        await self._page._click_more()


class FakePage:
    """Minimal async Page over a fixed sequence of HTML documents.

    Args:
        documents: HTML for each listing page, in pagination order.
        failing_clicks: Number of initial clicks that time out instead of
            navigating.
        hide_more_link: Number of initial ``query_selector`` calls for the
            "More" link that find nothing.
        failing_lookups: Number of initial ``query_selector`` calls that
            raise a Playwright error, as when the page navigates mid-query.
    """

    def __init__(
        self,
        documents: list[str],
        failing_clicks: int = 0,
        hide_more_link: int = 0,
        failing_lookups: int = 0,
    ) -> None:
        self.documents = documents
        self.index = 0
        self.failing_clicks = failing_clicks
        self.hide_more_link = hide_more_link
        self.failing_lookups = failing_lookups
        self.clicks = 0
        self.selector_waits: list[tuple[str, int | None]] = []

    @property
    def url(self) -> str:
        if self.index == 0:
            return LISTING_URL
        return f"{LISTING_URL}?p={self.index + 1}"

    @property
    def _current(self) -> str:
        return self.documents[self.index]

    async def wait_for_selector(
        self, selector: str, timeout: int | None = None
    ) -> None:
        self.selector_waits.append((selector, timeout))
        if 'class="athing' not in self._current:
            raise PlaywrightTimeoutError(
                f"Timeout {timeout}ms exceeded waiting for {selector}"
            )

    async def content(self) -> str:
        return self._current

    async def query_selector(self, selector: str) -> FakeLink | None:
        if self.failing_lookups > 0:
            self.failing_lookups -= 1
            raise PlaywrightError(
                "Execution context was destroyed, most likely because of a "
                "navigation"
            )
        if self.hide_more_link > 0:
            self.hide_more_link -= 1
            return None
        if 'class="morelink"' not in self._current:
            return None
        return FakeLink(self)

    @asynccontextmanager
    async def expect_navigation(
        self, timeout: int | None = None
    ) -> AsyncIterator[None]:
        yield

    async def _click_more(self) -> None:
        self.clicks += 1
        if self.failing_clicks > 0:
            self.failing_clicks -= 1
            raise PlaywrightTimeoutError(
                "Timeout exceeded waiting for navigation"
            )
        self.index += 1


def articles_from_unix(*values: int) -> list[Article]:
    """Build valid articles with the given unix timestamps, in order."""
    return [
        Article(
            title=f"Article {i + 1}",
            iso="2025-07-22T08:23:52",
            unix=str(value),
        )
        for i, value in enumerate(values)
    ]
