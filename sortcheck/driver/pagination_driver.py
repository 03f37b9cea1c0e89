"""Playwright pagination driver.

The driver owns the browser session and walks the listing page by page:

1. Extract the articles on the current page (see ``sortcheck.extractor``).
2. Stop once ``target`` articles have been accumulated.
3. Otherwise click the "More" link, retrying a bounded number of times
   with a fixed pause between attempts.
4. If every attempt fails the driver reports the page as stalled and stops
   accumulating; the short result then surfaces as PaginationExhausted.

Only one page is ever in flight; the accumulator is local to ``collect``.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import click
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from sortcheck.common.exceptions import (
    PaginationAdvanceFailed,
    PaginationExhausted,
)
from sortcheck.extractor import (
    ROW_SELECTOR,
    ROW_TIMEOUT_MS,
    get_article_data,
)
from sortcheck.ordering import check_order
from sortcheck.report import (
    LARGE_GAP_SECONDS,
    ClickStyler,
    Styler,
    display_table,
)

if TYPE_CHECKING:
    from playwright.async_api import Page

    from sortcheck.common.data_models import Article

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://news.ycombinator.com/newest"
MORE_LINK_SELECTOR = "a.morelink"
MAX_ARTICLES = 100
MAX_RETRIES = 3
ADVANCE_TIMEOUT_MS = 20_000
SETTLE_DELAY = 1.5
RETRY_BACKOFF = 1.0


@dataclass(frozen=True)
class DriverSettings:
    """Knobs for a single scrape-validate-render run.

    Attributes:
        url: Listing URL to start from.
        target: Number of articles to collect and validate.
        display_count: Rows to print in the table (None = ``target``).
        max_retries: Attempts per pagination advance.
        max_rounds: Cap on extraction rounds (None = ``target``). Every
            successful round yields at least one article, so ``target``
            rounds are always enough.
        row_timeout_ms: Wait for listing rows before extracting.
        advance_timeout_ms: Wait for navigation and rows after clicking "More".
        settle_delay: Seconds to pause before each advance attempt.
        retry_backoff: Seconds to pause after a failed advance attempt.
        large_gap_seconds: Threshold for flagging a large gap in the table.
        browser_type: "chromium", "firefox" or "webkit".
        headless: Run the browser without a window.
        viewport_width: Browser viewport width in pixels.
        viewport_height: Browser viewport height in pixels.
    """

    url: str = DEFAULT_URL
    target: int = MAX_ARTICLES
    display_count: int | None = None
    max_retries: int = MAX_RETRIES
    max_rounds: int | None = None
    row_timeout_ms: int = ROW_TIMEOUT_MS
    advance_timeout_ms: int = ADVANCE_TIMEOUT_MS
    settle_delay: float = SETTLE_DELAY
    retry_backoff: float = RETRY_BACKOFF
    large_gap_seconds: int = LARGE_GAP_SECONDS
    browser_type: str = "chromium"
    headless: bool = True
    viewport_width: int = 1280
    viewport_height: int = 720

    @property
    def rounds_limit(self) -> int:
        return self.max_rounds if self.max_rounds is not None else self.target

    @property
    def rows_to_display(self) -> int:
        if self.display_count is not None:
            return self.display_count
        return self.target


class PaginationOutcome(enum.Enum):
    """Result of trying to load the next listing page."""

    ADVANCED = "advanced"
    STALLED = "stalled"


@dataclass
class RunReport:
    """What a completed run found.

    Attributes:
        articles: Exactly ``target`` articles in display order.
        is_sorted: Result of the newest-first check.
        pages: Number of pages extracted.
        advances: Number of successful pagination advances.
    """

    articles: list[Article]
    is_sorted: bool
    pages: int
    advances: int


class PaginationDriver:
    """Collects articles across listing pages and reports on their order.

    Args:
        page: Playwright page with the listing already loaded.
        settings: Run settings (default: DriverSettings()).
        styler: Output decorator (default: ClickStyler()).
        echo: Receives report lines (default: click.echo).

    Example:
        async with PaginationDriver.open(DriverSettings(target=30)) as driver:
            report = await driver.run()
    """

    def __init__(
        self,
        page: Page,
        settings: DriverSettings | None = None,
        styler: Styler | None = None,
        echo: Callable[[str], Any] = click.echo,
    ) -> None:
        self.page = page
        self.settings = settings or DriverSettings()
        self.styler = styler or ClickStyler()
        self.echo = echo
        self.pages_extracted = 0
        self.advances = 0

    @classmethod
    @asynccontextmanager
    async def open(
        cls,
        settings: DriverSettings | None = None,
        **kwargs: Any,
    ) -> AsyncIterator[PaginationDriver]:
        """Open a browser on the listing page and yield a driver for it.

        The browser, its context and Playwright itself are closed on every
        exit path, including exceptions raised by the caller.

        Args:
            settings: Run settings (default: DriverSettings()).
            **kwargs: Additional arguments passed to __init__.

        Yields:
            Initialized PaginationDriver.
        """
        settings = settings or DriverSettings()

        playwright = await async_playwright().start()
        try:
            logger.info(f"Launching {settings.browser_type}...")
            browser_launcher = getattr(playwright, settings.browser_type)
            browser = await browser_launcher.launch(
                headless=settings.headless
            )

            try:
                browser_context = await browser.new_context(
                    viewport={
                        "width": settings.viewport_width,
                        "height": settings.viewport_height,
                    }
                )

                try:
                    page = await browser_context.new_page()
                    logger.info(f"Navigating to {settings.url}")
                    await page.goto(
                        settings.url, wait_until="domcontentloaded"
                    )

                    yield cls(page, settings, **kwargs)

                finally:
                    await browser_context.close()

            finally:
                await browser.close()
                logger.info("Closed browser.")

        finally:
            await playwright.stop()

    async def collect(self) -> list[Article]:
        """Accumulate exactly ``target`` articles across listing pages.

        Returns:
            The first ``target`` articles in page order.

        Raises:
            ExtractionTimeout: If a page never shows any rows.
            ExtractionError: If a page yields an invalid batch.
            PaginationExhausted: If pagination stalled or the round limit
                was hit before ``target`` articles were collected.
        """
        target = self.settings.target
        articles: list[Article] = []
        rounds = 0

        while len(articles) < target:
            if rounds >= self.settings.rounds_limit:
                logger.warning(
                    f"Stopping after {rounds} rounds with "
                    f"{len(articles)}/{target} articles"
                )
                break
            rounds += 1

            logger.info(f"Current count: {len(articles)}")
            batch = await get_article_data(
                self.page, self.settings.row_timeout_ms
            )
            self.pages_extracted += 1
            articles.extend(batch)
            logger.info(
                f"Page {self.pages_extracted}: {len(batch)} articles "
                f"({len(articles)} total)"
            )

            if len(articles) >= target:
                break

            if await self.advance_page() is PaginationOutcome.STALLED:
                logger.warning(
                    f"Pagination stalled with {len(articles)}/{target} "
                    "articles collected"
                )
                break

        result = articles[:target]
        if len(result) != target:
            raise PaginationExhausted(len(result), target, self.page.url)
        return result

    async def advance_page(self) -> PaginationOutcome:
        """Load the next listing page, retrying up to ``max_retries`` times.

        Returns:
            ADVANCED once the next page shows rows, STALLED if every
            attempt failed.
        """
        max_retries = self.settings.max_retries
        for attempt in range(1, max_retries + 1):
            await asyncio.sleep(self.settings.settle_delay)
            try:
                await self._try_advance(attempt)
            except PaginationAdvanceFailed as e:
                logger.warning(
                    f"Retry {attempt}/{max_retries} failed: {e.reason}"
                )
                await asyncio.sleep(self.settings.retry_backoff)
                continue

            self.advances += 1
            logger.info(f"Advanced to {self.page.url}")
            return PaginationOutcome.ADVANCED

        logger.warning(f"Pagination failed after {max_retries} attempts")
        return PaginationOutcome.STALLED

    async def _try_advance(self, attempt: int) -> None:
        timeout = self.settings.advance_timeout_ms
        try:
            more_link = await self.page.query_selector(MORE_LINK_SELECTOR)
            if more_link is None:
                raise PaginationAdvanceFailed(
                    "No 'More' link found", attempt
                )

            async with self.page.expect_navigation(timeout=timeout):
                await more_link.click()
            await self.page.wait_for_selector(ROW_SELECTOR, timeout=timeout)
        except PlaywrightError as e:
            raise PaginationAdvanceFailed(str(e), attempt) from e

    async def run(self) -> RunReport:
        """Collect, check ordering, print the result and the delta table.

        The table is printed whether or not the order check passes.

        Returns:
            RunReport describing the run.
        """
        articles = await self.collect()

        self.echo("\nResult:")
        is_sorted = check_order(articles)
        if is_sorted:
            self.echo(
                self.styler.status(
                    "Articles are sorted newest to oldest.", True
                )
            )
        else:
            self.echo(
                self.styler.status(
                    "Sort check failed: timestamps are out of order.", False
                )
            )

        display_table(
            articles,
            self.settings.rows_to_display,
            styler=self.styler,
            echo=self.echo,
            threshold=self.settings.large_gap_seconds,
        )

        return RunReport(
            articles=articles,
            is_sorted=is_sorted,
            pages=self.pages_extracted,
            advances=self.advances,
        )
