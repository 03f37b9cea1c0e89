"""Article extraction from a listing page.

``get_article_data`` is the entry point used by the pagination driver: it
waits for listing rows on the live page, snapshots the DOM and hands the
snapshot to ``extract_articles``. The latter is a pure function of the
HTML, which is what the tests exercise.

Listing layout (Hacker News)::

    <tr class="athing">              <- one per item
      ... <span class="titleline"><a href="...">Title</a></span>
    </tr>
    <tr>                             <- metadata row, next sibling
      ... <span class="age" title="2025-07-22T08:23:52 1753172632">
    </tr>
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from sortcheck.common.data_models import Article
from sortcheck.common.exceptions import (
    ExtractionError,
    ExtractionTimeout,
)
from sortcheck.common.lxml_page_element import LxmlPageElement

if TYPE_CHECKING:
    from playwright.async_api import Page

    from sortcheck.common.page_element import PageElement

logger = logging.getLogger(__name__)

ROW_SELECTOR = "tr.athing"
TITLE_SELECTOR = ".titleline > a"
AGE_SELECTOR = "span.age"
ROW_TIMEOUT_MS = 10_000


async def get_article_data(
    page: Page, timeout_ms: int = ROW_TIMEOUT_MS
) -> list[Article]:
    """Extract articles from the currently loaded listing page.

    Args:
        page: Playwright page with a listing loaded.
        timeout_ms: How long to wait for the first row to appear.

    Returns:
        Validated articles in page order.

    Raises:
        ExtractionTimeout: If no row appears within the timeout.
        HTMLStructuralAssumptionException: If the snapshot contradicts the
            listing layout.
        ExtractionError: If the extracted batch is empty or malformed.
    """
    try:
        await page.wait_for_selector(ROW_SELECTOR, timeout=timeout_ms)
    except PlaywrightTimeoutError as e:
        raise ExtractionTimeout(ROW_SELECTOR, timeout_ms, page.url) from e

    content = await page.content()
    return extract_articles(LxmlPageElement.from_html(content, page.url))


def extract_articles(page: PageElement) -> list[Article]:
    """Extract articles from a parsed listing snapshot.

    Rows without a title link, without a timestamp element, or whose
    timestamp attribute can't be split into ISO and unix parts are skipped.
    Whatever survives must form a valid, non-empty batch.

    Args:
        page: Root element of the listing snapshot.

    Returns:
        Validated articles in page order.

    Raises:
        HTMLStructuralAssumptionException: If the page has no listing rows,
            or a row carries more than one title link or timestamp.
        ExtractionError: If no rows survive or a surviving row is invalid.
    """
    rows = page.query_css(ROW_SELECTOR, "listing rows")

    raw: list[dict[str, str]] = []
    for index, row in enumerate(rows):
        fields = _extract_row(row)
        if fields is None:
            logger.debug(f"Skipping malformed row {index}")
            continue
        raw.append(fields)

    if not raw:
        raise ExtractionError(
            "no valid timestamp rows extracted",
            page.url,
            {"rows_seen": len(rows)},
        )

    articles = [Article.confirm(page.url, **fields) for fields in raw]
    logger.debug(
        f"Extracted {len(articles)} of {len(rows)} rows from {page.url}"
    )
    return articles


def _extract_row(row: PageElement) -> dict[str, str] | None:
    title_links = row.query_css(
        TITLE_SELECTOR, "title link", min_count=0, max_count=1
    )
    metadata_rows = row.query_xpath(
        "following-sibling::*[1]", "metadata row", min_count=0, max_count=1
    )
    if not title_links or not metadata_rows:
        return None

    ages = metadata_rows[0].query_css(
        AGE_SELECTOR, "age span", min_count=0, max_count=1
    )
    if not ages:
        return None

    parsed = parse_age_title(ages[0].get_attribute("title"))
    if parsed is None:
        return None

    iso, unix = parsed
    return {
        "title": title_links[0].text_content().strip(),
        "iso": iso,
        "unix": unix,
    }


def parse_age_title(value: str | None) -> tuple[str, str] | None:
    """Split a timestamp attribute into its ISO and unix parts.

    Args:
        value: Attribute value such as ``"2025-07-22T08:23:52 1753172632"``.

    Returns:
        ``(iso, unix)`` or None when the value is missing, doesn't have
        exactly two tokens, or the second token isn't an integer.
    """
    if not value:
        return None

    tokens = value.split()
    if len(tokens) != 2:
        return None

    iso, unix = tokens
    try:
        int(unix, 10)
    except ValueError:
        return None
    return iso, unix
