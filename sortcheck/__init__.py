"""
Newest-first sort checker for paginated listings.

Scrapes a listing (Hacker News "newest" by default) across pages with
Playwright, verifies the articles are ordered newest to oldest and prints
a table of the time gaps between them.

The extractor and order checker are usable on their own, without a live
browser session.
"""

from sortcheck.extractor import extract_articles, get_article_data
from sortcheck.ordering import check_order
from sortcheck.report import display_table

__all__ = [
    "check_order",
    "display_table",
    "extract_articles",
    "get_article_data",
]
