"""PageElement protocol for browser-free data extraction.

The extractor never receives a live browser object. The driver snapshots
the rendered DOM to HTML and the extractor queries that snapshot through
this interface, which keeps extraction a pure function of the HTML and
lets tests feed it fixture markup directly.
"""

from __future__ import annotations

from typing import Protocol


class PageElement(Protocol):
    """Protocol for read-only querying of a parsed HTML snapshot.

    All query methods support count validation and raise
    HTMLStructuralAssumptionException if the actual count doesn't match
    expectations.
    """

    @property
    def url(self) -> str:
        """The URL the snapshot was taken from."""
        ...

    def query_xpath(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[PageElement]:
        """Query elements by XPath selector.

        Args:
            selector: XPath expression to execute.
            description: Human-readable description of what's being selected.
            min_count: Minimum number of elements expected (default: 1).
            max_count: Maximum number of elements expected (None = unlimited).

        Returns:
            List of matching PageElement instances.

        Raises:
            HTMLStructuralAssumptionException: If count doesn't match
                expectations.
        """
        ...

    def query_css(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[PageElement]:
        """Like query_xpath, with a CSS selector (translated by cssselect)."""
        ...

    def text_content(self) -> str:
        """Extract the visible text content of the element and descendants."""
        ...

    def get_attribute(self, name: str) -> str | None:
        """Extract an attribute value, or None if it doesn't exist."""
        ...
