"""LxmlPageElement implementation wrapping CheckedHtmlElement.

This is the PageElement implementation used everywhere: the driver builds
one from ``page.content()`` and tests build one from fixture HTML.
"""

from __future__ import annotations

from lxml import html

from sortcheck.common.checked_html import CheckedHtmlElement


class LxmlPageElement:
    """Implementation of the PageElement protocol over CheckedHtmlElement.

    Attributes:
        _element: The underlying CheckedHtmlElement.
        _url: The URL the snapshot was taken from.
    """

    def __init__(self, element: CheckedHtmlElement, url: str = ""):
        self._element = element
        self._url = url

    @classmethod
    def from_html(cls, content: str, url: str = "") -> LxmlPageElement:
        """Parse an HTML document into a root page element.

        Args:
            content: Serialized HTML, e.g. from ``page.content()``.
            url: URL the document came from, used in error context.

        Returns:
            LxmlPageElement wrapping the document root.
        """
        doc = html.fromstring(content)
        return cls(CheckedHtmlElement(doc, url), url)

    @property
    def url(self) -> str:
        return self._url

    def query_xpath(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[LxmlPageElement]:
        checked_elements = self._element.checked_xpath(
            selector, description, min_count, max_count
        )
        return [LxmlPageElement(elem, self._url) for elem in checked_elements]

    def query_css(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[LxmlPageElement]:
        """Query elements by CSS selector.

        Raises:
            HTMLStructuralAssumptionException: If count doesn't match
                expectations.
        """
        checked_elements = self._element.checked_css(
            selector, description, min_count, max_count
        )
        return [LxmlPageElement(elem, self._url) for elem in checked_elements]

    def text_content(self) -> str:
        return self._element.text_content()

    def get_attribute(self, name: str) -> str | None:
        return self._element.get(name)
