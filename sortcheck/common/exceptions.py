"""Exception types for sort-check errors.

Two families live here. ``SortCheckException`` and its subclasses are
invariant violations: the page, the extracted batch or the caller broke a
contract, and the run cannot continue. ``TransientException`` subclasses
describe failures that may resolve on retry, such as a pagination click
that did not produce a new page.
"""

from typing import Any


class SortCheckException(Exception):
    """Base class for fatal invariant violations.

    Carries the URL that was being processed and an optional context dict
    so the top-level error report shows what was being looked at.
    """

    def __init__(
        self,
        message: str,
        request_url: str = "",
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable description of the violation.
            request_url: The URL of the page being processed, if any.
            context: Optional dict of additional context (selector, counts).
        """
        self.message = message
        self.request_url = request_url
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context.

        Returns:
            Formatted error message string.
        """
        parts = [self.message]
        if self.request_url:
            parts.append(f"URL: {self.request_url}")

        if self.context:
            parts.append("Context:")
            for key, value in self.context.items():
                parts.append(f"  {key}: {value}")

        return "\n".join(parts)


class HTMLStructuralAssumptionException(SortCheckException):
    """Raised when a checked selector returns an unexpected number of nodes.

    Attributes:
        selector: The XPath or CSS selector that was used.
        selector_type: Type of selector ("xpath" or "css").
    """

    def __init__(
        self,
        selector: str,
        selector_type: str,
        description: str,
        expected_min: int,
        expected_max: int | None,
        actual_count: int,
        request_url: str = "",
    ) -> None:
        self.selector = selector
        self.selector_type = selector_type
        self.description = description
        self.expected_min = expected_min
        self.expected_max = expected_max
        self.actual_count = actual_count

        if expected_max is None:
            expected_str = f"at least {expected_min}"
        elif expected_min == expected_max:
            expected_str = f"exactly {expected_min}"
        else:
            expected_str = f"between {expected_min} and {expected_max}"

        message = (
            f"HTML structure mismatch: Expected {expected_str} "
            f"elements for '{description}', but found {actual_count}"
        )

        context = {
            "selector": selector,
            "selector_type": selector_type,
            "expected_min": expected_min,
            "expected_max": expected_max
            if expected_max is not None
            else "unlimited",
            "actual_count": actual_count,
        }

        super().__init__(message, request_url, context)


class ExtractionError(SortCheckException):
    """Raised when an extracted batch breaks its post-conditions.

    Individual malformed rows are filtered by the extractor; this exception
    means the batch as a whole is unusable (empty, or a record with a bad
    title/ISO/unix field slipped through).

    Attributes:
        reason: Short description of the broken post-condition.
    """

    def __init__(
        self,
        reason: str,
        request_url: str = "",
        context: dict[str, Any] | None = None,
    ) -> None:
        self.reason = reason
        super().__init__(
            f"Extraction failed: {reason}", request_url, context
        )


class ExtractionTimeout(ExtractionError):
    """Raised when no listing rows appear within the wait timeout.

    Attributes:
        selector: The row selector that was waited on.
        timeout_ms: The wait timeout in milliseconds.
    """

    def __init__(
        self, selector: str, timeout_ms: int, request_url: str = ""
    ) -> None:
        self.selector = selector
        self.timeout_ms = timeout_ms
        super().__init__(
            f"no rows matching '{selector}' appeared within {timeout_ms}ms",
            request_url,
            {"selector": selector, "timeout_ms": timeout_ms},
        )


class OrderPreconditionError(SortCheckException):
    """Raised when the order checker is handed an unusable sequence."""


class RenderPreconditionError(SortCheckException):
    """Raised when the table renderer is handed an unusable sequence."""


class PaginationExhausted(SortCheckException):
    """Raised when pagination stopped before the target count was reached.

    Attributes:
        collected: Number of records accumulated before stopping.
        target: Number of records that were required.
    """

    def __init__(
        self, collected: int, target: int, request_url: str = ""
    ) -> None:
        self.collected = collected
        self.target = target
        super().__init__(
            f"Expected exactly {target} articles, collected {collected}",
            request_url,
            {"collected": collected, "target": target},
        )


class TransientException(Exception):
    """Base class for errors that might resolve on retry.

    The pagination driver is responsible for the retry strategy; these never
    escape it.
    """

    pass


class PaginationAdvanceFailed(TransientException):
    """Raised when a single attempt to load the next page fails.

    Attributes:
        reason: Why the attempt failed (missing link, navigation timeout).
        attempt: 1-based attempt number.
    """

    def __init__(self, reason: str, attempt: int) -> None:
        self.reason = reason
        self.attempt = attempt
        self.message = f"Pagination attempt {attempt} failed: {reason}"
        super().__init__(self.message)
