"""Newest-first ordering check for extracted articles."""

from __future__ import annotations

import re
from collections.abc import Sequence

from sortcheck.common.data_models import Article
from sortcheck.common.exceptions import OrderPreconditionError

_DIGITS = re.compile(r"^[0-9]+$")


def check_order(articles: Sequence[Article]) -> bool:
    """Check that articles are sorted newest to oldest.

    Adjacent articles with equal timestamps count as correctly ordered.
    Every article is checked for a positive digit-string timestamp, the
    first one included, so a broken head of the list is reported rather
    than compared.

    Args:
        articles: At least two articles in display order.

    Returns:
        True if every timestamp is less than or equal to the one before it,
        False at the first pair where time goes forward.

    Raises:
        OrderPreconditionError: If fewer than two articles are given, or an
            article is missing or has a non-positive/non-numeric timestamp.
    """
    if len(articles) < 2:
        raise OrderPreconditionError(
            "Not enough timestamps to compare order.",
            context={"count": len(articles)},
        )

    previous = _checked_epoch(articles[0], 0)
    for i in range(1, len(articles)):
        current = _checked_epoch(articles[i], i)
        if current > previous:
            return False
        previous = current

    return True


def _checked_epoch(article: Article | None, index: int) -> int:
    if article is None:
        raise OrderPreconditionError(f"Missing timestamp at index {index}")
    if not isinstance(article.unix, str) or not _DIGITS.match(article.unix):
        raise OrderPreconditionError(
            f"Invalid UNIX at index {index}: {article.unix}"
        )
    epoch = int(article.unix)
    if epoch <= 0:
        raise OrderPreconditionError(
            f"Non-positive UNIX value at index {index}"
        )
    return epoch
