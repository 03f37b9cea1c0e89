"""Delta table rendering.

The numbers (deltas, bands, average) are computed by plain functions; the
only console-aware pieces are the ``Styler`` that decorates cells and the
``echo`` callable that receives finished lines. Tests pass ``PlainStyler``
and a list's ``append``.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Sequence
from typing import Protocol

import click

from sortcheck.common.data_models import Article
from sortcheck.common.exceptions import RenderPreconditionError

LARGE_GAP_SECONDS = 300
PLACEHOLDER = "—"
TITLE_HEADER = "Article Name"


class DeltaBand(enum.Enum):
    """Display category of a delta between adjacent articles."""

    FORWARD = "forward"  # newer than the row above; not newest-first
    LARGE_GAP = "large_gap"
    NORMAL = "normal"
    DUPLICATE = "duplicate"


class Styler(Protocol):
    """Decorates table cells and status lines for display."""

    def delta(self, text: str, band: DeltaBand) -> str: ...

    def placeholder(self, text: str) -> str: ...

    def average(self, text: str) -> str: ...

    def status(self, text: str, ok: bool) -> str: ...


class PlainStyler:
    """Styler that leaves text untouched."""

    def delta(self, text: str, band: DeltaBand) -> str:
        return text

    def placeholder(self, text: str) -> str:
        return text

    def average(self, text: str) -> str:
        return text

    def status(self, text: str, ok: bool) -> str:
        return text


class ClickStyler:
    """Styler producing ANSI colours through ``click.style``."""

    _DELTA_STYLES: dict[DeltaBand, dict[str, str]] = {
        DeltaBand.FORWARD: {"fg": "red"},
        DeltaBand.LARGE_GAP: {"fg": "black", "bg": "yellow"},
        DeltaBand.NORMAL: {"fg": "green"},
        DeltaBand.DUPLICATE: {"fg": "yellow"},
    }

    def delta(self, text: str, band: DeltaBand) -> str:
        return click.style(text, **self._DELTA_STYLES[band])

    def placeholder(self, text: str) -> str:
        return click.style(text, fg="bright_black")

    def average(self, text: str) -> str:
        return click.style(text, fg="cyan")

    def status(self, text: str, ok: bool) -> str:
        return click.style(text, fg="green" if ok else "red")


def classify_delta(
    delta: int, threshold: int = LARGE_GAP_SECONDS
) -> DeltaBand:
    """Place a delta into its display band.

    Args:
        delta: ``unix[i] - unix[i-1]`` in seconds.
        threshold: Gap size (seconds) beyond which a backwards step is
            flagged as a large gap.

    Returns:
        The matching DeltaBand.
    """
    if delta > 0:
        return DeltaBand.FORWARD
    if delta < -threshold:
        return DeltaBand.LARGE_GAP
    if delta < 0:
        return DeltaBand.NORMAL
    return DeltaBand.DUPLICATE


def compute_deltas(articles: Sequence[Article]) -> list[int]:
    """Compute the delta for every adjacent pair of articles.

    Raises:
        RenderPreconditionError: If a delta isn't an integer.
    """
    deltas: list[int] = []
    for i in range(1, len(articles)):
        delta = articles[i].epoch - articles[i - 1].epoch
        if not isinstance(delta, int):
            raise RenderPreconditionError(f"Non-integer delta at row {i}")
        deltas.append(delta)
    return deltas


def average_delta(deltas: Sequence[int]) -> float | None:
    """Absolute mean of ``deltas`` rounded to one decimal, or None if empty."""
    if not deltas:
        return None
    return abs(round(sum(deltas) / len(deltas), 1))


def format_delta(delta: int) -> str:
    """Render a delta with an explicit sign for forward steps (``+60``)."""
    return f"+{delta}" if delta > 0 else str(delta)


def display_table(
    articles: Sequence[Article],
    count: int = 10,
    styler: Styler | None = None,
    echo: Callable[[str], object] = click.echo,
    threshold: int = LARGE_GAP_SECONDS,
) -> None:
    """Print the first ``count`` articles with the delta to the row above.

    The title column is sized to the longest title in the whole sequence,
    not only the printed rows. The closing average covers every adjacent
    pair in ``articles``.

    Args:
        articles: Non-empty sequence of articles in display order.
        count: Number of rows to print.
        styler: Cell decorator; defaults to ClickStyler.
        echo: Receives each output line.
        threshold: Large-gap threshold in seconds.

    Raises:
        RenderPreconditionError: If ``articles`` is not a non-empty sequence.
    """
    if not isinstance(articles, Sequence):
        raise RenderPreconditionError("Timestamps input is not a sequence.")
    if not articles:
        raise RenderPreconditionError("No timestamps provided for display.")

    styler = styler or ClickStyler()
    deltas = compute_deltas(articles)
    width = max(max(len(a.title) for a in articles), len(TITLE_HEADER))
    shown = min(count, len(articles))

    echo(f"\nChecking first {shown} timestamps:\n")
    echo(
        f"{'Index':<5} | {TITLE_HEADER:<{width}} | {'ISO Timestamp':<20} | "
        f"{'Unix Timestamp':<14} | Unix Delta in Seconds"
    )
    echo(
        f"{'-' * 5} | {'-' * width} | {'-' * 20} | {'-' * 14} | {'-' * 21}"
    )

    for i in range(shown):
        article = articles[i]
        if i == 0:
            delta_cell = styler.placeholder(PLACEHOLDER)
        else:
            delta = deltas[i - 1]
            delta_cell = styler.delta(
                format_delta(delta), classify_delta(delta, threshold)
            )
        echo(
            f"{i + 1:<5} | {article.title:<{width}} | {article.iso:<20} | "
            f"{article.unix:<14} | {delta_cell}"
        )

    average = average_delta(deltas)
    if average is not None:
        echo(
            f"\nAvg gap between posts: {styler.average(f'{average:.1f}')} "
            "seconds"
        )
