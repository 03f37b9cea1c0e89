"""sortcheck CLI: scrape the listing, check its order, print the report.

Usage:
    sortcheck                         # 100 newest Hacker News articles
    sortcheck --count 30 --display 10
    sortcheck --url http://localhost:8080/newest --headed -v
    python -m sortcheck
"""

from __future__ import annotations

import asyncio
import logging

import click

from sortcheck.common.exceptions import SortCheckException
from sortcheck.driver.pagination_driver import (
    DEFAULT_URL,
    MAX_ARTICLES,
    DriverSettings,
    PaginationDriver,
    RunReport,
)
from sortcheck.report import ClickStyler, PlainStyler, Styler

logger = logging.getLogger(__name__)


@click.command()
@click.version_option(package_name="sortcheck")
@click.option(
    "--count",
    type=click.IntRange(min=2),
    default=MAX_ARTICLES,
    show_default=True,
    help="Number of articles to collect and validate.",
)
@click.option(
    "--display",
    type=click.IntRange(min=0),
    default=None,
    help="Number of table rows to print (default: --count).",
)
@click.option(
    "--url",
    default=DEFAULT_URL,
    show_default=True,
    help="Listing page to start from.",
)
@click.option("--headed", is_flag=True, help="Show the browser window.")
@click.option("--no-color", is_flag=True, help="Disable coloured output.")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging.")
def cli(
    count: int,
    display: int | None,
    url: str,
    headed: bool,
    no_color: bool,
    verbose: bool,
) -> None:
    """Check that a listing's articles are sorted newest to oldest.

    Collects COUNT articles across pages, reports whether they are in
    descending time order and prints a table of the gaps between them.
    """
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = DriverSettings(
        url=url, target=count, display_count=display, headless=not headed
    )
    styler: Styler = PlainStyler() if no_color else ClickStyler()

    try:
        asyncio.run(_run(settings, styler))
    except SortCheckException as e:
        click.echo(
            styler.status("Script threw an error:", False) + f" {e}",
            err=True,
        )
        raise SystemExit(1) from e
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        raise SystemExit(1) from e


async def _run(settings: DriverSettings, styler: Styler) -> RunReport:
    async with PaginationDriver.open(settings, styler=styler) as driver:
        return await driver.run()


def main() -> None:
    """Entry point for the ``sortcheck`` console script."""
    cli()
