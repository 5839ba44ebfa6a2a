# kioskscan/core/pagination.py
"""
Cursor-driven pagination with a hard page ceiling.

Pages are fetched strictly in cursor order; each page call runs under the
retry policy and an exhausted page aborts the whole loop with the
underlying error.
"""
from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import AsyncIterator, Awaitable, Callable, TypeVar

from kioskscan.contracts.objects import Page
from kioskscan.core.resilience import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")

PageFetcher = Callable[[str | None], Awaitable[Page[T]]]

DEFAULT_MAX_PAGES = 1000


async def iterate_pages(
    fetch_page: PageFetcher[T],
    *,
    retry: RetryPolicy | None = None,
    max_pages: int = DEFAULT_MAX_PAGES,
    delay: float = 0.0,
    label: str = "pagination",
) -> AsyncIterator[list[T]]:
    """Yield the data of each page, following ``next_cursor`` until exhausted."""
    retry = retry or RetryPolicy()
    cursor: str | None = None
    pages = 0

    while True:
        if pages >= max_pages:
            logger.warning(
                "%s: pagination limit reached (limit=%d)", label, max_pages
            )
            return

        if pages > 0 and delay > 0:
            await asyncio.sleep(delay)

        page = await retry.run(partial(fetch_page, cursor), label=label)
        pages += 1

        logger.debug(
            "%s: fetched page %d (size=%d, more=%s)",
            label,
            pages,
            len(page.data),
            page.next_cursor is not None,
        )
        yield page.data

        if not page.next_cursor:
            return
        cursor = page.next_cursor


async def paginate(
    fetch_page: PageFetcher[T],
    *,
    retry: RetryPolicy | None = None,
    max_pages: int = DEFAULT_MAX_PAGES,
    delay: float = 0.0,
    label: str = "pagination",
) -> list[T]:
    """Collect every page into one list (see ``iterate_pages``)."""
    out: list[T] = []
    async for batch in iterate_pages(
        fetch_page, retry=retry, max_pages=max_pages, delay=delay, label=label
    ):
        out.extend(batch)
    logger.debug("%s: completed with %d item(s)", label, len(out))
    return out
