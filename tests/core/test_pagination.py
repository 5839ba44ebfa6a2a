# tests/core/test_pagination.py
from __future__ import annotations

import asyncio

import pytest

from kioskscan.contracts.objects import Page
from kioskscan.core.pagination import iterate_pages, paginate
from kioskscan.core.resilience import RetryPolicy

NO_WAIT = RetryPolicy(attempts=3, base_delay=0.0)


def pages_from(chunks: list[list[int]]):
    """Fetcher serving ``chunks`` with cursors "1", "2", ...; records cursors seen."""
    seen: list[str | None] = []

    async def fetch(cursor: str | None) -> Page[int]:
        seen.append(cursor)
        index = int(cursor) if cursor else 0
        next_cursor = str(index + 1) if index + 1 < len(chunks) else None
        return Page(data=chunks[index], next_cursor=next_cursor)

    return fetch, seen


@pytest.mark.asyncio
async def test_collects_pages_in_cursor_order():
    fetch, seen = pages_from([[1, 2], [3], [4, 5]])

    result = await paginate(fetch, retry=NO_WAIT)

    assert result == [1, 2, 3, 4, 5]
    assert seen == [None, "1", "2"]


@pytest.mark.asyncio
async def test_single_page_without_cursor():
    fetch, seen = pages_from([["only"]])

    assert await paginate(fetch, retry=NO_WAIT) == ["only"]
    assert seen == [None]


@pytest.mark.asyncio
async def test_empty_cursor_string_ends_loop():
    calls = []

    async def fetch(cursor):
        calls.append(cursor)
        return Page(data=["a"], next_cursor="")

    assert await paginate(fetch, retry=NO_WAIT) == ["a"]
    assert calls == [None]


@pytest.mark.asyncio
async def test_cyclic_cursor_stops_at_page_ceiling(caplog):
    calls = []

    async def fetch(cursor):
        calls.append(cursor)
        return Page(data=[len(calls)], next_cursor="same")

    result = await paginate(fetch, retry=NO_WAIT, max_pages=4, label="loop")

    assert result == [1, 2, 3, 4]
    assert len(calls) == 4
    assert "pagination limit reached" in caplog.text


@pytest.mark.asyncio
async def test_page_failure_retried_then_aborts():
    attempts = []

    async def fetch(cursor):
        if cursor is None:
            return Page(data=[1], next_cursor="1")
        attempts.append(cursor)
        raise ConnectionError("page lost")

    with pytest.raises(ConnectionError, match="page lost"):
        await paginate(fetch, retry=NO_WAIT)
    assert attempts == ["1", "1", "1"]


@pytest.mark.asyncio
async def test_transient_page_failure_recovers():
    failures = {"1": 1}

    async def fetch(cursor):
        if failures.get(cursor):
            failures[cursor] -= 1
            raise ConnectionError("blip")
        if cursor is None:
            return Page(data=["a"], next_cursor="1")
        return Page(data=["b"], next_cursor=None)

    assert await paginate(fetch, retry=NO_WAIT) == ["a", "b"]


@pytest.mark.asyncio
async def test_delay_only_between_pages(monkeypatch):
    sleeps: list[float] = []

    async def fake_sleep(seconds):
        sleeps.append(seconds)

    monkeypatch.setattr(asyncio, "sleep", fake_sleep)
    fetch, _ = pages_from([[1], [2], [3]])

    await paginate(fetch, retry=NO_WAIT, delay=0.1)

    assert sleeps == [0.1, 0.1]


@pytest.mark.asyncio
async def test_iterate_pages_yields_batches():
    fetch, _ = pages_from([[1, 2], [], [3]])

    batches = [b async for b in iterate_pages(fetch, retry=NO_WAIT)]

    assert batches == [[1, 2], [], [3]]
