# kioskscan/discovery/sweep.py
"""
One unfiltered pass over a wallet's owned objects, shared per run.

Capability fallback and direct-ownership classification read the same
records; within one orchestration pass they await the same sweep task so
the full pagination happens at most once.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Union

from kioskscan.clients.rpc import ObjectGraphClient
from kioskscan.contracts.objects import SWEEP_OPTIONS, RawObjectRecord
from kioskscan.core.config import DiscoveryConfig
from kioskscan.core.pagination import iterate_pages
from kioskscan.core.resilience import RetryPolicy

logger = logging.getLogger(__name__)

PageListener = Callable[[list[RawObjectRecord]], Union[None, Awaitable[None]]]


class OwnedObjectsSweep:
    """Memoized unfiltered owned-objects pagination for one address.

    Example:
        sweep = OwnedObjectsSweep(client, address, config)
        records = await sweep.get()   # paginates
        again = await sweep.get()     # same list, no new calls
    """

    def __init__(
        self,
        client: ObjectGraphClient,
        address: str,
        config: DiscoveryConfig,
        *,
        on_page: PageListener | None = None,
    ) -> None:
        self._client = client
        self._address = address
        self._config = config
        self._on_page = on_page
        self._task: asyncio.Task[list[RawObjectRecord]] | None = None

    @property
    def address(self) -> str:
        return self._address

    @property
    def started(self) -> bool:
        return self._task is not None

    async def get(self) -> list[RawObjectRecord]:
        if self._task is None:
            self._task = asyncio.ensure_future(self._collect())
        return await self._task

    async def _collect(self) -> list[RawObjectRecord]:
        records: list[RawObjectRecord] = []
        async for batch in iterate_pages(
            self._fetch_page_at,
            retry=RetryPolicy(
                self._config.retry_attempts, self._config.retry_base_delay
            ),
            max_pages=self._config.max_pages,
            delay=self._config.rate_limit_delay,
            label=f"owned objects of {self._address}",
        ):
            records.extend(batch)
            if self._on_page is not None and batch:
                result = self._on_page(batch)
                if inspect.isawaitable(result):
                    await result

        logger.info(
            "All owned objects fetched: address=%s total=%d",
            self._address,
            len(records),
        )
        return records

    async def _fetch_page_at(self, cursor: str | None):
        return await self._client.get_owned_objects(
            self._address,
            options=SWEEP_OPTIONS,
            cursor=cursor,
            limit=self._config.owned_objects_page_size,
        )
