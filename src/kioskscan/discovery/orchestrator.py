# kioskscan/discovery/orchestrator.py
"""
Discovery orchestrator.

Composes the capability, content and direct-ownership resolvers into one
ownership graph per wallet. Container content resolution fans out
concurrently; per-container and direct-ownership failures degrade to
partial results. Only address validation and capability listing are fatal.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Iterable

from kioskscan.clients.rpc import ObjectGraphClient
from kioskscan.contracts.discovery import (
    ContainerCapability,
    ContentItem,
    ContentSelection,
    DiscoveryResult,
    DiscoveryUpdate,
    UpdateCallback,
)
from kioskscan.contracts.objects import RawObjectRecord
from kioskscan.core.config import DiscoveryConfig
from kioskscan.core.errors import DiscoveryError
from kioskscan.core.validation import require_address
from kioskscan.discovery.capabilities import CapabilityResolver
from kioskscan.discovery.contents import ContentResolver
from kioskscan.discovery.direct import DirectOwnershipResolver
from kioskscan.discovery.sweep import OwnedObjectsSweep

logger = logging.getLogger(__name__)


def merge_items(*groups: Iterable[ContentItem]) -> list[ContentItem]:
    """Concatenate item groups, keeping the first item seen per ``item_id``.

    Pass container-derived groups before the direct-ownership group so that
    container placement wins for objects surfaced by both.
    """
    out: list[ContentItem] = []
    seen: set[str] = set()
    for group in groups:
        for item in group:
            if item.item_id in seen:
                continue
            seen.add(item.item_id)
            out.append(item)
    return out


def group_by_type(items: Iterable[ContentItem]) -> list[ContentSelection]:
    """Group items into per-type selections, in first-seen type order."""
    groups: dict[str, list[str]] = {}
    for item in items:
        groups.setdefault(item.type_tag, []).append(item.item_id)
    return [
        ContentSelection(type_tag=t, available_count=len(ids), item_ids=ids)
        for t, ids in groups.items()
    ]


class DiscoveryOrchestrator:
    """
    Build the ownership graph of a wallet.

    Example:
        orchestrator = DiscoveryOrchestrator(client, config)
        result = await orchestrator.discover(address)

        # or stream partial results
        await orchestrator.discover_progressive(address, on_update)
    """

    def __init__(
        self,
        client: ObjectGraphClient,
        config: DiscoveryConfig,
        *,
        capabilities: CapabilityResolver | None = None,
        contents: ContentResolver | None = None,
        direct: DirectOwnershipResolver | None = None,
    ) -> None:
        self._client = client
        self._config = config
        self._capabilities = capabilities or CapabilityResolver(client, config)
        self._contents = contents or ContentResolver(client, config)
        self._direct = direct or DirectOwnershipResolver(client, config)

    @property
    def capabilities(self) -> CapabilityResolver:
        return self._capabilities

    async def discover(self, address: str) -> DiscoveryResult:
        """
        Resolve containers, their contents and directly owned items.

        Raises:
            ValidationError: ``address`` is malformed.
            DiscoveryError: Capability listing failed.
        """
        require_address(address, "address")
        logger.info("Starting discovery: address=%s", address)

        sweep = OwnedObjectsSweep(self._client, address, self._config)
        try:
            containers = await self._capabilities.resolve(address, sweep=sweep)
            contained, direct = await asyncio.gather(
                asyncio.gather(*(self._container_items(c) for c in containers)),
                self._direct_items(address, sweep),
            )
        except DiscoveryError:
            raise
        except Exception as exc:
            logger.error("Discovery failed: address=%s error=%s", address, exc)
            raise DiscoveryError(
                f"Discovery failed: {exc}", "DISCOVERY_FAILED", {"address": address}
            ) from exc

        items = merge_items(*contained, direct)
        logger.info(
            "Discovery complete: address=%s containers=%d items=%d",
            address,
            len(containers),
            len(items),
        )
        return DiscoveryResult(containers=containers, items=items)

    async def discover_progressive(
        self, address: str, on_update: UpdateCallback
    ) -> DiscoveryResult:
        """
        Stream discovery through ``on_update`` while it runs.

        The wallet sweep and the capability -> container-content chain run
        concurrently. ``on_update`` receives the containers once known, item
        batches as pages and containers complete (never repeating an item
        id), and finally ``DiscoveryUpdate(done=True)``. ``on_update`` may be
        a plain function or a coroutine function.
        """
        require_address(address, "address")
        logger.info("Starting progressive discovery: address=%s", address)

        emitted: set[str] = set()
        direct_items: list[ContentItem] = []
        container_items: list[list[ContentItem]] = []

        async def emit(update: DiscoveryUpdate) -> None:
            result = on_update(update)
            if inspect.isawaitable(result):
                await result

        async def emit_items(items: list[ContentItem]) -> None:
            fresh = [i for i in items if i.item_id not in emitted]
            if not fresh:
                return
            emitted.update(i.item_id for i in fresh)
            await emit(DiscoveryUpdate(items=fresh))

        async def on_page(records: list[RawObjectRecord]) -> None:
            items = self._direct.classify(records)
            direct_items.extend(items)
            await emit_items(items)

        sweep = OwnedObjectsSweep(
            self._client, address, self._config, on_page=on_page
        )

        async def stream_wallet() -> None:
            try:
                await sweep.get()
            except Exception as exc:
                logger.warning(
                    "Wallet object stream failed: address=%s error=%s", address, exc
                )

        async def stream_containers() -> list[ContainerCapability]:
            containers = await self._capabilities.resolve(address, sweep=sweep)
            if containers:
                await emit(DiscoveryUpdate(containers=list(containers)))

            async def stream_one(capability: ContainerCapability) -> None:
                items = await self._container_items(capability)
                container_items.append(items)
                await emit_items(items)

            await asyncio.gather(*(stream_one(c) for c in containers))
            return containers

        try:
            _, containers = await asyncio.gather(stream_wallet(), stream_containers())
        except DiscoveryError:
            raise
        except Exception as exc:
            logger.error(
                "Progressive discovery failed: address=%s error=%s", address, exc
            )
            raise DiscoveryError(
                f"Progressive discovery failed: {exc}",
                "PROGRESSIVE_DISCOVERY_FAILED",
                {"address": address},
            ) from exc

        await emit(DiscoveryUpdate(containers=list(containers), done=True))
        return DiscoveryResult(
            containers=containers,
            items=merge_items(*container_items, direct_items),
        )

    async def available_item_types(self, address: str) -> list[ContentSelection]:
        """Discovered items grouped by type tag, with counts."""
        require_address(address, "address")
        try:
            result = await self.discover(address)
        except DiscoveryError as exc:
            raise DiscoveryError(
                f"Failed to get available item types: {exc}",
                "ITEM_TYPES_FETCH_FAILED",
                {"address": address},
            ) from exc
        selections = group_by_type(result.items)
        logger.info(
            "Available item types: address=%s types=%d", address, len(selections)
        )
        return selections

    async def _container_items(
        self, capability: ContainerCapability
    ) -> list[ContentItem]:
        try:
            return await self._contents.resolve(capability.container_id)
        except Exception as exc:
            logger.warning(
                "Container content resolution failed: container=%s error=%s",
                capability.container_id,
                exc,
            )
            return []

    async def _direct_items(
        self, address: str, sweep: OwnedObjectsSweep
    ) -> list[ContentItem]:
        try:
            return await self._direct.resolve(address, sweep=sweep)
        except DiscoveryError as exc:
            logger.warning(
                "Direct ownership resolution failed: address=%s error=%s",
                address,
                exc,
            )
            return []
