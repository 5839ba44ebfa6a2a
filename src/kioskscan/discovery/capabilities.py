# kioskscan/discovery/capabilities.py
"""
Capability resolver: finds the container-ownership capabilities
("KioskOwnerCap" objects) held by a wallet.

Strategy order:
  1. owned objects filtered server-side by the capability struct type;
  2. on any failure, an unfiltered sweep filtered locally by type markers.
"""
from __future__ import annotations

import asyncio
import logging

from kioskscan.clients.rpc import ObjectGraphClient
from kioskscan.contracts.discovery import ContainerCapability
from kioskscan.contracts.objects import (
    CAPABILITY_OPTIONS,
    CONTAINER_OPTIONS,
    Page,
    RawObjectRecord,
)
from kioskscan.core.config import DiscoveryConfig
from kioskscan.core.errors import DiscoveryError
from kioskscan.core.pagination import paginate
from kioskscan.core.resilience import RetryPolicy
from kioskscan.core.validation import require_address
from kioskscan.discovery.extractors import (
    build_chain,
    count_field,
    first_match,
    id_field,
    is_capability_type,
)
from kioskscan.discovery.sweep import OwnedObjectsSweep

logger = logging.getLogger(__name__)


class CapabilityResolver:
    """Resolve ``ContainerCapability`` records for a wallet address."""

    def __init__(self, client: ObjectGraphClient, config: DiscoveryConfig) -> None:
        self._client = client
        self._config = config
        self._retry = RetryPolicy(config.retry_attempts, config.retry_base_delay)
        self._container_chain = build_chain(id_field, config.container_id_fields)
        self._count_chain = build_chain(count_field, config.item_count_fields)

    async def resolve(
        self, address: str, *, sweep: OwnedObjectsSweep | None = None
    ) -> list[ContainerCapability]:
        """
        Return every capability owned by ``address``; order is not significant.

        Raises:
            ValidationError: ``address`` is malformed (no remote call issued).
            DiscoveryError: Both strategies failed to list owned objects.
        """
        require_address(address, "address")
        logger.info("Starting container discovery: address=%s", address)

        try:
            records = await self.fetch_capability_records(address, sweep=sweep)
        except Exception as exc:
            logger.error("Container discovery failed: address=%s error=%s", address, exc)
            raise DiscoveryError(
                f"Failed to fetch containers: {exc}",
                "CAPABILITY_DISCOVERY_FAILED",
                {"address": address},
            ) from exc

        capabilities = await self._build_capabilities(records)
        logger.info(
            "Container discovery completed: address=%s found=%d",
            address,
            len(capabilities),
        )
        return capabilities

    async def fetch_capability_records(
        self, address: str, *, sweep: OwnedObjectsSweep | None = None
    ) -> list[RawObjectRecord]:
        try:
            return await self._fetch_filtered(address)
        except Exception as exc:
            logger.warning(
                "Capability type filter failed, falling back to full scan: %s", exc
            )
        return await self.fetch_by_scan(address, sweep=sweep)

    async def _fetch_filtered(self, address: str) -> list[RawObjectRecord]:
        type_filter = {"StructType": self._config.capability_type}

        async def fetch_page(cursor: str | None) -> Page[RawObjectRecord]:
            return await self._client.get_owned_objects(
                address,
                options=CAPABILITY_OPTIONS,
                filter=type_filter,
                cursor=cursor,
                limit=self._config.owned_objects_page_size,
            )

        records = await paginate(
            fetch_page,
            retry=self._retry,
            max_pages=self._config.max_pages,
            delay=self._config.rate_limit_delay,
            label=f"capabilities of {address}",
        )
        logger.info("Capability type filter successful: found=%d", len(records))
        return records

    async def fetch_by_scan(
        self, address: str, *, sweep: OwnedObjectsSweep | None = None
    ) -> list[RawObjectRecord]:
        """Unfiltered sweep, then keep records whose type looks like a capability."""
        sweep = sweep or OwnedObjectsSweep(self._client, address, self._config)
        records = await sweep.get()
        matched = [
            r
            for r in records
            if is_capability_type(
                r.type_tag,
                self._config.container_markers,
                self._config.capability_markers,
            )
        ]
        logger.info(
            "Manual capability filtering completed: scanned=%d matched=%d",
            len(records),
            len(matched),
        )
        return matched

    async def _build_capabilities(
        self, records: list[RawObjectRecord]
    ) -> list[ContainerCapability]:
        out: list[ContainerCapability] = []
        seen: set[str] = set()
        for record in records:
            if record.object_id in seen:
                continue
            container_id = self.extract_container_id(record)
            if container_id is None:
                logger.warning(
                    "No valid container id on capability %s (fields=%s)",
                    record.object_id,
                    sorted(record.fields),
                )
                continue
            if out:
                await asyncio.sleep(self._config.rate_limit_delay)
            item_count = await self.item_count(container_id)
            seen.add(record.object_id)
            out.append(
                ContainerCapability(
                    capability_id=record.object_id,
                    container_id=container_id,
                    item_count=item_count,
                )
            )
        return out

    def extract_container_id(self, record: RawObjectRecord) -> str | None:
        return first_match(self._container_chain, record.fields)

    async def item_count(self, container_id: str) -> int:
        """Item count of a container; 0 when absent or unreadable."""
        try:
            container = await self._retry.run(
                lambda: self._client.get_object(container_id, options=CONTAINER_OPTIONS),
                label=f"container {container_id}",
            )
        except Exception as exc:
            logger.warning(
                "Failed to read item count, using 0: container=%s error=%s",
                container_id,
                exc,
            )
            return 0
        if container is None:
            return 0
        count = first_match(self._count_chain, container.fields)
        return count if count is not None else 0
