# kioskscan/planning/planner.py
"""
Bulk reconciliation planner.

For every recipient address, find the container the recipient already
controls (if any). The resulting targets tell the transaction compiler
whether to reuse that container or create a new one.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from kioskscan.contracts.planning import ReconciliationTarget, TargetStatus
from kioskscan.core.config import DiscoveryConfig
from kioskscan.core.errors import ValidationError
from kioskscan.core.validation import is_valid_address
from kioskscan.discovery.capabilities import CapabilityResolver

logger = logging.getLogger(__name__)


def clean_addresses(addresses: Iterable[str], max_count: int) -> list[str]:
    """
    Drop malformed and duplicate addresses, keeping first occurrences.

    Raises:
        ValidationError: More than ``max_count`` addresses remain.
    """
    valid: list[str] = []
    invalid: list[str] = []
    duplicates: list[str] = []
    seen: set[str] = set()
    for raw in addresses:
        address = raw.strip() if isinstance(raw, str) else raw
        if not is_valid_address(address):
            invalid.append(str(raw))
            continue
        key = address.lower()
        if key in seen:
            duplicates.append(address)
            continue
        seen.add(key)
        valid.append(address)

    if invalid:
        logger.warning("Invalid wallet addresses found: %s", invalid)
    if duplicates:
        logger.warning("Duplicate wallet addresses dropped: %s", duplicates)

    if len(valid) > max_count:
        raise ValidationError(
            f"Too many recipients. Maximum allowed: {max_count}", "recipients"
        )
    return valid


def parse_addresses(text: str, max_count: int = 100) -> list[str]:
    """Split comma-separated input into cleaned addresses."""
    parts = [p.strip() for p in (text or "").split(",")]
    return clean_addresses([p for p in parts if p], max_count)


class BulkReconciliationPlanner:
    """
    Turn recipient addresses into reconciliation targets.

    Example:
        planner = BulkReconciliationPlanner(CapabilityResolver(client, config), config)
        targets = await planner.prepare(addresses)
    """

    def __init__(
        self, resolver: CapabilityResolver, config: DiscoveryConfig
    ) -> None:
        self._resolver = resolver
        self._config = config

    async def prepare(self, addresses: list[str]) -> list[ReconciliationTarget]:
        """
        Resolve each address's existing container.

        Malformed and duplicate addresses are filtered out before processing.
        A resolver failure marks only that target as failed; the call itself
        raises only ``ValidationError`` when too many addresses remain.

        Args:
            addresses: Recipient wallet addresses, possibly with junk entries

        Returns:
            One target per cleaned address, in input order

        Raises:
            ValidationError: More than ``bulk_max_recipients`` addresses remain
        """
        cleaned = clean_addresses(addresses, self._config.bulk_max_recipients)
        logger.info("Preparing reconciliation targets: count=%d", len(cleaned))

        size = max(1, self._config.bulk_batch_size)
        targets: list[ReconciliationTarget] = []
        for start in range(0, len(cleaned), size):
            batch = cleaned[start : start + size]
            targets.extend(
                await asyncio.gather(*(self._prepare_one(a) for a in batch))
            )
            if start + size < len(cleaned):
                await asyncio.sleep(self._config.bulk_batch_delay)

        logger.info(
            "Targets prepared: total=%d with_container=%d without_container=%d failed=%d",
            len(targets),
            sum(1 for t in targets if t.has_container),
            sum(1 for t in targets if not t.has_container and t.status is not TargetStatus.FAILED),
            sum(1 for t in targets if t.status is TargetStatus.FAILED),
        )
        return targets

    async def _prepare_one(self, address: str) -> ReconciliationTarget:
        try:
            capabilities = await self._resolver.resolve(address)
        except Exception as exc:
            logger.warning(
                "Failed to prepare target: address=%s error=%s", address, exc
            )
            return ReconciliationTarget.failed(address, str(exc) or type(exc).__name__)

        if not capabilities:
            return ReconciliationTarget(address=address, has_container=False)

        first = capabilities[0]
        return ReconciliationTarget(
            address=address,
            container_id=first.container_id,
            capability_id=first.capability_id,
            has_container=True,
        )
