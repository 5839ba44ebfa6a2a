# kioskscan/discovery/direct.py
"""
Direct-ownership resolver: content items held by the wallet itself.
"""
from __future__ import annotations

import logging

from kioskscan.clients.rpc import ObjectGraphClient
from kioskscan.contracts.discovery import DIRECT_OWNERSHIP, ContentItem
from kioskscan.contracts.objects import RawObjectRecord
from kioskscan.core.config import DiscoveryConfig
from kioskscan.core.errors import DiscoveryError
from kioskscan.core.validation import require_address
from kioskscan.discovery.contents import to_content_item
from kioskscan.discovery.extractors import is_content_object
from kioskscan.discovery.sweep import OwnedObjectsSweep

logger = logging.getLogger(__name__)


class DirectOwnershipResolver:
    """
    Resolve content items owned by the wallet itself.

    Items found here carry ``DIRECT_OWNERSHIP`` as their container id.
    """

    def __init__(self, client: ObjectGraphClient, config: DiscoveryConfig) -> None:
        self._client = client
        self._config = config

    def classify(self, records: list[RawObjectRecord]) -> list[ContentItem]:
        """
        Keep the records that look like content items.

        Args:
            records: Owned-object records from one or more sweep pages

        Returns:
            Items tagged ``DIRECT_OWNERSHIP``, in record order
        """
        return [
            to_content_item(r, DIRECT_OWNERSHIP)
            for r in records
            if is_content_object(r, self._config.content_markers)
        ]

    async def resolve(
        self, address: str, *, sweep: OwnedObjectsSweep | None = None
    ) -> list[ContentItem]:
        """
        Classify every object ``address`` owns directly.

        Pass the run's ``sweep`` to reuse records already paginated for
        capability discovery.

        Raises:
            ValidationError: ``address`` is malformed.
            DiscoveryError: The owned-objects sweep failed.
        """
        require_address(address, "address")
        sweep = sweep or OwnedObjectsSweep(self._client, address, self._config)
        try:
            records = await sweep.get()
        except Exception as exc:
            raise DiscoveryError(
                f"Failed to list owned objects: {exc}",
                "DIRECT_DISCOVERY_FAILED",
                {"address": address},
            ) from exc

        items = self.classify(records)
        logger.info(
            "Direct ownership resolved: address=%s objects=%d items=%d",
            address,
            len(records),
            len(items),
        )
        return items
