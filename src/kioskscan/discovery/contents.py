# kioskscan/discovery/contents.py
"""
Content resolver: lists the content items placed inside one container.

Pipeline:
  child-field index (paginated) -> candidate ids (unwrap pipeline)
  -> chunked multi-get -> heuristic classification.

Every failure below the index level is logged and skipped; an index that
cannot be paginated yields an empty list.
"""
from __future__ import annotations

import asyncio
import logging

from kioskscan.clients.rpc import MAX_MULTI_GET, ObjectGraphClient
from kioskscan.contracts.discovery import ContentItem, DisplayMetadata
from kioskscan.contracts.objects import (
    CONTENT_OPTIONS,
    DynamicFieldEntry,
    Page,
    RawObjectRecord,
)
from kioskscan.core.config import DiscoveryConfig
from kioskscan.core.pagination import paginate
from kioskscan.core.resilience import RetryPolicy
from kioskscan.core.validation import require_object_id
from kioskscan.discovery.extractors import is_content_object, resolve_field

logger = logging.getLogger(__name__)


def to_content_item(record: RawObjectRecord, container_id: str) -> ContentItem:
    return ContentItem(
        item_id=record.object_id,
        type_tag=record.type_tag or "unknown",
        container_id=container_id,
        display=DisplayMetadata.from_display(record.display_data),
    )


class ContentResolver:
    """
    Resolve the content items placed inside one container.

    Only the container's child-field index is paginated; candidate objects
    are fetched in bounded multi-get chunks and classified locally.
    """

    def __init__(self, client: ObjectGraphClient, config: DiscoveryConfig) -> None:
        self._client = client
        self._config = config
        self._retry = RetryPolicy(config.retry_attempts, config.retry_base_delay)

    async def resolve(self, container_id: str) -> list[ContentItem]:
        """
        Content items inside ``container_id``.

        Args:
            container_id: Object id of the container

        Returns:
            Classified items; empty when the index cannot be read

        Raises:
            ValidationError: ``container_id`` is not a well-formed object id.
        """
        require_object_id(container_id, "container_id")
        logger.info("Fetching items for container %s", container_id)

        try:
            entries = await self.fetch_index(container_id)
        except Exception as exc:
            logger.error(
                "Failed to read child-field index: container=%s error=%s",
                container_id,
                exc,
            )
            return []

        candidate_ids = self.candidate_ids(entries, container_id)
        records = await self.fetch_objects(candidate_ids)
        items = [
            to_content_item(r, container_id)
            for r in records
            if is_content_object(r, self._config.content_markers)
        ]
        logger.info(
            "Container items resolved: container=%s fields=%d candidates=%d items=%d",
            container_id,
            len(entries),
            len(candidate_ids),
            len(items),
        )
        return items

    async def fetch_index(self, container_id: str) -> list[DynamicFieldEntry]:
        """
        Read the full child-field index of a container.

        Args:
            container_id: Parent object id

        Returns:
            Every index entry, in cursor order

        Raises:
            Exception: The underlying error once a page exhausts its retries
        """
        async def fetch_page(cursor: str | None) -> Page[DynamicFieldEntry]:
            return await self._client.get_dynamic_fields(
                container_id,
                cursor=cursor,
                limit=self._config.dynamic_fields_page_size,
            )

        return await paginate(
            fetch_page,
            retry=self._retry,
            max_pages=self._config.max_pages,
            delay=self._config.rate_limit_delay,
            label=f"child fields of {container_id}",
        )

    @staticmethod
    def candidate_ids(
        entries: list[DynamicFieldEntry], container_id: str = ""
    ) -> list[str]:
        """Resolve entries to unique candidate ids, preserving index order."""
        out: list[str] = []
        seen: set[str] = set()
        for entry in entries:
            try:
                resolution = resolve_field(entry)
            except Exception as exc:
                logger.warning(
                    "Failed to resolve child field: container=%s field=%s error=%s",
                    container_id,
                    entry.object_id,
                    exc,
                )
                continue
            if resolution is None:
                logger.debug(
                    "Skipping unresolvable child field: container=%s field=%s",
                    container_id,
                    entry.object_id,
                )
                continue
            if resolution.object_id not in seen:
                seen.add(resolution.object_id)
                out.append(resolution.object_id)
        return out

    async def fetch_objects(self, object_ids: list[str]) -> list[RawObjectRecord]:
        """
        Multi-get ``object_ids`` in chunks of at most ``MAX_MULTI_GET``.

        Failed chunks are logged and skipped, so the result may be partial.

        Returns:
            Records the node returned, in request order
        """
        # Node rejects larger multi-gets outright
        size = max(1, min(self._config.multi_get_batch_size, MAX_MULTI_GET))
        out: list[RawObjectRecord] = []
        for start in range(0, len(object_ids), size):
            chunk = object_ids[start : start + size]
            if start > 0:
                await asyncio.sleep(self._config.rate_limit_delay)
            try:
                out.extend(
                    await self._retry.run(
                        lambda: self._client.multi_get_objects(
                            chunk, options=CONTENT_OPTIONS
                        ),
                        label="multi-get",
                    )
                )
            except Exception as exc:
                logger.error(
                    "Failed to batch fetch objects: count=%d error=%s",
                    len(chunk),
                    exc,
                )
        return out
