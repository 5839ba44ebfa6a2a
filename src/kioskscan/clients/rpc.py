# kioskscan/clients/rpc.py
"""
Thin async client for the Sui full-node JSON-RPC API.

No retry logic lives here: transport and RPC errors are raised verbatim and
the resolvers decide how to retry, skip or fail.
"""
from __future__ import annotations

import itertools
import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from kioskscan.contracts.objects import (
    DynamicFieldEntry,
    ObjectDataOptions,
    Page,
    RawObjectRecord,
)
from kioskscan.core.errors import RateLimitError

logger = logging.getLogger(__name__)

# Node-side cap on ids per sui_multiGetObjects call
MAX_MULTI_GET = 50


class RpcError(Exception):
    """A JSON-RPC ``error`` object returned by the node."""

    def __init__(self, message: str, code: int | None = None, method: str = ""):
        self.code = code
        self.method = method
        super().__init__(f"RPC error: {message}")


class ObjectGraphClient(ABC):
    """The four read operations discovery relies on."""

    @abstractmethod
    async def get_object(
        self, object_id: str, *, options: ObjectDataOptions
    ) -> RawObjectRecord | None: ...

    @abstractmethod
    async def multi_get_objects(
        self, object_ids: list[str], *, options: ObjectDataOptions
    ) -> list[RawObjectRecord]: ...

    @abstractmethod
    async def get_owned_objects(
        self,
        owner: str,
        *,
        options: ObjectDataOptions,
        filter: dict[str, Any] | None = None,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> Page[RawObjectRecord]: ...

    @abstractmethod
    async def get_dynamic_fields(
        self,
        parent_id: str,
        *,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> Page[DynamicFieldEntry]: ...


def _next_cursor(result: dict[str, Any]) -> str | None:
    # Nodes return the last cursor even on the final page.
    if result.get("hasNextPage") is False:
        return None
    return result.get("nextCursor")


class SuiJsonRpcClient(ObjectGraphClient):
    """HTTP client for one full-node endpoint.

    Contract::

        POST <rpc_url>
        body: {"jsonrpc": "2.0", "id": n, "method": str, "params": list}
    """

    def __init__(self, *, rpc_url: str, timeout: float = 30.0) -> None:
        self._url = rpc_url
        self._timeout = timeout
        self._ids = itertools.count(1)

    @property
    def rpc_url(self) -> str:
        return self._url

    async def call(self, method: str, params: list[Any]) -> Any:
        body = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            try:
                resp = await client.post(self._url, json=body)
                if resp.status_code == 429:
                    raise RateLimitError(f"Rate limit exceeded calling {method}")
                resp.raise_for_status()
            except httpx.HTTPStatusError as ex:
                logger.warning(
                    "RPC %s failed status=%s", method, ex.response.status_code
                )
                raise

        payload = resp.json()
        error = payload.get("error")
        if error:
            raise RpcError(
                error.get("message", "unknown error"), error.get("code"), method
            )
        return payload.get("result")

    async def get_object(
        self, object_id: str, *, options: ObjectDataOptions
    ) -> RawObjectRecord | None:
        result = await self.call("sui_getObject", [object_id, options.to_rpc()])
        return RawObjectRecord.from_response(result)

    async def multi_get_objects(
        self, object_ids: list[str], *, options: ObjectDataOptions
    ) -> list[RawObjectRecord]:
        if len(object_ids) > MAX_MULTI_GET:
            raise ValueError(
                f"multi_get_objects accepts at most {MAX_MULTI_GET} ids, "
                f"got {len(object_ids)}"
            )
        if not object_ids:
            return []
        result = await self.call(
            "sui_multiGetObjects", [object_ids, options.to_rpc()]
        )
        records = (RawObjectRecord.from_response(e) for e in result or [])
        return [r for r in records if r is not None]

    async def get_owned_objects(
        self,
        owner: str,
        *,
        options: ObjectDataOptions,
        filter: dict[str, Any] | None = None,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> Page[RawObjectRecord]:
        query: dict[str, Any] = {"options": options.to_rpc()}
        if filter:
            query["filter"] = filter
        result = await self.call(
            "suix_getOwnedObjects", [owner, query, cursor, limit]
        ) or {}
        records = (RawObjectRecord.from_response(e) for e in result.get("data", []))
        return Page(
            data=[r for r in records if r is not None],
            next_cursor=_next_cursor(result),
        )

    async def get_dynamic_fields(
        self,
        parent_id: str,
        *,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> Page[DynamicFieldEntry]:
        result = await self.call(
            "suix_getDynamicFields", [parent_id, cursor, limit]
        ) or {}
        return Page(
            data=[DynamicFieldEntry.model_validate(e) for e in result.get("data", [])],
            next_cursor=_next_cursor(result),
        )
