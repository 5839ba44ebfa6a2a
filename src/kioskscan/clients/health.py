# kioskscan/clients/health.py
"""
Connectivity check against a full node.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from kioskscan.clients.rpc import ObjectGraphClient
from kioskscan.contracts.objects import ObjectDataOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectionStatus:
    is_working: bool
    network: str
    error: str | None = None


async def check_connection(
    client: ObjectGraphClient, address: str, network: str = "custom"
) -> ConnectionStatus:
    """Issue a one-item owned-objects query; never raises."""
    try:
        await client.get_owned_objects(
            address, options=ObjectDataOptions(), limit=1
        )
    except Exception as exc:
        logger.error("Connection check failed: network=%s error=%s", network, exc)
        return ConnectionStatus(is_working=False, network=network, error=str(exc))

    logger.info("Connection check successful: network=%s", network)
    return ConnectionStatus(is_working=True, network=network)
