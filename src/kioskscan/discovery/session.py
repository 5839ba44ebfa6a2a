# kioskscan/discovery/session.py
"""
One resolver set bound to one remote endpoint.

Switching networks means building a new session; nothing is shared with
the previous one, so results of in-flight calls on the old endpoint can
simply be dropped by the caller.
"""
from __future__ import annotations

from dataclasses import dataclass

from kioskscan.clients.rpc import ObjectGraphClient
from kioskscan.core.config import DiscoveryConfig
from kioskscan.discovery.capabilities import CapabilityResolver
from kioskscan.discovery.contents import ContentResolver
from kioskscan.discovery.direct import DirectOwnershipResolver
from kioskscan.discovery.orchestrator import DiscoveryOrchestrator
from kioskscan.planning.planner import BulkReconciliationPlanner
from kioskscan.planning.transfer import BulkTransferPreparer


@dataclass(frozen=True)
class DiscoverySession:
    network: str
    client: ObjectGraphClient
    config: DiscoveryConfig
    capabilities: CapabilityResolver
    contents: ContentResolver
    direct: DirectOwnershipResolver
    orchestrator: DiscoveryOrchestrator
    planner: BulkReconciliationPlanner
    transfers: BulkTransferPreparer


def build_session(
    client: ObjectGraphClient,
    config: DiscoveryConfig | None = None,
    *,
    network: str = "custom",
) -> DiscoverySession:
    config = config or DiscoveryConfig.from_settings()
    capabilities = CapabilityResolver(client, config)
    contents = ContentResolver(client, config)
    direct = DirectOwnershipResolver(client, config)
    orchestrator = DiscoveryOrchestrator(
        client,
        config,
        capabilities=capabilities,
        contents=contents,
        direct=direct,
    )
    planner = BulkReconciliationPlanner(capabilities, config)
    return DiscoverySession(
        network=network,
        client=client,
        config=config,
        capabilities=capabilities,
        contents=contents,
        direct=direct,
        orchestrator=orchestrator,
        planner=planner,
        transfers=BulkTransferPreparer(
            orchestrator, planner, config.bulk_max_recipients
        ),
    )
