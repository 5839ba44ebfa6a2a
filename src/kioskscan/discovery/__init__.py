"""Discovery engine: resolvers and the orchestrator composing them."""
from kioskscan.discovery.capabilities import CapabilityResolver
from kioskscan.discovery.contents import ContentResolver
from kioskscan.discovery.direct import DirectOwnershipResolver
from kioskscan.discovery.orchestrator import DiscoveryOrchestrator, merge_items
from kioskscan.discovery.sweep import OwnedObjectsSweep

__all__ = [
    "CapabilityResolver",
    "ContentResolver",
    "DirectOwnershipResolver",
    "DiscoveryOrchestrator",
    "merge_items",
    "OwnedObjectsSweep",
]
