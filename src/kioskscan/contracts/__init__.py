"""Public data contracts for discovery and reconciliation."""
from kioskscan.contracts.discovery import (
    DIRECT_OWNERSHIP,
    ContainerCapability,
    ContentItem,
    ContentSelection,
    DiscoveryResult,
    DiscoveryUpdate,
    DisplayMetadata,
)
from kioskscan.contracts.objects import (
    DynamicFieldEntry,
    ObjectDataOptions,
    Page,
    RawObjectRecord,
)
from kioskscan.contracts.planning import (
    BulkTransferPlan,
    ReconciliationTarget,
    TargetStatus,
    TransferValidation,
)

__all__ = [
    "DIRECT_OWNERSHIP",
    "ContainerCapability", "ContentItem", "ContentSelection",
    "DiscoveryResult", "DiscoveryUpdate", "DisplayMetadata",
    "DynamicFieldEntry", "ObjectDataOptions", "Page", "RawObjectRecord",
    "BulkTransferPlan", "ReconciliationTarget", "TargetStatus", "TransferValidation",
]
