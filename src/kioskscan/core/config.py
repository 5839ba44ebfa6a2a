# kioskscan/core/config.py
"""
Central configuration for the discovery engine.

Environment variables override defaults. Tuning knobs that resolvers read
at call time are frozen into a ``DiscoveryConfig`` so that every session
works from an immutable snapshot.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven settings with sensible defaults."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"
    log_json: bool = True

    # Config file paths (glob patterns)
    networks_config_paths: list[str] = Field(
        default_factory=lambda: ["config/networks.yaml"]
    )
    default_network: str = Field(default="mainnet")
    rpc_timeout: float = Field(default=30.0, description="Seconds per RPC call")

    # Resilience
    retry_attempts: int = Field(default=3)
    retry_base_delay: float = Field(
        default=1.0, description="Linear backoff step in seconds"
    )
    rate_limit_delay: float = Field(
        default=0.1, description="Pause between calls of one sequential loop"
    )
    max_pages: int = Field(default=1000, description="Pagination safety valve")

    # Batching
    dynamic_fields_page_size: int = 50
    owned_objects_page_size: int = 50
    multi_get_batch_size: int = Field(
        default=50, ge=1, le=50, description="Ids per multi-get call (node cap 50)"
    )

    # Bulk reconciliation
    bulk_max_recipients: int = 100
    bulk_batch_size: int = 10
    bulk_batch_delay: float = 2.0

    capability_type: str = "0x2::kiosk::KioskOwnerCap"

    # Heuristics (JSON lists in env, e.g. CONTAINER_ID_FIELDS='["for","id"]')
    container_markers: list[str] = Field(default_factory=lambda: ["kiosk"])
    capability_markers: list[str] = Field(
        default_factory=lambda: ["KioskOwnerCap", "OwnerCap"]
    )
    content_markers: list[str] = Field(
        default_factory=lambda: ["nft", "collectible"]
    )
    container_id_fields: list[str] = Field(
        default_factory=lambda: ["for", "kiosk_id", "kioskId", "kiosk", "id"]
    )
    item_count_fields: list[str] = Field(
        default_factory=lambda: ["item_count", "itemCount", "items"]
    )


settings = Settings()


@dataclass(frozen=True)
class DiscoveryConfig:
    """Immutable tuning shared by one resolver set.

    Attributes:
        retry_attempts: Calls per remote operation before giving up.
        retry_base_delay: Backoff step; attempt ``n`` waits ``n * step``.
        rate_limit_delay: Pause between successive calls of one loop.
        max_pages: Hard ceiling on pages per pagination loop.
        capability_type: Server-side filter for the primary capability query.
        container_markers: Substrings a fallback capability type must contain.
        capability_markers: Second substring set for the fallback filter.
        content_markers: Case-insensitive type markers for content items.
        container_id_fields: Ordered field names holding the container id.
        item_count_fields: Ordered field names holding a container item count.
    """

    retry_attempts: int = 3
    retry_base_delay: float = 1.0
    rate_limit_delay: float = 0.1
    max_pages: int = 1000
    dynamic_fields_page_size: int = 50
    owned_objects_page_size: int = 50
    multi_get_batch_size: int = 50
    bulk_max_recipients: int = 100
    bulk_batch_size: int = 10
    bulk_batch_delay: float = 2.0
    capability_type: str = "0x2::kiosk::KioskOwnerCap"
    container_markers: tuple[str, ...] = ("kiosk",)
    capability_markers: tuple[str, ...] = ("KioskOwnerCap", "OwnerCap")
    content_markers: tuple[str, ...] = ("nft", "collectible")
    container_id_fields: tuple[str, ...] = field(
        default=("for", "kiosk_id", "kioskId", "kiosk", "id")
    )
    item_count_fields: tuple[str, ...] = ("item_count", "itemCount", "items")

    @classmethod
    def from_settings(cls, s: Settings | None = None) -> "DiscoveryConfig":
        s = s or settings
        return cls(
            retry_attempts=s.retry_attempts,
            retry_base_delay=s.retry_base_delay,
            rate_limit_delay=s.rate_limit_delay,
            max_pages=s.max_pages,
            dynamic_fields_page_size=s.dynamic_fields_page_size,
            owned_objects_page_size=s.owned_objects_page_size,
            multi_get_batch_size=s.multi_get_batch_size,
            bulk_max_recipients=s.bulk_max_recipients,
            bulk_batch_size=s.bulk_batch_size,
            bulk_batch_delay=s.bulk_batch_delay,
            capability_type=s.capability_type,
            container_markers=tuple(s.container_markers),
            capability_markers=tuple(s.capability_markers),
            content_markers=tuple(s.content_markers),
            container_id_fields=tuple(s.container_id_fields),
            item_count_fields=tuple(s.item_count_fields),
        )
