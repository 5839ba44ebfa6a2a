# kioskscan/contracts/discovery.py
"""
Discovery results: containers, content items and streaming updates.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Union

DIRECT_OWNERSHIP = "direct-ownership"


@dataclass(frozen=True)
class ContainerCapability:
    """Proof of control over exactly one container.

    Attributes:
        capability_id: Object id of the capability (owner cap) object.
        container_id: Object id of the controlled container.
        item_count: Items reported by the container, 0 when unknown.
    """

    capability_id: str
    container_id: str
    item_count: int = 0

    def __post_init__(self) -> None:
        if self.item_count < 0:
            raise ValueError("item_count must be >= 0")


@dataclass(frozen=True)
class DisplayMetadata:
    name: str | None = None
    description: str | None = None
    image_url: str | None = None

    @classmethod
    def from_display(cls, data: dict[str, Any]) -> "DisplayMetadata | None":
        if not data:
            return None
        return cls(
            name=data.get("name"),
            description=data.get("description"),
            image_url=data.get("image_url"),
        )


@dataclass(frozen=True)
class ContentItem:
    """One discovered content object.

    ``container_id`` is the holding container, or ``DIRECT_OWNERSHIP`` for
    objects owned by the wallet itself.
    """

    item_id: str
    type_tag: str
    container_id: str
    display: DisplayMetadata | None = None

    @property
    def directly_owned(self) -> bool:
        return self.container_id == DIRECT_OWNERSHIP


@dataclass
class DiscoveryResult:
    containers: list[ContainerCapability] = field(default_factory=list)
    items: list[ContentItem] = field(default_factory=list)


@dataclass(frozen=True)
class DiscoveryUpdate:
    """Incremental payload delivered by progressive discovery."""

    containers: list[ContainerCapability] | None = None
    items: list[ContentItem] | None = None
    done: bool = False


UpdateCallback = Callable[[DiscoveryUpdate], Union[None, Awaitable[None]]]


@dataclass
class ContentSelection:
    """Items of one type available to a wallet."""

    type_tag: str
    available_count: int
    selected_count: int = 0
    item_ids: list[str] = field(default_factory=list)
