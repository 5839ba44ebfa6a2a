# kioskscan/contracts/objects.py
"""
Wire-level records returned by the object-graph service.

These are transient: resolvers consume them immediately and keep only the
derived ``ContainerCapability`` / ``ContentItem`` values.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


@dataclass(frozen=True)
class ObjectDataOptions:
    """Which optional sub-blocks the node should populate."""

    show_type: bool = False
    show_content: bool = False
    show_display: bool = False
    show_owner: bool = False

    def to_rpc(self) -> dict[str, bool]:
        return {
            "showType": self.show_type,
            "showContent": self.show_content,
            "showDisplay": self.show_display,
            "showOwner": self.show_owner,
        }


# Each resolver requests exactly the blocks it reads.
CAPABILITY_OPTIONS = ObjectDataOptions(show_type=True, show_content=True)
CONTAINER_OPTIONS = ObjectDataOptions(show_content=True)
CONTENT_OPTIONS = ObjectDataOptions(
    show_type=True, show_content=True, show_display=True
)
SWEEP_OPTIONS = CONTENT_OPTIONS


@dataclass
class Page(Generic[T]):
    """One page of a cursor-paginated response."""

    data: list[T] = field(default_factory=list)
    next_cursor: str | None = None


class RawObjectRecord(BaseModel):
    """An object as returned under ``data`` by the node."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    object_id: str = Field(alias="objectId")
    type_tag: str | None = Field(default=None, alias="type")
    content: dict[str, Any] | None = None
    display: dict[str, Any] | None = None
    owner: Any | None = None

    @classmethod
    def from_response(cls, entry: Any) -> "RawObjectRecord | None":
        """Unwrap a ``{"data": ...}`` envelope; absent data yields ``None``."""
        if not isinstance(entry, dict):
            return None
        data = entry.get("data")
        if not isinstance(data, dict) or "objectId" not in data:
            return None
        return cls.model_validate(data)

    @property
    def fields(self) -> dict[str, Any]:
        """Structured Move fields, or an empty mapping."""
        if not self.content:
            return {}
        fields = self.content.get("fields")
        return fields if isinstance(fields, dict) else {}

    @property
    def display_data(self) -> dict[str, Any]:
        if not self.display:
            return {}
        data = self.display.get("data")
        return data if isinstance(data, dict) else {}


class DynamicFieldEntry(BaseModel):
    """One entry of a parent object's child-field index."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    object_id: str | None = Field(default=None, alias="objectId")
    name: Any | None = None
    type: str | None = None
    object_type: str | None = Field(default=None, alias="objectType")
    value: Any | None = None

    @property
    def name_value(self) -> Any:
        if isinstance(self.name, dict):
            return self.name.get("value")
        return None
