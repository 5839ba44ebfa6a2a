# kioskscan/discovery/extractors.py
"""
Pure heuristics used by the resolvers.

The remote schema drifts: container references, item counts and boxed
child entries appear under several shapes. Each shape is handled by a small
extractor function; chains try them in a configured order and the first hit
wins.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Sequence

from kioskscan.contracts.objects import DynamicFieldEntry, RawObjectRecord
from kioskscan.core.validation import is_valid_object_id

Extractor = Callable[[dict[str, Any]], Any]


# -- Container references ------------------------------------------------------


def id_field(name: str) -> Extractor:
    """Extractor returning ``fields[name]`` when it is a valid object id."""

    def extract(fields: dict[str, Any]) -> str | None:
        value = fields.get(name)
        if isinstance(value, str) and value and is_valid_object_id(value):
            return value
        return None

    extract.__name__ = f"id_field_{name}"
    return extract


def count_field(name: str) -> Extractor:
    """Extractor returning ``fields[name]`` as a non-negative int.

    u64 values are serialized as decimal strings by the node, so both ints
    and digit strings are accepted.
    """

    def extract(fields: dict[str, Any]) -> int | None:
        value = fields.get(name)
        if isinstance(value, bool):
            return None
        if isinstance(value, int) and value >= 0:
            return value
        if isinstance(value, str) and value.isdigit():
            return int(value)
        return None

    extract.__name__ = f"count_field_{name}"
    return extract


def build_chain(factory: Callable[[str], Extractor], names: Iterable[str]) -> list[Extractor]:
    return [factory(n) for n in names]


def first_match(chain: Sequence[Extractor], fields: dict[str, Any]) -> Any:
    for extract in chain:
        value = extract(fields)
        if value is not None:
            return value
    return None


# -- Child-field unwrapping ----------------------------------------------------


class ResolutionKind(str, Enum):
    DIRECT_ID = "direct_id"
    WRAPPER_VALUE = "wrapper_value"
    NESTED_ID = "nested_id"
    NESTED_ITEM_ID = "nested_item_id"


@dataclass(frozen=True)
class FieldResolution:
    kind: ResolutionKind
    object_id: str


def _unbox(value: Any) -> Any:
    """Strip one Move struct wrapper (``{"type": ..., "fields": {...}}``)."""
    if isinstance(value, dict) and isinstance(value.get("fields"), dict):
        return value["fields"]
    return value


def _payload(entry: DynamicFieldEntry) -> Any:
    """The boxed value of an entry: inline ``value``, else the key's value."""
    if entry.value is not None:
        return _unbox(entry.value)
    return _unbox(entry.name_value)


def _id_of(value: Any) -> str | None:
    value = _unbox(value)
    if isinstance(value, str):
        return value if is_valid_object_id(value) else None
    if isinstance(value, dict):
        # UID is serialized as {"id": "0x..."}
        return _id_of(value.get("id")) if "id" in value else None
    return None


def resolve_direct_id(entry: DynamicFieldEntry) -> str | None:
    # Plain dynamic fields point at their Field<K, V> wrapper, not the item.
    if entry.type == "DynamicField":
        return None
    if entry.object_id and is_valid_object_id(entry.object_id):
        return entry.object_id
    return None


def resolve_wrapper_value(entry: DynamicFieldEntry) -> str | None:
    payload = _payload(entry)
    if isinstance(payload, dict):
        payload = payload.get("value")
    payload = _unbox(payload)
    if isinstance(payload, str) and is_valid_object_id(payload):
        return payload
    return None


def resolve_nested_id(entry: DynamicFieldEntry) -> str | None:
    payload = _payload(entry)
    if isinstance(payload, dict) and "id" in payload:
        return _id_of(payload["id"])
    return None


def resolve_nested_item_id(entry: DynamicFieldEntry) -> str | None:
    payload = _payload(entry)
    if isinstance(payload, dict):
        item = _unbox(payload.get("item"))
        if isinstance(item, dict):
            return _id_of(item.get("id"))
    return None


FIELD_PIPELINE: tuple[tuple[ResolutionKind, Callable[[DynamicFieldEntry], str | None]], ...] = (
    (ResolutionKind.DIRECT_ID, resolve_direct_id),
    (ResolutionKind.WRAPPER_VALUE, resolve_wrapper_value),
    (ResolutionKind.NESTED_ID, resolve_nested_id),
    (ResolutionKind.NESTED_ITEM_ID, resolve_nested_item_id),
)


def resolve_field(entry: DynamicFieldEntry) -> FieldResolution | None:
    """Run the fixed unwrap pipeline; ``None`` when no step applies."""
    for kind, step in FIELD_PIPELINE:
        object_id = step(entry)
        if object_id:
            return FieldResolution(kind=kind, object_id=object_id)
    return None


# -- Classification ------------------------------------------------------------


def is_content_object(
    record: RawObjectRecord, markers: Sequence[str] = ("nft", "collectible")
) -> bool:
    """Heuristic content check: content-type marker OR display name/image."""
    type_tag = (record.type_tag or "").lower()
    if type_tag and any(m.lower() in type_tag for m in markers):
        return True
    display = record.display_data
    return bool(display.get("name") or display.get("image_url"))


def is_capability_type(
    type_tag: str | None,
    container_markers: Sequence[str],
    capability_markers: Sequence[str],
) -> bool:
    """Case-sensitive substring check used by the unfiltered fallback scan."""
    if not type_tag:
        return False
    return any(m in type_tag for m in container_markers) and any(
        m in type_tag for m in capability_markers
    )
