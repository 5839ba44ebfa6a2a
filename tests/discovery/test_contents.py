# tests/discovery/test_contents.py
from __future__ import annotations

import asyncio
import dataclasses

import pytest

from kioskscan.contracts.objects import CONTENT_OPTIONS, DynamicFieldEntry
from kioskscan.core.errors import ValidationError
from kioskscan.discovery.contents import ContentResolver
from tests.helpers.fakes import (
    CONTAINER_X,
    FakeObjectGraphClient,
    item_entry,
    nft_record,
    oid,
    plain_record,
)


@pytest.mark.asyncio
async def test_resolves_mixed_entry_shapes(config):
    boxed, uid_wrapped, coin = oid(0x11), oid(0x12), oid(0x14)
    client = FakeObjectGraphClient(
        objects={
            boxed: nft_record(boxed, name="Boxed"),
            uid_wrapped: nft_record(uid_wrapped, type_tag="0x3::game::Collectible"),
            coin: plain_record(coin),
        },
        dynamic_fields={
            CONTAINER_X: [
                # direct child object
                item_entry(boxed),
                # plain dynamic field with UID-wrapped item in its value
                {
                    "objectId": oid(0x90),
                    "type": "DynamicField",
                    "value": {"fields": {"id": {"id": uid_wrapped}}},
                },
                # listing marker with nothing resolvable
                {
                    "objectId": oid(0x91),
                    "type": "DynamicField",
                    "name": {"type": "0x2::kiosk::Listing", "value": {"is_exclusive": False}},
                },
                item_entry(coin),
                # same object surfaced twice
                item_entry(boxed),
            ]
        },
    )

    items = await ContentResolver(client, config).resolve(CONTAINER_X)

    assert [i.item_id for i in items] == [boxed, uid_wrapped]
    assert all(i.container_id == CONTAINER_X for i in items)
    assert items[0].display.name == "Boxed"
    assert items[1].display is None
    fetched = client.calls[-1][1]["ids"]
    assert fetched == (boxed, uid_wrapped, coin)


@pytest.mark.asyncio
async def test_index_failure_yields_empty(config):
    client = FakeObjectGraphClient()
    client.fail_dynamic.add(CONTAINER_X)

    assert await ContentResolver(client, config).resolve(CONTAINER_X) == []
    assert client.count("get_dynamic_fields") == 3
    assert client.count("multi_get_objects") == 0


@pytest.mark.asyncio
async def test_empty_container(config):
    client = FakeObjectGraphClient(dynamic_fields={CONTAINER_X: []})

    assert await ContentResolver(client, config).resolve(CONTAINER_X) == []
    assert client.count("multi_get_objects") == 0


@pytest.mark.asyncio
async def test_index_pagination_and_chunked_fetch(config):
    ids = [oid(0x300 + i) for i in range(7)]
    client = FakeObjectGraphClient(
        objects={i: nft_record(i) for i in ids},
        dynamic_fields={CONTAINER_X: [item_entry(i) for i in ids]},
    )
    cfg = dataclasses.replace(config, dynamic_fields_page_size=3, multi_get_batch_size=3)

    items = await ContentResolver(client, cfg).resolve(CONTAINER_X)

    assert [i.item_id for i in items] == ids
    assert client.count("get_dynamic_fields") == 3
    chunks = [c[1]["ids"] for c in client.calls if c[0] == "multi_get_objects"]
    assert [len(c) for c in chunks] == [3, 3, 1]


@pytest.mark.asyncio
async def test_failed_chunk_is_skipped(config):
    ids = [oid(0x400 + i) for i in range(4)]
    client = FakeObjectGraphClient(
        objects={i: nft_record(i) for i in ids},
        dynamic_fields={CONTAINER_X: [item_entry(i) for i in ids]},
    )
    client.fail_objects.add(ids[0])
    cfg = dataclasses.replace(config, multi_get_batch_size=2)

    items = await ContentResolver(client, cfg).resolve(CONTAINER_X)

    assert [i.item_id for i in items] == ids[2:]


@pytest.mark.asyncio
async def test_missing_type_becomes_unknown(config):
    item = oid(0x500)
    client = FakeObjectGraphClient(
        objects={item: {"objectId": item, "display": {"data": {"image_url": "ipfs://x"}}}},
        dynamic_fields={CONTAINER_X: [item_entry(item)]},
    )

    items = await ContentResolver(client, config).resolve(CONTAINER_X)

    assert items[0].type_tag == "unknown"
    assert items[0].display.image_url == "ipfs://x"


@pytest.mark.asyncio
async def test_rejects_malformed_container_id(config):
    client = FakeObjectGraphClient()

    with pytest.raises(ValidationError) as exc_info:
        await ContentResolver(client, config).resolve("0x2")
    assert exc_info.value.field == "container_id"
    assert client.calls == []


def test_candidate_ids_preserve_order():
    a, b = oid(1), oid(2)
    entries = [
        DynamicFieldEntry.model_validate(e)
        for e in (item_entry(b), item_entry(a), item_entry(b))
    ]
    assert ContentResolver.candidate_ids(entries) == [b, a]



@pytest.mark.asyncio
async def test_oversized_batch_setting_is_capped_at_node_limit(config):
    ids = [oid(0x700 + i) for i in range(60)]
    client = FakeObjectGraphClient(
        objects={i: nft_record(i) for i in ids},
        dynamic_fields={CONTAINER_X: [item_entry(i) for i in ids]},
    )
    cfg = dataclasses.replace(config, multi_get_batch_size=100)

    items = await ContentResolver(client, cfg).resolve(CONTAINER_X)

    assert len(items) == 60
    chunks = [c[1]["ids"] for c in client.calls if c[0] == "multi_get_objects"]
    assert [len(c) for c in chunks] == [50, 10]


@pytest.mark.asyncio
async def test_multi_get_requests_content_type_and_display(scenario_client, config):
    await ContentResolver(scenario_client, config).resolve(CONTAINER_X)

    assert scenario_client.count("multi_get_objects") == 1
    assert scenario_client.count("multi_get_objects", options=CONTENT_OPTIONS) == 1


@pytest.mark.asyncio
async def test_chunks_are_paced(config, monkeypatch):
    pauses: list[float] = []
    real_sleep = asyncio.sleep

    async def fake_sleep(seconds):
        if seconds:
            pauses.append(seconds)
        await real_sleep(0)

    monkeypatch.setattr(asyncio, "sleep", fake_sleep)
    ids = [oid(0x800 + i) for i in range(5)]
    client = FakeObjectGraphClient(
        objects={i: nft_record(i) for i in ids},
        dynamic_fields={CONTAINER_X: [item_entry(i) for i in ids]},
    )
    cfg = dataclasses.replace(config, multi_get_batch_size=2, rate_limit_delay=0.25)

    items = await ContentResolver(client, cfg).resolve(CONTAINER_X)

    assert len(items) == 5
    # three chunks, one pause before each chunk after the first
    assert pauses == [0.25, 0.25]
