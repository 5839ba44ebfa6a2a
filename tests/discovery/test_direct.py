# tests/discovery/test_direct.py
from __future__ import annotations

import pytest

from kioskscan.contracts.discovery import DIRECT_OWNERSHIP
from kioskscan.contracts.objects import SWEEP_OPTIONS
from kioskscan.core.errors import DiscoveryError
from kioskscan.discovery.direct import DirectOwnershipResolver
from kioskscan.discovery.sweep import OwnedObjectsSweep
from tests.helpers.fakes import DIRECT_ITEM, WALLET, FakeObjectGraphClient, nft_record, oid


@pytest.mark.asyncio
async def test_classifies_wallet_objects(scenario_client, config):
    items = await DirectOwnershipResolver(scenario_client, config).resolve(WALLET)

    assert [i.item_id for i in items] == [DIRECT_ITEM]
    assert items[0].container_id == DIRECT_OWNERSHIP
    assert items[0].directly_owned
    assert items[0].display.name == "Loose Item"


@pytest.mark.asyncio
async def test_paginates_whole_wallet(config):
    owned = [nft_record(oid(0x600 + i)) for i in range(5)]
    client = FakeObjectGraphClient(owned={WALLET: owned}, page_size=2)

    items = await DirectOwnershipResolver(client, config).resolve(WALLET)

    assert len(items) == 5
    assert client.count("get_owned_objects", filtered=False) == 3


@pytest.mark.asyncio
async def test_sweep_failure_raises(config):
    client = FakeObjectGraphClient()
    client.fail_owned.add(WALLET)

    with pytest.raises(DiscoveryError) as exc_info:
        await DirectOwnershipResolver(client, config).resolve(WALLET)
    assert exc_info.value.code == "DIRECT_DISCOVERY_FAILED"


@pytest.mark.asyncio
async def test_sweep_is_memoized(scenario_client, config):
    pages: list[int] = []
    sweep = OwnedObjectsSweep(
        scenario_client, WALLET, config, on_page=lambda batch: pages.append(len(batch))
    )
    assert not sweep.started

    first = await sweep.get()
    second = await sweep.get()

    assert first is second
    assert sweep.started
    assert pages == [4]
    assert scenario_client.count("get_owned_objects") == 1


@pytest.mark.asyncio
async def test_sweep_requests_type_content_and_display(scenario_client, config):
    await DirectOwnershipResolver(scenario_client, config).resolve(WALLET)

    assert scenario_client.count("get_owned_objects") == 1
    assert scenario_client.count(
        "get_owned_objects", filtered=False, options=SWEEP_OPTIONS
    ) == 1
