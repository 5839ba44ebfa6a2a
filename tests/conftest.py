# tests/conftest.py
import pytest

from kioskscan.core.config import DiscoveryConfig
from tests.helpers.fakes import (
    CAP_X,
    CAP_Y,
    COIN,
    CONTAINER_X,
    CONTAINER_Y,
    DIRECT_ITEM,
    ITEM_IN_X,
    WALLET,
    FakeObjectGraphClient,
    cap_record,
    container_record,
    item_entry,
    nft_record,
    plain_record,
)


@pytest.fixture
def config() -> DiscoveryConfig:
    """Zero delays so retries and pacing do not slow the suite."""
    return DiscoveryConfig(
        retry_base_delay=0.0,
        rate_limit_delay=0.0,
        bulk_batch_delay=0.0,
    )


@pytest.fixture
def scenario_client() -> FakeObjectGraphClient:
    """
    Wallet with two capabilities (containers X and Y), one item in X, none
    in Y, one directly owned item and one unrelated coin.
    """
    return FakeObjectGraphClient(
        owned={
            WALLET: [
                cap_record(CAP_X, CONTAINER_X),
                cap_record(CAP_Y, CONTAINER_Y),
                nft_record(DIRECT_ITEM, name="Loose Item"),
                plain_record(COIN),
            ]
        },
        objects={
            CONTAINER_X: container_record(CONTAINER_X, "1"),
            CONTAINER_Y: container_record(CONTAINER_Y, "0"),
            ITEM_IN_X: nft_record(ITEM_IN_X, name="Placed Item"),
            DIRECT_ITEM: nft_record(DIRECT_ITEM, name="Loose Item"),
        },
        dynamic_fields={
            CONTAINER_X: [item_entry(ITEM_IN_X)],
            CONTAINER_Y: [],
        },
    )
