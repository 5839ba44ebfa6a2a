# tests/clients/test_networks.py
from __future__ import annotations

from pathlib import Path

import pytest

from kioskscan.clients.networks import (
    DEFAULT_NETWORKS,
    NetworkRegistry,
    NetworkSpec,
    load_networks_config,
)
from kioskscan.clients.rpc import SuiJsonRpcClient


class TestLoadNetworksConfig:
    def test_defaults_when_no_file(self, tmp_path: Path):
        specs = load_networks_config([str(tmp_path / "missing.yaml")])
        assert [s.name for s in specs] == ["mainnet", "testnet", "devnet"]
        assert specs == list(DEFAULT_NETWORKS)

    def test_env_substitution(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("LOCAL_RPC", "http://127.0.0.1:9000")
        config_file = tmp_path / "networks.yaml"
        config_file.write_text(
            """
networks:
  localnet:
    rpc_url: "${LOCAL_RPC}"
    explorer_url: http://explorer.local
  testnet:
    rpc_url: "${UNSET_TESTNET_RPC:-https://fullnode.testnet.sui.io:443}"
""",
            encoding="utf-8",
        )

        specs = {s.name: s for s in load_networks_config([str(config_file)])}

        assert specs["localnet"].rpc_url == "http://127.0.0.1:9000"
        assert specs["localnet"].explorer_url == "http://explorer.local"
        assert specs["testnet"].rpc_url == "https://fullnode.testnet.sui.io:443"
        assert specs["testnet"].explorer_url == "https://suiexplorer.com"

    def test_missing_rpc_url(self, tmp_path: Path):
        config_file = tmp_path / "networks.yaml"
        config_file.write_text("networks:\n  broken:\n    explorer_url: x\n", encoding="utf-8")

        with pytest.raises(ValueError, match="missing required 'rpc_url'"):
            load_networks_config([str(config_file)])

    def test_unset_env_var(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("NOPE_RPC", raising=False)
        config_file = tmp_path / "networks.yaml"
        config_file.write_text("networks:\n  x:\n    rpc_url: ${NOPE_RPC}\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Network 'x' config error"):
            load_networks_config([str(config_file)])

    def test_bundled_config_file(self):
        path = Path(__file__).resolve().parents[2] / "config" / "networks.yaml"
        names = [s.name for s in load_networks_config([str(path)])]
        assert set(names) == {"mainnet", "testnet", "devnet"}


class TestNetworkRegistry:
    def test_register_and_get(self):
        registry = NetworkRegistry.from_specs(DEFAULT_NETWORKS)

        assert len(registry) == 3
        assert "testnet" in registry
        assert registry.has("devnet")
        assert registry.list() == ["mainnet", "testnet", "devnet"]
        assert registry.get("mainnet").rpc_url.startswith("https://fullnode.mainnet")

    def test_duplicate_rejected(self):
        registry = NetworkRegistry()
        registry.register(NetworkSpec("a", "http://a"))
        with pytest.raises(ValueError, match="already registered"):
            registry.register(NetworkSpec("a", "http://b"))

    def test_unknown_network(self):
        registry = NetworkRegistry.from_specs([NetworkSpec("a", "http://a")])
        with pytest.raises(KeyError, match="not found"):
            registry.get("b")

    def test_client_is_cached_per_network(self):
        registry = NetworkRegistry.from_specs(DEFAULT_NETWORKS, timeout=5.0)

        main = registry.client("mainnet")
        assert isinstance(main, SuiJsonRpcClient)
        assert registry.client("mainnet") is main
        assert registry.client("testnet") is not main
        assert registry.client("testnet").rpc_url == "https://fullnode.testnet.sui.io:443"

    def test_explorer_links(self):
        registry = NetworkRegistry.from_specs(
            [NetworkSpec("testnet", "http://n", "https://explorer.example/")]
        )

        assert (
            registry.explorer_link("testnet", "DIGEST")
            == "https://explorer.example/tx/DIGEST?network=testnet"
        )
        assert (
            registry.explorer_link("testnet", "0xabc", kind="object")
            == "https://explorer.example/object/0xabc?network=testnet"
        )
