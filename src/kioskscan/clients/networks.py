# kioskscan/clients/networks.py
"""
Network registry: named full-node endpoints and their explorer links.

Each network gets its own RPC client; sessions are built per network
instead of mutating a process-wide "current client".
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Literal

from kioskscan.clients.rpc import SuiJsonRpcClient
from kioskscan.core.loader import load_yaml_files, merge_sections, substitute_env_vars

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NetworkSpec:
    """
    A named remote endpoint.

    Attributes:
        name: Network identifier (mainnet, testnet, devnet, ...)
        rpc_url: Full-node JSON-RPC URL
        explorer_url: Base URL of the block explorer
    """

    name: str
    rpc_url: str
    explorer_url: str = "https://suiexplorer.com"


DEFAULT_NETWORKS: tuple[NetworkSpec, ...] = (
    NetworkSpec("mainnet", "https://fullnode.mainnet.sui.io:443"),
    NetworkSpec("testnet", "https://fullnode.testnet.sui.io:443"),
    NetworkSpec("devnet", "https://fullnode.devnet.sui.io:443"),
)


def load_networks_config(patterns: Iterable[str]) -> list[NetworkSpec]:
    """
    Load network definitions from YAML; built-in defaults when none match.

    Expected YAML::

        networks:
          mainnet:
            rpc_url: "${SUI_MAINNET_RPC_URL:-https://fullnode.mainnet.sui.io:443}"
            explorer_url: https://suiexplorer.com

    Raises:
        ValueError: A network is missing ``rpc_url`` or an env var is unset.
    """
    raw = merge_sections(load_yaml_files(patterns), "networks")
    if not raw:
        logger.debug("No network config found, using defaults")
        return list(DEFAULT_NETWORKS)

    specs: list[NetworkSpec] = []
    for name, spec in raw.items():
        spec = spec or {}
        if "rpc_url" not in spec:
            raise ValueError(f"Network '{name}' missing required 'rpc_url' field")
        try:
            spec = substitute_env_vars(spec)
        except ValueError as exc:
            raise ValueError(f"Network '{name}' config error: {exc}") from exc
        specs.append(
            NetworkSpec(
                name=name,
                rpc_url=spec["rpc_url"],
                explorer_url=spec.get("explorer_url", "https://suiexplorer.com"),
            )
        )

    logger.info("Loaded %d network(s): %s", len(specs), [s.name for s in specs])
    return specs


class NetworkRegistry:
    """Named registry of network endpoints with one lazily built client each."""

    def __init__(self, timeout: float = 30.0) -> None:
        self._networks: dict[str, NetworkSpec] = {}
        self._clients: dict[str, SuiJsonRpcClient] = {}
        self._timeout = timeout

    @classmethod
    def from_specs(
        cls, specs: Iterable[NetworkSpec], timeout: float = 30.0
    ) -> "NetworkRegistry":
        registry = cls(timeout=timeout)
        for spec in specs:
            registry.register(spec)
        return registry

    def register(self, spec: NetworkSpec) -> None:
        if spec.name in self._networks:
            raise ValueError(f"Network '{spec.name}' already registered")
        self._networks[spec.name] = spec
        logger.info("Registered network: %s (%s)", spec.name, spec.rpc_url)

    def get(self, name: str) -> NetworkSpec:
        try:
            return self._networks[name]
        except KeyError:
            raise KeyError(
                f"Network '{name}' not found. Available: {list(self._networks)}"
            )

    def client(self, name: str) -> SuiJsonRpcClient:
        if name not in self._clients:
            spec = self.get(name)
            self._clients[name] = SuiJsonRpcClient(
                rpc_url=spec.rpc_url, timeout=self._timeout
            )
        return self._clients[name]

    def explorer_link(
        self,
        name: str,
        digest: str,
        kind: Literal["transaction", "object"] = "transaction",
    ) -> str:
        base = self.get(name).explorer_url.rstrip("/")
        path = "tx" if kind == "transaction" else "object"
        return f"{base}/{path}/{digest}?network={name}"

    def has(self, name: str) -> bool:
        return name in self._networks

    def list(self) -> list[str]:
        return list(self._networks.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._networks

    def __len__(self) -> int:
        return len(self._networks)
