# kioskscan/main.py
"""
Runtime factory.

Configures logging, loads the network registry and builds a discovery
session for the requested network.
"""
from __future__ import annotations

import logging

from kioskscan.clients.networks import NetworkRegistry, load_networks_config
from kioskscan.core.config import DiscoveryConfig, Settings, settings
from kioskscan.core.logging import configure_logging
from kioskscan.discovery.session import DiscoverySession, build_session

logger = logging.getLogger(__name__)


def create_registry(cfg: Settings | None = None) -> NetworkRegistry:
    cfg = cfg or settings
    specs = load_networks_config(cfg.networks_config_paths)
    return NetworkRegistry.from_specs(specs, timeout=cfg.rpc_timeout)


def create_session(
    network: str | None = None,
    *,
    registry: NetworkRegistry | None = None,
    cfg: Settings | None = None,
) -> DiscoverySession:
    """Build a fresh resolver set for ``network`` (default from settings)."""
    cfg = cfg or settings
    registry = registry or create_registry(cfg)
    name = network or cfg.default_network
    session = build_session(
        registry.client(name), DiscoveryConfig.from_settings(cfg), network=name
    )
    logger.info("Discovery session ready: network=%s", name)
    return session


def create_runtime(network: str | None = None) -> DiscoverySession:
    """Entry point for embedding applications."""
    configure_logging(settings.log_level, json=settings.log_json)
    return create_session(network)
