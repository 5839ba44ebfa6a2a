"""Remote object-graph clients and network registry."""
from kioskscan.clients.health import ConnectionStatus, check_connection
from kioskscan.clients.networks import NetworkRegistry, NetworkSpec, load_networks_config
from kioskscan.clients.rpc import ObjectGraphClient, RpcError, SuiJsonRpcClient

__all__ = [
    "ConnectionStatus",
    "check_connection",
    "NetworkRegistry",
    "NetworkSpec",
    "load_networks_config",
    "ObjectGraphClient",
    "RpcError",
    "SuiJsonRpcClient",
]
