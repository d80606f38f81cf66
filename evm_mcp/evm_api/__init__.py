"""JSON-RPC client for Ethereum-compatible nodes."""

from .client import (
    BlockNotFoundError,
    EvmRpcClient,
    EvmRpcError,
    JsonRpcError,
    NodeUnreachableError,
    RpcTimeoutError,
    UnexpectedResponseError,
    connect,
    validate_rpc_url,
)

__all__ = [
    "EvmRpcClient",
    "EvmRpcError",
    "BlockNotFoundError",
    "JsonRpcError",
    "NodeUnreachableError",
    "RpcTimeoutError",
    "UnexpectedResponseError",
    "connect",
    "validate_rpc_url",
]
