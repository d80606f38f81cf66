"""
Configuration helpers for the EVM MCP server.

This module centralizes the default RPC endpoint, HTTP timeouts and logging
settings. Endpoints are supplied per tool call; nothing here is a secret.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

# Endpoint used when a tool call does not name one.
DEFAULT_RPC_URL = "http://localhost:8545"

# Integer types used by the bound-query utilities when none is given.
DEFAULT_INT_TYPE = "int256"
DEFAULT_UINT_TYPE = "uint256"

DEFAULT_HTTP_TIMEOUT = 10.0


def _load_timeout() -> float:
    raw_timeout = os.getenv("EVM_MCP_HTTP_TIMEOUT")
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            return DEFAULT_HTTP_TIMEOUT
        return timeout if timeout > 0 else DEFAULT_HTTP_TIMEOUT
    return DEFAULT_HTTP_TIMEOUT


DEFAULT_TIMEOUT = _load_timeout()
LOG_LEVEL = os.getenv("EVM_MCP_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("EVM_MCP_LOG_FORMAT", "json")  # json or plain


@dataclass(slots=True)
class EvmMcpConfig:
    """Runtime configuration for RPC access and logging."""

    default_rpc_url: str = DEFAULT_RPC_URL
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = LOG_LEVEL
    log_format: str = LOG_FORMAT


default_config = EvmMcpConfig()
