"""Error taxonomy shared by the dispatcher and the tool handlers."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    DECODE = "decode"
    CONFIG = "config"
    RESOLUTION = "resolution"
    PROVIDER = "provider"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"

    @property
    def code(self) -> int:
        """JSON-RPC error code used on the wire."""
        return _JSONRPC_CODES[self]


_JSONRPC_CODES = {
    ErrorKind.DECODE: -32602,
    ErrorKind.CONFIG: -32700,
    ErrorKind.RESOLUTION: -32602,
    ErrorKind.PROVIDER: -32603,
    ErrorKind.NOT_FOUND: -32601,
    ErrorKind.INTERNAL: -32603,
}


class ToolError(Exception):
    """Base exception for failures that end a single tool call."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, *, data: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.data = data or {}


class DecodeError(ToolError):
    """Raised when tool arguments are missing or have the wrong type."""

    kind = ErrorKind.DECODE

    def __init__(self, message: str, *, field: Optional[str] = None, expected: Optional[str] = None) -> None:
        data: Dict[str, Any] = {}
        if field is not None:
            data["field"] = field
        if expected is not None:
            data["expected"] = expected
        super().__init__(message, data=data)
        self.field = field
        self.expected = expected


class ConfigError(ToolError):
    """Raised when an RPC endpoint cannot be used."""

    kind = ErrorKind.CONFIG


class ResolutionError(ToolError):
    """Raised when an address or name reference cannot be resolved."""

    kind = ErrorKind.RESOLUTION


class ProviderError(ToolError):
    """Raised when the remote chain query fails."""

    kind = ErrorKind.PROVIDER


class ToolNotFoundError(ToolError):
    """Raised when a tool name is not registered."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}", data={"tool": name})
        self.name = name


class DuplicateToolError(ValueError):
    """Raised at build time when two tool groups define the same name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Duplicate tool name: {name}")
        self.name = name
