"""
Tool dispatch for MCP-style clients.

The registry is composed once from the tool groups and is read-only
afterwards. ``Dispatcher.call`` is the single place where failures become
error envelopes: arguments are decoded before the handler runs, and nothing
raised by a handler escapes unconverted.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Dict, List, Mapping, Optional

from evm_mcp.config import EvmMcpConfig, default_config
from evm_mcp.errors import ErrorKind, ToolError
from evm_mcp.evm_api import connect as connect_rpc
from evm_mcp.provider import Connector, ToolContext
from evm_mcp.registry import Registry, compose_all
from evm_mcp.result import ToolResult
from evm_mcp.tools import account_router, block_router, chain_router, utility_router

logger = logging.getLogger(__name__)


class Dispatcher:
    """Routes (tool name, raw arguments) to a handler and returns a ToolResult."""

    def __init__(
        self,
        registry: Registry,
        *,
        connect: Optional[Connector] = None,
        config: EvmMcpConfig | None = None,
    ) -> None:
        self.registry = registry
        self.config = config or default_config
        self.context = ToolContext(connect=connect or functools.partial(connect_rpc, config=self.config))

    def list_tools(self) -> List[Dict[str, Any]]:
        return [descriptor.to_listing() for descriptor in self.registry]

    async def call(self, tool_name: str, arguments: Optional[Mapping[str, Any]] = None) -> ToolResult:
        try:
            descriptor = self.registry.lookup(tool_name)
            args = descriptor.schema.decode(arguments)
        except ToolError as exc:
            logger.debug("tool=%s rejected kind=%s", tool_name, exc.kind.value)
            return ToolResult.from_exception(exc)

        try:
            result = await descriptor.handler(args, self.context)
        except ToolError as exc:
            return ToolResult.from_exception(exc)
        except Exception:
            logger.exception("Unexpected error while calling tool %s", tool_name)
            return ToolResult.error(ErrorKind.INTERNAL, f"Unexpected error while calling tool {tool_name}.")

        if isinstance(result, str):
            return ToolResult.text(result)
        return result


TOOL_REGISTRY: Registry = compose_all(account_router, block_router, chain_router, utility_router)

default_dispatcher = Dispatcher(TOOL_REGISTRY)


def list_tools() -> List[Dict[str, Any]]:
    """Return the name, description and input schema of every tool."""
    return default_dispatcher.list_tools()


async def call_tool(tool_name: str, params: Optional[Mapping[str, Any]] = None) -> ToolResult:
    """Dispatch to a tool by name."""
    return await default_dispatcher.call(tool_name, params)
