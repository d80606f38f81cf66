"""
Provider binding used by tool handlers.

Handlers never talk to the RPC client directly: they open a
``ProviderBinding`` for the call's endpoint, which closes the client when the
call ends and maps every failure of a chain query to ``ProviderError``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from evm_mcp.blocks import BlockSelector
from evm_mcp.errors import ConfigError, ProviderError
from evm_mcp.evm_api.client import EvmRpcError

logger = logging.getLogger(__name__)

# Builds a provider for an endpoint URL; raises ConfigError for unusable URLs.
Connector = Callable[[str], Any]


def _failure_data(operation: str, exc: Exception) -> Dict[str, Any]:
    data: Dict[str, Any] = {"operation": operation}
    if isinstance(exc, EvmRpcError):
        # Node-side details, e.g. revert data or a rate-limit error code.
        if exc.code is not None:
            data["rpc_code"] = exc.code
        if exc.data is not None:
            data["rpc_data"] = exc.data
        if exc.status_code is not None:
            data["http_status"] = exc.status_code
    return data


class ProviderBinding:
    """Per-call wrapper around a provider object."""

    def __init__(self, provider: Any) -> None:
        self._provider = provider

    async def __aenter__(self) -> "ProviderBinding":
        return self

    async def __aexit__(self, *_exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        close = getattr(self._provider, "aclose", None)
        if close is None:
            return
        try:
            await close()
        except Exception:
            logger.warning("Failed to close provider", exc_info=True)

    async def _invoke(self, operation: str, *args: Any) -> Any:
        try:
            return await getattr(self._provider, operation)(*args)
        except ProviderError:
            raise
        except asyncio.CancelledError:
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                # The caller cancelled us; let it unwind.
                raise
            raise ProviderError(f"{operation} was cancelled by the provider.", data={"operation": operation})
        except Exception as exc:
            message = str(exc) or exc.__class__.__name__
            raise ProviderError(message, data=_failure_data(operation, exc)) from exc

    async def balance(self, address: str, block: BlockSelector) -> int:
        return await self._invoke("balance", address, block)

    async def nonce(self, address: str, block: BlockSelector) -> int:
        return await self._invoke("nonce", address, block)

    async def code(self, address: str, block: BlockSelector, disassemble: bool) -> str:
        return await self._invoke("code", address, block, disassemble)

    async def code_size(self, address: str, block: BlockSelector) -> int:
        return await self._invoke("code_size", address, block)

    async def storage(self, address: str, slot: str, block: BlockSelector) -> str:
        return await self._invoke("storage", address, slot, block)

    async def block(self, block: BlockSelector, full: bool, fields: List[str], raw: bool) -> str:
        return await self._invoke("block", block, full, fields, raw)

    async def gas_price(self) -> int:
        return await self._invoke("gas_price")

    async def chain_name(self) -> str:
        return await self._invoke("chain_name")

    async def chain_id(self) -> int:
        return await self._invoke("chain_id")

    async def client_version(self) -> str:
        return await self._invoke("client_version")

    async def resolve_name(self, name: str) -> Optional[str]:
        return await self._invoke("resolve_name", name)


@dataclass(frozen=True, slots=True)
class ToolContext:
    """Collaborators available to a handler during one call."""

    connect: Connector

    def provider(self, rpc_url: str) -> ProviderBinding:
        try:
            provider = self.connect(rpc_url)
        except ConfigError:
            raise
        except Exception as exc:
            raise ConfigError(f"Invalid RPC URL: {exc}", data={"rpc": rpc_url}) from exc
        return ProviderBinding(provider)
