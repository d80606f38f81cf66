"""Argument fields and helpers shared by the chain-query tool groups."""

from __future__ import annotations

import logging
from typing import Optional

from evm_mcp.config import DEFAULT_RPC_URL
from evm_mcp.errors import ResolutionError
from evm_mcp.provider import ProviderBinding
from evm_mcp.schema import Field, FieldType
from evm_mcp.tools.validators import looks_like_name, normalize_address

logger = logging.getLogger(__name__)

WEI_PER_ETHER = 10**18

RPC_FIELD = Field(
    "rpc",
    FieldType.STRING,
    f"The RPC endpoint, default value is {DEFAULT_RPC_URL}.",
    default=DEFAULT_RPC_URL,
)
BLOCK_FIELD = Field(
    "block",
    FieldType.OPTIONAL_STRING,
    "The block height to query at. Can also be the tags earliest, finalized, safe, latest, pending or block hash.",
)
ADDRESS_FIELD = Field("address", FieldType.OPTIONAL_STRING, "An Ethereum address.")
NAME_FIELD = Field("name", FieldType.OPTIONAL_STRING, "An ENS name (format does not get checked).")


async def resolve_address(
    provider: ProviderBinding, *, name: Optional[str] = None, address: Optional[str] = None
) -> str:
    """
    Turn an ENS name or a literal address into an address.

    A name takes precedence over an address when both are given.
    """
    if name:
        resolved = await provider.resolve_name(name)
        if not resolved:
            raise ResolutionError(f"ENS name '{name}' does not resolve to an address.", data={"name": name})
        return resolved
    if address:
        try:
            return normalize_address(address)
        except ValueError:
            raise ResolutionError("Invalid address format.", data={"address": address}) from None
    raise ResolutionError("Either an address or an ENS name is required.")


async def resolve_who(provider: ProviderBinding, who: str) -> str:
    """Resolve an argument that may hold either an address or an ENS name."""
    if looks_like_name(who):
        return await resolve_address(provider, name=who.strip())
    return await resolve_address(provider, address=who)


def format_ether(wei: int) -> str:
    """Render wei as ether with exactly 18 fractional digits."""
    sign = "-" if wei < 0 else ""
    whole, fraction = divmod(abs(wei), WEI_PER_ETHER)
    return f"{sign}{whole}.{fraction:018d}"
