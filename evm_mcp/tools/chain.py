"""Chain-level tools: gas price, chain name and id, client version."""

from __future__ import annotations

from dataclasses import dataclass

from evm_mcp.provider import ToolContext
from evm_mcp.registry import Registry, ToolDescriptor
from evm_mcp.result import ToolResult
from evm_mcp.schema import schema_for
from evm_mcp.tools.common import RPC_FIELD


@dataclass(frozen=True, slots=True)
class ChainArgs:
    rpc: str


CHAIN_SCHEMA = schema_for(ChainArgs, RPC_FIELD)


async def gas_price(args: ChainArgs, ctx: ToolContext) -> ToolResult:
    async with ctx.provider(args.rpc) as provider:
        price = await provider.gas_price()
    return ToolResult.text(str(price))


async def chain(args: ChainArgs, ctx: ToolContext) -> ToolResult:
    async with ctx.provider(args.rpc) as provider:
        name = await provider.chain_name()
    return ToolResult.text(name)


async def chain_id(args: ChainArgs, ctx: ToolContext) -> ToolResult:
    async with ctx.provider(args.rpc) as provider:
        value = await provider.chain_id()
    return ToolResult.text(str(value))


async def client(args: ChainArgs, ctx: ToolContext) -> ToolResult:
    async with ctx.provider(args.rpc) as provider:
        version = await provider.client_version()
    return ToolResult.text(version)


router = Registry(
    [
        ToolDescriptor(
            name="gas_price",
            description="Get the current gas price in wei.",
            schema=CHAIN_SCHEMA,
            handler=gas_price,
        ),
        ToolDescriptor(
            name="chain",
            description="Get the symbolic name of the current chain.",
            schema=CHAIN_SCHEMA,
            handler=chain,
        ),
        ToolDescriptor(
            name="chain_id",
            description="Get the chain ID of the current chain.",
            schema=CHAIN_SCHEMA,
            handler=chain_id,
        ),
        ToolDescriptor(
            name="client",
            description="Get the current client version.",
            schema=CHAIN_SCHEMA,
            handler=client,
        ),
    ]
)
