"""Block tools."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from evm_mcp.blocks import resolve_block
from evm_mcp.errors import ProviderError
from evm_mcp.provider import ToolContext
from evm_mcp.registry import Registry, ToolDescriptor
from evm_mcp.result import ToolResult
from evm_mcp.schema import Field, FieldType, schema_for
from evm_mcp.tools.common import BLOCK_FIELD, RPC_FIELD


@dataclass(frozen=True, slots=True)
class BlockArgs:
    rpc: str
    block: Optional[str]
    full: bool
    fields: List[str]
    raw: bool


@dataclass(frozen=True, slots=True)
class BlockRefArgs:
    rpc: str
    block: Optional[str]


BLOCK_SCHEMA = schema_for(
    BlockArgs,
    RPC_FIELD,
    BLOCK_FIELD,
    Field("full", FieldType.BOOLEAN, "Include full transaction objects instead of hashes.", default=False),
    Field("fields", FieldType.STRING_LIST, "Only return these block fields.", default=[]),
    Field("raw", FieldType.BOOLEAN, "Return the RLP-encoded block header.", default=False),
)
BLOCK_REF_SCHEMA = schema_for(BlockRefArgs, RPC_FIELD, BLOCK_FIELD)


async def block(args: BlockArgs, ctx: ToolContext) -> ToolResult:
    async with ctx.provider(args.rpc) as provider:
        selector = resolve_block(args.block)
        rendered = await provider.block(selector, args.full, list(args.fields), args.raw)
    return ToolResult.text(rendered)


async def block_number(args: BlockRefArgs, ctx: ToolContext) -> ToolResult:
    """Number of the referenced block, as rendered by the block ``number`` field."""
    async with ctx.provider(args.rpc) as provider:
        selector = resolve_block(args.block)
        rendered = await provider.block(selector, False, ["number"], False)
    return ToolResult.text(rendered)


async def age(args: BlockRefArgs, ctx: ToolContext) -> ToolResult:
    async with ctx.provider(args.rpc) as provider:
        selector = resolve_block(args.block)
        rendered = await provider.block(selector, False, ["timestamp"], False)
    try:
        moment = datetime.fromtimestamp(int(rendered.strip()), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        raise ProviderError(f"Unexpected block timestamp: {rendered!r}", data={"operation": "block"}) from None
    return ToolResult.text(moment.ctime())


router = Registry(
    [
        ToolDescriptor(
            name="age",
            description="Get the timestamp of a block as a UTC date.",
            schema=BLOCK_REF_SCHEMA,
            handler=age,
        ),
        ToolDescriptor(
            name="block",
            description="Get information about a block: all fields, selected fields, or the raw RLP header.",
            schema=BLOCK_SCHEMA,
            handler=block,
        ),
        ToolDescriptor(
            name="block_number",
            description="Get the number of a block (defaults to the latest block).",
            schema=BLOCK_REF_SCHEMA,
            handler=block_number,
        ),
    ]
)
