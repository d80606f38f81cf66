"""Account tools: balance, nonce, code, code size and storage."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from evm_mcp.blocks import resolve_block
from evm_mcp.provider import ToolContext
from evm_mcp.registry import Registry, ToolDescriptor
from evm_mcp.result import ToolResult
from evm_mcp.schema import Field, FieldType, schema_for
from evm_mcp.tools.common import (
    ADDRESS_FIELD,
    BLOCK_FIELD,
    NAME_FIELD,
    RPC_FIELD,
    format_ether,
    resolve_address,
    resolve_who,
)
from evm_mcp.tools.validators import parse_slot

logger = logging.getLogger(__name__)

WHO_FIELD = Field("who", FieldType.STRING, "The account address or ENS name to query.")


@dataclass(frozen=True, slots=True)
class BalanceArgs:
    rpc: str
    block: Optional[str]
    who: str
    ether: bool


@dataclass(frozen=True, slots=True)
class NonceArgs:
    rpc: str
    block: Optional[str]
    who: str


@dataclass(frozen=True, slots=True)
class CodeArgs:
    rpc: str
    block: Optional[str]
    address: Optional[str]
    name: Optional[str]
    disassemble: bool


@dataclass(frozen=True, slots=True)
class CodeSizeArgs:
    rpc: str
    block: Optional[str]
    address: Optional[str]
    name: Optional[str]


@dataclass(frozen=True, slots=True)
class StorageArgs:
    rpc: str
    block: Optional[str]
    address: str
    slot: str
    # Accepted for compatibility; proofs are not retrieved.
    proof: bool


BALANCE_SCHEMA = schema_for(
    BalanceArgs,
    RPC_FIELD,
    BLOCK_FIELD,
    WHO_FIELD,
    Field("ether", FieldType.BOOLEAN, "Format the balance in ether.", default=False),
)
NONCE_SCHEMA = schema_for(NonceArgs, RPC_FIELD, BLOCK_FIELD, WHO_FIELD)
CODE_SCHEMA = schema_for(
    CodeArgs,
    RPC_FIELD,
    BLOCK_FIELD,
    ADDRESS_FIELD,
    NAME_FIELD,
    Field("disassemble", FieldType.BOOLEAN, "Disassemble bytecodes into individual opcodes.", default=False),
)
CODE_SIZE_SCHEMA = schema_for(CodeSizeArgs, RPC_FIELD, BLOCK_FIELD, ADDRESS_FIELD, NAME_FIELD)
STORAGE_SCHEMA = schema_for(
    StorageArgs,
    RPC_FIELD,
    BLOCK_FIELD,
    Field("address", FieldType.STRING, "The contract address to query."),
    Field("slot", FieldType.STRING, "The storage slot to query (decimal or 0x hex).", validator=parse_slot),
    Field("proof", FieldType.BOOLEAN, "Return the proof for the queried storage slot (reserved).", default=False),
)


async def balance(args: BalanceArgs, ctx: ToolContext) -> ToolResult:
    async with ctx.provider(args.rpc) as provider:
        block = resolve_block(args.block)
        address = await resolve_who(provider, args.who)
        wei = await provider.balance(address, block)
    return ToolResult.text(format_ether(wei) if args.ether else str(wei))


async def nonce(args: NonceArgs, ctx: ToolContext) -> ToolResult:
    async with ctx.provider(args.rpc) as provider:
        block = resolve_block(args.block)
        address = await resolve_who(provider, args.who)
        value = await provider.nonce(address, block)
    return ToolResult.text(str(value))


async def code(args: CodeArgs, ctx: ToolContext) -> ToolResult:
    async with ctx.provider(args.rpc) as provider:
        block = resolve_block(args.block)
        address = await resolve_address(provider, name=args.name, address=args.address)
        bytecode = await provider.code(address, block, args.disassemble)
    return ToolResult.text(bytecode)


async def code_size(args: CodeSizeArgs, ctx: ToolContext) -> ToolResult:
    async with ctx.provider(args.rpc) as provider:
        block = resolve_block(args.block)
        address = await resolve_address(provider, name=args.name, address=args.address)
        size = await provider.code_size(address, block)
    return ToolResult.text(str(size))


async def storage(args: StorageArgs, ctx: ToolContext) -> ToolResult:
    if args.proof:
        logger.debug("storage proof requested but not supported; returning the value only")
    async with ctx.provider(args.rpc) as provider:
        block = resolve_block(args.block)
        address = await resolve_address(provider, address=args.address)
        value = await provider.storage(address, args.slot, block)
    return ToolResult.text(value)


router = Registry(
    [
        ToolDescriptor(
            name="balance",
            description="Get the balance of an account in wei or ether.",
            schema=BALANCE_SCHEMA,
            handler=balance,
        ),
        ToolDescriptor(
            name="nonce",
            description="Get the nonce of an account.",
            schema=NONCE_SCHEMA,
            handler=nonce,
        ),
        ToolDescriptor(
            name="code",
            description="Get the runtime bytecode of a contract, optionally disassembled.",
            schema=CODE_SCHEMA,
            handler=code,
        ),
        ToolDescriptor(
            name="code_size",
            description="Get the size of contract bytecode in bytes.",
            schema=CODE_SIZE_SCHEMA,
            handler=code_size,
        ),
        ToolDescriptor(
            name="storage",
            description="Get the raw value of a contract's storage slot.",
            schema=STORAGE_SCHEMA,
            handler=storage,
        ),
    ]
)
