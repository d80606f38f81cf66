"""Pure utility tools that never touch an RPC endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from evm_mcp.config import DEFAULT_INT_TYPE, DEFAULT_UINT_TYPE
from evm_mcp.registry import Registry, ToolDescriptor
from evm_mcp.result import ToolResult
from evm_mcp.schema import ArgumentSchema, Field, FieldType, schema_for
from evm_mcp.tools.validators import parse_int_type, validate_int_type

ADDRESS_ZERO = "0x" + "00" * 20
HASH_ZERO = "0x" + "00" * 32


@dataclass(frozen=True, slots=True)
class IntTypeArgs:
    type: str


INT_SCHEMA = schema_for(
    IntTypeArgs,
    Field(
        "type",
        FieldType.STRING,
        "Integer type, e.g. int8, int16, int32, int64, int256.",
        default=DEFAULT_INT_TYPE,
        validator=validate_int_type,
    ),
)
UINT_SCHEMA = schema_for(
    IntTypeArgs,
    Field(
        "type",
        FieldType.STRING,
        "Unsigned integer type, e.g. uint8, uint16, uint32, uint64, uint256.",
        default=DEFAULT_UINT_TYPE,
        validator=validate_int_type,
    ),
)


def int_max(type_name: str) -> int:
    signed, bits = parse_int_type(type_name)
    return 2 ** (bits - 1) - 1 if signed else 2**bits - 1


def int_min(type_name: str) -> int:
    signed, bits = parse_int_type(type_name)
    return -(2 ** (bits - 1)) if signed else 0


async def max_int(args: IntTypeArgs, _ctx: Any) -> ToolResult:
    return ToolResult.text(str(int_max(args.type)))


async def min_int(args: IntTypeArgs, _ctx: Any) -> ToolResult:
    return ToolResult.text(str(int_min(args.type)))


async def max_uint(args: IntTypeArgs, _ctx: Any) -> ToolResult:
    return ToolResult.text(str(int_max(args.type)))


async def address_zero(_args: Any, _ctx: Any) -> ToolResult:
    return ToolResult.text(ADDRESS_ZERO)


async def hash_zero(_args: Any, _ctx: Any) -> ToolResult:
    return ToolResult.text(HASH_ZERO)


async def ping(_args: Any, _ctx: Any) -> ToolResult:
    return ToolResult.text("pong")


router = Registry(
    [
        ToolDescriptor(
            name="max_int",
            description="Get the maximum value of an integer type.",
            schema=INT_SCHEMA,
            handler=max_int,
        ),
        ToolDescriptor(
            name="min_int",
            description="Get the minimum value of an integer type.",
            schema=INT_SCHEMA,
            handler=min_int,
        ),
        ToolDescriptor(
            name="max_uint",
            description="Get the maximum value of an unsigned integer type.",
            schema=UINT_SCHEMA,
            handler=max_uint,
        ),
        ToolDescriptor(
            name="address_zero",
            description="Get the zero address.",
            schema=ArgumentSchema(),
            handler=address_zero,
        ),
        ToolDescriptor(
            name="hash_zero",
            description="Get the zero hash.",
            schema=ArgumentSchema(),
            handler=hash_zero,
        ),
        ToolDescriptor(
            name="ping",
            description="Liveness probe; always answers pong.",
            schema=ArgumentSchema(),
            handler=ping,
        ),
    ]
)
