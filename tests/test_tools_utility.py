import pytest

from evm_mcp.errors import ErrorKind
from evm_mcp.mcp import call_tool
from evm_mcp.tools.utility import int_max, int_min


@pytest.mark.parametrize("type_name,expected", [
    ("int8", 127),
    ("int256", 2**255 - 1),
    ("int", 2**255 - 1),
    ("uint8", 255),
    ("uint256", 2**256 - 1),
])
def test_int_max(type_name, expected):
    assert int_max(type_name) == expected


@pytest.mark.parametrize("type_name,expected", [
    ("int8", -128),
    ("int64", -(2**63)),
    ("uint32", 0),
])
def test_int_min(type_name, expected):
    assert int_min(type_name) == expected


@pytest.mark.asyncio
async def test_max_int_default_type():
    result = await call_tool("max_int", {})
    assert result.content == [str(2**255 - 1)]


@pytest.mark.asyncio
async def test_max_uint_default_type():
    result = await call_tool("max_uint", {})
    assert result.content == [str(2**256 - 1)]


@pytest.mark.asyncio
async def test_min_int_explicit_type():
    result = await call_tool("min_int", {"type": "int8"})
    assert result.content == ["-128"]


@pytest.mark.asyncio
async def test_invalid_int_type_is_decode_error():
    result = await call_tool("max_int", {"type": "int7"})
    assert result.failure.kind is ErrorKind.DECODE
    assert result.failure.data["field"] == "type"


@pytest.mark.asyncio
async def test_zero_constants():
    address = (await call_tool("address_zero", {})).content[0]
    digest = (await call_tool("hash_zero", None)).content[0]
    assert address == "0x" + "0" * 40
    assert len(address) == 42
    assert digest == "0x" + "0" * 64
    assert len(digest) == 66


@pytest.mark.asyncio
async def test_ping():
    result = await call_tool("ping", {"ignored": True})
    assert result.content == ["pong"]
    assert result.to_payload() == {"content": [{"type": "text", "text": "pong"}]}
