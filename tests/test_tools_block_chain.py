import pytest

from evm_mcp.blocks import LATEST, BlockHash, BlockHeight
from evm_mcp.errors import ProviderError
from evm_mcp.tools import block, chain
from evm_mcp.tools.block import BLOCK_REF_SCHEMA, BLOCK_SCHEMA
from evm_mcp.tools.chain import CHAIN_SCHEMA

HASH = "0x" + "cd" * 32


@pytest.mark.asyncio
async def test_block_passes_options(provider, ctx):
    provider.responses["block"] = "number 1"
    args = BLOCK_SCHEMA.decode({"block": HASH, "full": True, "fields": ["number", "hash"]})
    result = await block.block(args, ctx)
    assert result.content == ["number 1"]
    assert provider.calls == [("block", BlockHash(HASH), True, ["number", "hash"], False)]


@pytest.mark.asyncio
async def test_block_raw(provider, ctx):
    provider.responses["block"] = "0xf90200"
    await block.block(BLOCK_SCHEMA.decode({"raw": True}), ctx)
    assert provider.calls == [("block", LATEST, False, [], True)]


@pytest.mark.asyncio
async def test_block_number_queries_number_field(provider, ctx):
    provider.responses["block"] = "19000000"
    result = await block.block_number(BLOCK_REF_SCHEMA.decode({"block": "finalized"}), ctx)
    assert result.content == ["19000000"]
    selector = provider.calls[0][1]
    assert str(selector) == "finalized"
    assert provider.calls[0][2:] == (False, ["number"], False)


@pytest.mark.asyncio
async def test_age_renders_utc_date(provider, ctx):
    provider.responses["block"] = "0"
    result = await block.age(BLOCK_REF_SCHEMA.decode({"block": "1"}), ctx)
    assert result.content == ["Thu Jan  1 00:00:00 1970"]
    assert provider.calls == [("block", BlockHeight(1), False, ["timestamp"], False)]


@pytest.mark.asyncio
async def test_age_rejects_non_numeric_timestamp(provider, ctx):
    provider.responses["block"] = "soon"
    with pytest.raises(ProviderError):
        await block.age(BLOCK_REF_SCHEMA.decode({}), ctx)


@pytest.mark.asyncio
@pytest.mark.parametrize("timestamp", ["10000000000000", str(10**30), "-" + "9" * 20])
async def test_age_rejects_out_of_range_timestamp(provider, ctx, timestamp):
    provider.responses["block"] = timestamp
    with pytest.raises(ProviderError) as excinfo:
        await block.age(BLOCK_REF_SCHEMA.decode({}), ctx)
    assert timestamp in excinfo.value.message


@pytest.mark.asyncio
async def test_unknown_block_falls_back_to_latest(provider, ctx):
    provider.responses["block"] = "1"
    await block.block_number(BLOCK_REF_SCHEMA.decode({"block": "yesterday"}), ctx)
    assert provider.calls[0][1] == LATEST


@pytest.mark.asyncio
async def test_gas_price(provider, ctx):
    provider.responses["gas_price"] = 30_000_000_000
    result = await chain.gas_price(CHAIN_SCHEMA.decode({}), ctx)
    assert result.content == ["30000000000"]


@pytest.mark.asyncio
async def test_chain_and_chain_id(provider, ctx):
    provider.responses.update({"chain_name": "ethlive", "chain_id": 1})
    args = CHAIN_SCHEMA.decode({"rpc": "https://eth.example.org"})
    assert (await chain.chain(args, ctx)).content == ["ethlive"]
    assert (await chain.chain_id(args, ctx)).content == ["1"]


@pytest.mark.asyncio
async def test_client_version(provider, ctx, connects):
    provider.responses["client_version"] = "Geth/v1.14.0"
    result = await chain.client(CHAIN_SCHEMA.decode({"rpc": "http://10.0.0.2:8545"}), ctx)
    assert result.content == ["Geth/v1.14.0"]
    assert connects == ["http://10.0.0.2:8545"]
