import pytest

from evm_mcp.evm_api import rlp
from evm_mcp.evm_api.disassembler import OPCODES, disassemble, push_size


@pytest.mark.parametrize("item,expected", [
    (b"dog", "83646f67"),
    ([b"cat", b"dog"], "c88363617483646f67"),
    (b"", "80"),
    ([], "c0"),
    (b"\x0f", "0f"),
    (b"\x80", "8180"),
    ([[], [[]], [[], [[]]]], "c7c0c1c0c3c0c1c0"),
])
def test_rlp_encode(item, expected):
    assert rlp.encode(item).hex() == expected


def test_rlp_long_string():
    payload = b"a" * 56
    assert rlp.encode(payload)[:2] == bytes([0xB8, 56])


def _header(**extra):
    block = {name: "0x00" for name in rlp.HEADER_FIELDS}
    block.update(
        parentHash="0x" + "11" * 32,
        miner="0x" + "22" * 20,
        number="0x10",
        nonce="0x0000000000000000",
    )
    block.update(extra)
    return block


def test_header_items_base_fields():
    items = rlp.header_items(_header())
    assert len(items) == len(rlp.HEADER_FIELDS)
    assert items[0] == bytes.fromhex("11" * 32)
    # Quantities are minimal big-endian; zero is the empty string.
    assert items[rlp.HEADER_FIELDS.index("number")] == b"\x10"
    assert items[rlp.HEADER_FIELDS.index("difficulty")] == b""
    assert items[rlp.HEADER_FIELDS.index("nonce")] == b"\x00" * 8


def test_header_items_stop_at_first_missing_fork_field():
    items = rlp.header_items(_header(baseFeePerGas="0x7", blobGasUsed="0x1"))
    assert len(items) == len(rlp.HEADER_FIELDS) + 1
    assert items[-1] == b"\x07"


def test_header_missing_base_field():
    block = _header()
    del block["stateRoot"]
    with pytest.raises(ValueError):
        rlp.header_items(block)


def test_encode_header_is_list():
    encoded = rlp.encode_header(_header())
    # 75 bytes of payload: long-list prefix with a one-byte length.
    assert encoded.startswith("0xf84b")
    assert len(encoded) == 2 + 2 * (2 + 75)


def test_disassemble_push_sequence():
    code = bytes.fromhex("6080604052")
    assert disassemble(code) == "00000000: PUSH1 0x80\n00000002: PUSH1 0x40\n00000004: MSTORE"


def test_disassemble_unknown_and_truncated():
    assert disassemble(bytes([0x0C])) == "00000000: UNKNOWN(0x0c)"
    assert disassemble(bytes.fromhex("61ff")) == "00000000: PUSH2 0xff"
    assert disassemble(b"") == ""


def test_opcode_table():
    assert OPCODES[0x7F] == "PUSH32"
    assert OPCODES[0x8F] == "DUP16"
    assert OPCODES[0x9F] == "SWAP16"
    assert OPCODES[0xA4] == "LOG4"
    assert push_size(0x5F) == 0
    assert push_size(0x7F) == 32
