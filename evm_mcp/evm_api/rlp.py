"""Recursive-length-prefix encoding for block headers."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence, Union

RlpItem = Union[bytes, Sequence["RlpItem"]]

# Header fields in consensus order. Everything after ``nonce`` was added by a
# later fork and is only present on blocks produced after it.
HEADER_FIELDS = (
    "parentHash",
    "sha3Uncles",
    "miner",
    "stateRoot",
    "transactionsRoot",
    "receiptsRoot",
    "logsBloom",
    "difficulty",
    "number",
    "gasLimit",
    "gasUsed",
    "timestamp",
    "extraData",
    "mixHash",
    "nonce",
)
FORK_HEADER_FIELDS = (
    "baseFeePerGas",
    "withdrawalsRoot",
    "blobGasUsed",
    "excessBlobGas",
    "parentBeaconBlockRoot",
    "requestsHash",
)
QUANTITY_FIELDS = frozenset(
    {
        "baseFeePerGas",
        "blobGasUsed",
        "difficulty",
        "excessBlobGas",
        "gasLimit",
        "gasUsed",
        "number",
        "size",
        "timestamp",
        "totalDifficulty",
    }
)


def _length_prefix(length: int, offset: int) -> bytes:
    if length < 56:
        return bytes([offset + length])
    encoded = length.to_bytes((length.bit_length() + 7) // 8, "big")
    return bytes([offset + 55 + len(encoded)]) + encoded


def encode(item: RlpItem) -> bytes:
    if isinstance(item, (bytes, bytearray)):
        if len(item) == 1 and item[0] < 0x80:
            return bytes(item)
        return _length_prefix(len(item), 0x80) + bytes(item)
    payload = b"".join(encode(child) for child in item)
    return _length_prefix(len(payload), 0xC0) + payload


def _hex_bytes(value: str) -> bytes:
    digits = value[2:] if value.startswith("0x") else value
    if len(digits) % 2:
        digits = "0" + digits
    return bytes.fromhex(digits)


def _quantity_bytes(value: str) -> bytes:
    number = int(value, 16)
    if number == 0:
        return b""
    return number.to_bytes((number.bit_length() + 7) // 8, "big")


def header_items(block: Dict[str, Any]) -> List[bytes]:
    """Collect the header of an RPC block object as RLP byte strings."""
    items: List[bytes] = []
    for name in HEADER_FIELDS:
        value = block.get(name)
        if value is None:
            raise ValueError(f"block is missing header field '{name}'")
        items.append(_quantity_bytes(value) if name in QUANTITY_FIELDS else _hex_bytes(value))
    for name in FORK_HEADER_FIELDS:
        value = block.get(name)
        if value is None:
            break
        items.append(_quantity_bytes(value) if name in QUANTITY_FIELDS else _hex_bytes(value))
    return items


def encode_header(block: Dict[str, Any]) -> str:
    return "0x" + encode(header_items(block)).hex()
