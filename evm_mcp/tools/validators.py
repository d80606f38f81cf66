"""Shared validation helpers for EVM MCP tools."""

from __future__ import annotations

import re
from typing import Optional, Tuple

# 20-byte account address, 0x prefix optional.
ADDRESS_REGEX = re.compile(r"^(0x)?[0-9a-fA-F]{40}$")
HEX_QUANTITY_REGEX = re.compile(r"^0x[0-9a-fA-F]{1,64}$")
DECIMAL_REGEX = re.compile(r"^[0-9]+$")
INT_TYPE_REGEX = re.compile(r"^(u?)int([0-9]*)$")

MAX_WORD = 2**256 - 1


def is_valid_address(address: Optional[str]) -> bool:
    """Basic format validation for account addresses."""
    if not address or not isinstance(address, str):
        return False
    return bool(ADDRESS_REGEX.fullmatch(address.strip()))


def normalize_address(address: str) -> str:
    """Return the address as lower-case ``0x`` hex; raises ValueError on bad input."""
    candidate = address.strip() if isinstance(address, str) else ""
    if not ADDRESS_REGEX.fullmatch(candidate):
        raise ValueError(f"invalid address {address!r}")
    if candidate.startswith("0x"):
        candidate = candidate[2:]
    return "0x" + candidate.lower()


def looks_like_name(value: str) -> bool:
    """ENS names are dotted labels; anything shaped like an address is not one."""
    return "." in value and not is_valid_address(value)


def parse_int_type(type_name: str) -> Tuple[bool, int]:
    """
    Parse a Solidity integer type name.

    Returns ``(signed, bits)``. Bare ``int``/``uint`` mean 256 bits; explicit
    widths must be a multiple of 8 between 8 and 256.
    """
    match = INT_TYPE_REGEX.fullmatch(type_name.strip().lower())
    if match is None:
        raise ValueError(f"unknown integer type {type_name!r}")
    unsigned, width = match.groups()
    bits = int(width) if width else 256
    if bits < 8 or bits > 256 or bits % 8:
        raise ValueError(f"invalid integer width in {type_name!r}")
    return not unsigned, bits


def validate_int_type(type_name: str) -> str:
    parse_int_type(type_name)
    return type_name


def parse_slot(slot: str) -> str:
    """Normalize a storage slot (decimal or 0x hex) to a 32-byte hex word."""
    text = slot.strip()
    if HEX_QUANTITY_REGEX.fullmatch(text):
        value = int(text, 16)
    elif DECIMAL_REGEX.fullmatch(text):
        value = int(text)
    else:
        raise ValueError(f"invalid storage slot {slot!r}")
    if value > MAX_WORD:
        raise ValueError(f"storage slot {slot!r} does not fit in 32 bytes")
    return "0x" + value.to_bytes(32, "big").hex()
