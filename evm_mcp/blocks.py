"""
Block reference resolution.

Callers pass loosely-typed block references ("latest", a height, a block hash
or anything else). ``resolve_block`` turns them into a ``BlockSelector`` and
never fails: input it cannot interpret resolves to the chain tip.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

MAX_BLOCK_HEIGHT = 2**64 - 1
MAX_HEIGHT_DIGITS = len(str(MAX_BLOCK_HEIGHT))

HASH_HEX_REGEX = re.compile(r"^[0-9a-fA-F]{64}$")
HEIGHT_REGEX = re.compile(r"^\+?[0-9]+$")


class BlockTag(str, Enum):
    EARLIEST = "earliest"
    FINALIZED = "finalized"
    SAFE = "safe"
    LATEST = "latest"
    PENDING = "pending"


@dataclass(frozen=True, slots=True)
class BlockTagSelector:
    """A symbolic block tag such as ``latest`` or ``finalized``."""

    tag: BlockTag

    def to_rpc(self) -> str:
        return self.tag.value

    def to_rpc_state_param(self) -> str:
        return self.tag.value

    def __str__(self) -> str:
        return self.tag.value


@dataclass(frozen=True, slots=True)
class BlockHash:
    """A 32-byte block hash, stored as lower-case ``0x`` hex."""

    value: str

    def to_rpc(self) -> str:
        return self.value

    def to_rpc_state_param(self) -> dict[str, Any]:
        # EIP-1898 block parameter for state queries.
        return {"blockHash": self.value}

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class BlockHeight:
    """An explicit block number."""

    number: int

    def to_rpc(self) -> str:
        return hex(self.number)

    def to_rpc_state_param(self) -> str:
        return hex(self.number)

    def __str__(self) -> str:
        return str(self.number)


BlockSelector = Union[BlockTagSelector, BlockHash, BlockHeight]

LATEST: BlockSelector = BlockTagSelector(BlockTag.LATEST)

_TAGS = {tag.value: BlockTagSelector(tag) for tag in BlockTag}


def _parse_hash(value: str) -> Optional[BlockHash]:
    if len(value) != 66 or not value.startswith("0x"):
        return None
    digits = value[2:]
    if not HASH_HEX_REGEX.fullmatch(digits):
        return None
    return BlockHash("0x" + digits.lower())


def _parse_height(value: str) -> Optional[BlockHeight]:
    if not HEIGHT_REGEX.fullmatch(value):
        return None
    digits = value.lstrip("+").lstrip("0") or "0"
    # Too many digits for u64; also keeps int() clear of the str-conversion limit.
    if len(digits) > MAX_HEIGHT_DIGITS:
        return None
    number = int(digits)
    if number > MAX_BLOCK_HEIGHT:
        return None
    return BlockHeight(number)


def resolve_block(value: Optional[str]) -> BlockSelector:
    """
    Resolve a free-form block reference.

    Order: symbolic tag (case-insensitive), 32-byte ``0x`` hash, unsigned
    64-bit decimal height. Absent or unrecognised input yields ``LATEST``.
    """
    if value is None:
        return LATEST
    trimmed = str(value).strip()

    tag = _TAGS.get(trimmed.lower())
    if tag is not None:
        return tag

    block_hash = _parse_hash(trimmed)
    if block_hash is not None:
        return block_hash

    height = _parse_height(trimmed)
    if height is not None:
        return height

    logger.debug("Unrecognised block reference %r, using latest", value)
    return LATEST
