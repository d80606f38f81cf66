"""ENS helpers: namehash and the call data used to resolve a name."""

from __future__ import annotations

from Crypto.Hash import keccak

ENS_REGISTRY = "0x00000000000c2e074ec69a0dfb2997ba6c7d2e1e"

# resolver(bytes32) on the registry, addr(bytes32) on the resolver.
RESOLVER_SELECTOR = "0178b8bf"
ADDR_SELECTOR = "3b3b57de"


def keccak256(data: bytes) -> bytes:
    return keccak.new(digest_bits=256, data=data).digest()


def namehash(name: str) -> str:
    """EIP-137 namehash of a dotted name, as ``0x`` hex."""
    normalized = name.strip().lower().strip(".")
    if not normalized:
        raise ValueError("ENS name cannot be empty")
    labels = normalized.split(".")
    if any(not label for label in labels):
        raise ValueError("ENS name has empty labels")

    node = b"\x00" * 32
    for label in reversed(labels):
        node = keccak256(node + keccak256(label.encode("utf-8")))
    return "0x" + node.hex()


def resolver_call_data(node: str) -> str:
    return f"0x{RESOLVER_SELECTOR}{node[2:]}"


def addr_call_data(node: str) -> str:
    return f"0x{ADDR_SELECTOR}{node[2:]}"
