"""Symbolic names for well-known chain ids."""

from __future__ import annotations

CHAIN_NAMES = {
    1: "ethlive",
    5: "goerli",
    10: "optimism-mainnet",
    56: "bsc",
    100: "gnosis",
    137: "polygon-pos",
    250: "fantom",
    324: "zksync",
    8453: "base",
    17000: "holesky",
    31337: "anvil-hardhat",
    42161: "arbitrum-mainnet",
    42220: "celo",
    43114: "avalanche",
    59144: "linea",
    80002: "polygon-amoy",
    84532: "base-sepolia",
    421614: "arbitrum-sepolia",
    11155111: "sepolia",
    11155420: "optimism-sepolia",
}

UNKNOWN_CHAIN = "unknown"


def chain_name(chain_id: int) -> str:
    return CHAIN_NAMES.get(chain_id, UNKNOWN_CHAIN)
