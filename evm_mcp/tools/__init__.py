"""LLM-facing tool groups. Each module exposes a ``router`` registry."""

from .account import router as account_router
from .block import router as block_router
from .chain import router as chain_router
from .utility import router as utility_router
from . import validators

__all__ = [
    "account_router",
    "block_router",
    "chain_router",
    "utility_router",
    "validators",
]
