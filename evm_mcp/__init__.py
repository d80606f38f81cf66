"""
Read-only EVM MCP server package.

This package exposes LLM-friendly tools backed by an Ethereum-compatible
JSON-RPC endpoint. See DESIGN.md for full details.
"""

__all__ = ["config"]
