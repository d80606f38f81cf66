"""
Thin JSON-RPC client for Ethereum-compatible nodes.

All methods are read-only. Transport and node errors are mapped to
``EvmRpcError`` subclasses; the provider binding turns them into tool-level
``ProviderError`` results carrying the message verbatim.
"""

from __future__ import annotations

import itertools
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from evm_mcp.blocks import BlockHash, BlockSelector
from evm_mcp.config import EvmMcpConfig, default_config
from evm_mcp.errors import ConfigError
from evm_mcp.evm_api import chains, ens, rlp
from evm_mcp.evm_api.disassembler import disassemble

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = {"http", "https"}
ZERO_ADDRESS = "0x" + "00" * 20

# Order of the pretty block rendering; anything else the node returns follows.
PRETTY_BLOCK_FIELDS = (
    "baseFeePerGas",
    "difficulty",
    "extraData",
    "gasLimit",
    "gasUsed",
    "hash",
    "logsBloom",
    "miner",
    "mixHash",
    "nonce",
    "number",
    "parentHash",
    "parentBeaconBlockRoot",
    "transactionsRoot",
    "receiptsRoot",
    "sha3Uncles",
    "size",
    "stateRoot",
    "timestamp",
    "withdrawalsRoot",
    "totalDifficulty",
    "blobGasUsed",
    "excessBlobGas",
    "requestsHash",
)


class EvmRpcError(Exception):
    """Base exception for JSON-RPC failures."""

    def __init__(
        self,
        message: str,
        *,
        code: Optional[int] = None,
        status_code: Optional[int] = None,
        data: Any = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code
        self.data = data


class NodeUnreachableError(EvmRpcError):
    """Raised when the node cannot be reached."""


class RpcTimeoutError(EvmRpcError):
    """Raised when the node does not answer within the configured timeout."""


class JsonRpcError(EvmRpcError):
    """Raised when the node answers with a JSON-RPC error object."""


class UnexpectedResponseError(EvmRpcError):
    """Raised when the node answers with something that is not JSON-RPC."""


class BlockNotFoundError(EvmRpcError):
    """Raised when the requested block does not exist."""


def validate_rpc_url(rpc_url: str) -> str:
    """Return the URL unchanged if it is a usable http(s) endpoint, else raise ConfigError."""
    if not isinstance(rpc_url, str) or not rpc_url.strip():
        raise ConfigError("Invalid RPC URL: empty endpoint.", data={"rpc": rpc_url})
    candidate = rpc_url.strip()
    try:
        url = httpx.URL(candidate)
    except (httpx.InvalidURL, TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid RPC URL: {exc}", data={"rpc": rpc_url}) from exc
    if url.scheme not in SUPPORTED_SCHEMES:
        raise ConfigError(
            f"Invalid RPC URL: unsupported scheme '{url.scheme}'.", data={"rpc": rpc_url}
        )
    if not url.host:
        raise ConfigError("Invalid RPC URL: missing host.", data={"rpc": rpc_url})
    return candidate


def connect(rpc_url: str, config: EvmMcpConfig | None = None) -> "EvmRpcClient":
    """Build a client for ``rpc_url``; raises ConfigError for unusable endpoints."""
    return EvmRpcClient(validate_rpc_url(rpc_url), config=config)


def _to_int(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if text.startswith(("0x", "0X")):
                return int(text, 16) if len(text) > 2 else 0
            return int(text)
        except ValueError:
            pass
    raise UnexpectedResponseError(f"Expected a quantity, got {value!r}.")


def _hex_to_bytes(value: Any) -> bytes:
    if not isinstance(value, str) or not value.startswith("0x"):
        raise UnexpectedResponseError(f"Expected hex data, got {value!r}.")
    digits = value[2:]
    if len(digits) % 2:
        digits = "0" + digits
    try:
        return bytes.fromhex(digits)
    except ValueError as exc:
        raise UnexpectedResponseError(f"Expected hex data, got {value!r}.") from exc


def _format_value(name: str, value: Any) -> str:
    if name in rlp.QUANTITY_FIELDS and isinstance(value, str):
        return str(_to_int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    if value is None:
        return "null"
    return str(value)


def format_block(block: Dict[str, Any]) -> str:
    """Human-readable ``key value`` rendering of an RPC block object."""
    lines: List[str] = []
    ordered = [name for name in PRETTY_BLOCK_FIELDS if name in block]
    ordered += [
        name for name in block if name not in PRETTY_BLOCK_FIELDS and name not in ("transactions", "uncles", "withdrawals")
    ]
    for name in ordered:
        value = _format_value(name, block[name])
        if name == "timestamp":
            moment = datetime.fromtimestamp(int(value), tz=timezone.utc)
            value = f"{value} ({moment.strftime('%a, %d %b %Y %H:%M:%S %z')})"
        lines.append(f"{name:<21}{value}")

    transactions = block.get("transactions") or []
    lines.append("")
    lines.append("transactions:        [")
    for tx in transactions:
        lines.append(f"\t{json.dumps(tx) if isinstance(tx, dict) else tx}")
    lines.append("]")
    return "\n".join(lines)


def select_block_fields(block: Dict[str, Any], fields: List[str]) -> str:
    """Render the requested fields, one value per line."""
    lowered = {key.lower(): key for key in block}
    values: List[str] = []
    for requested in fields:
        key = requested if requested in block else lowered.get(requested.lower())
        if key is None:
            raise EvmRpcError(f"Unknown block field '{requested}'.")
        values.append(_format_value(key, block[key]))
    return "\n".join(values)


class EvmRpcClient:
    """Async JSON-RPC client bound to one endpoint."""

    def __init__(
        self,
        rpc_url: str,
        config: EvmMcpConfig | None = None,
        *,
        async_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.rpc_url = rpc_url
        self.config = config or default_config
        self._client: Optional[httpx.AsyncClient] = async_client
        self._owns_client = async_client is None
        self._ids = itertools.count(1)

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout)
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _process_response(self, response: httpx.Response) -> Any:
        try:
            data = response.json()
        except ValueError:
            data = None

        if not isinstance(data, dict):
            if response.status_code >= 400:
                raise UnexpectedResponseError(
                    f"HTTP error {response.status_code}", status_code=response.status_code
                )
            raise UnexpectedResponseError(
                "RPC endpoint returned a non JSON-RPC response.", status_code=response.status_code
            )

        error = data.get("error")
        if error is not None:
            if isinstance(error, dict):
                raise JsonRpcError(
                    str(error.get("message") or "RPC error"),
                    code=error.get("code"),
                    status_code=response.status_code,
                    data=error.get("data"),
                )
            raise JsonRpcError(str(error), status_code=response.status_code)

        if response.status_code >= 400:
            raise UnexpectedResponseError(
                f"HTTP error {response.status_code}", status_code=response.status_code
            )
        if "result" not in data:
            raise UnexpectedResponseError(
                "RPC response has no result.", status_code=response.status_code
            )
        return data["result"]

    async def _request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params or []}
        client = await self._get_client()
        try:
            response = await client.post(self.rpc_url, json=payload)
        except httpx.TimeoutException as exc:
            logger.warning("RPC timeout method=%s", method)
            raise RpcTimeoutError(f"Request to RPC endpoint timed out: {exc}") from exc
        except httpx.RequestError as exc:
            logger.warning("RPC endpoint unreachable method=%s", method)
            raise NodeUnreachableError(f"RPC endpoint unreachable: {exc}") from exc
        return self._process_response(response)

    async def balance(self, address: str, block: BlockSelector) -> int:
        """Balance of ``address`` in wei."""
        return _to_int(await self._request("eth_getBalance", [address, block.to_rpc_state_param()]))

    async def nonce(self, address: str, block: BlockSelector) -> int:
        return _to_int(
            await self._request("eth_getTransactionCount", [address, block.to_rpc_state_param()])
        )

    async def _fetch_code(self, address: str, block: BlockSelector) -> bytes:
        return _hex_to_bytes(await self._request("eth_getCode", [address, block.to_rpc_state_param()]))

    async def code(self, address: str, block: BlockSelector, disassemble_code: bool = False) -> str:
        code = await self._fetch_code(address, block)
        if disassemble_code:
            return disassemble(code)
        return "0x" + code.hex()

    async def code_size(self, address: str, block: BlockSelector) -> int:
        return len(await self._fetch_code(address, block))

    async def storage(self, address: str, slot: str, block: BlockSelector) -> str:
        """Storage word at ``slot``, always rendered as 32 bytes."""
        value = await self._request("eth_getStorageAt", [address, slot, block.to_rpc_state_param()])
        word = _hex_to_bytes(value)
        if len(word) > 32:
            raise UnexpectedResponseError(f"Storage value longer than 32 bytes: {value!r}.")
        return "0x" + word.rjust(32, b"\x00").hex()

    async def fetch_block(self, block: BlockSelector, full: bool = False) -> Dict[str, Any]:
        if isinstance(block, BlockHash):
            result = await self._request("eth_getBlockByHash", [block.to_rpc(), full])
        else:
            result = await self._request("eth_getBlockByNumber", [block.to_rpc(), full])
        if result is None:
            raise BlockNotFoundError(f"Block {block} not found.")
        if not isinstance(result, dict):
            raise UnexpectedResponseError(f"Unexpected block payload: {result!r}.")
        return result

    async def block(
        self,
        block: BlockSelector,
        full: bool = False,
        fields: Optional[List[str]] = None,
        raw: bool = False,
    ) -> str:
        """
        Render a block.

        ``raw`` returns the RLP-encoded header, ``fields`` selects individual
        values (one per line), otherwise the whole block is pretty-printed.
        """
        data = await self.fetch_block(block, full=full)
        if raw:
            try:
                return rlp.encode_header(data)
            except ValueError as exc:
                raise UnexpectedResponseError(f"Cannot encode block header: {exc}") from exc
        if fields:
            return select_block_fields(data, fields)
        return format_block(data)

    async def gas_price(self) -> int:
        return _to_int(await self._request("eth_gasPrice"))

    async def chain_id(self) -> int:
        return _to_int(await self._request("eth_chainId"))

    async def chain_name(self) -> str:
        return chains.chain_name(await self.chain_id())

    async def client_version(self) -> str:
        version = await self._request("web3_clientVersion")
        if not isinstance(version, str):
            raise UnexpectedResponseError(f"Unexpected client version: {version!r}.")
        return version

    async def _call_address(self, to: str, data: str) -> str:
        result = await self._request("eth_call", [{"to": to, "data": data}, "latest"])
        word = _hex_to_bytes(result)
        if len(word) < 20:
            raise UnexpectedResponseError(f"Expected an address word, got {result!r}.")
        return "0x" + word[-20:].hex()

    async def resolve_name(self, name: str) -> Optional[str]:
        """Resolve an ENS name; returns None when the name has no resolver or address."""
        try:
            node = ens.namehash(name)
        except ValueError as exc:
            raise EvmRpcError(f"Invalid ENS name: {exc}") from exc
        resolver = await self._call_address(ens.ENS_REGISTRY, ens.resolver_call_data(node))
        if resolver == ZERO_ADDRESS:
            logger.debug("ENS name has no resolver name=%s", name)
            return None
        address = await self._call_address(resolver, ens.addr_call_data(node))
        if address == ZERO_ADDRESS:
            return None
        return address
