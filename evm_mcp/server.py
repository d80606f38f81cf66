"""FastAPI application exposing the EVM tools over HTTP and an MCP JSON-RPC gateway."""

from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from evm_mcp import mcp
from evm_mcp.config import default_config
from evm_mcp.errors import ErrorKind
from evm_mcp.metrics import default_metrics
from evm_mcp.result import ToolResult

logger = logging.getLogger(__name__)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "message": record.getMessage(),
            "name": record.name,
        }
        for key in ("tool", "request_id", "error"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging() -> None:
    level = getattr(logging, default_config.log_level.upper(), logging.INFO)
    if default_config.log_format.lower() == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logging.basicConfig(level=level, handlers=[handler])
    else:
        logging.basicConfig(level=level)


configure_logging()

APP_VERSION = "0.1.0"
MCP_SERVER_NAME = "evm-mcp-server"
MCP_SERVER_VERSION = APP_VERSION
HEALTH_STATUS = {"status": "ok"}

# HTTP status used by the REST routes for each failure kind.
HTTP_STATUS_BY_KIND = {
    ErrorKind.DECODE: 400,
    ErrorKind.CONFIG: 400,
    ErrorKind.RESOLUTION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.PROVIDER: 502,
    ErrorKind.INTERNAL: 500,
}

app = FastAPI(
    title="EVM MCP Server",
    description="Read-only EVM chain tool surface for LLM agents.",
    version=APP_VERSION,
)


@app.middleware("http")
async def add_request_context(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    start = time.time()
    response = await call_next(request)
    default_metrics.incr_request((time.time() - start) * 1000)
    response.headers["X-Request-ID"] = request_id
    return response


def _log_tool_result(tool_name: str, result: ToolResult, request_id: Optional[str] = None) -> None:
    if result.failure is not None:
        kind = result.failure.kind.value
        logger.warning(
            "tool=%s outcome=error kind=%s error=%s request_id=%s",
            tool_name,
            kind,
            result.failure.message,
            request_id,
            extra={"tool": tool_name, "request_id": request_id, "error": kind},
        )
        default_metrics.record_tool(tool_name, error_kind=kind)
    else:
        logger.info(
            "tool=%s outcome=success request_id=%s",
            tool_name,
            request_id,
            extra={"tool": tool_name, "request_id": request_id},
        )
        default_metrics.record_tool(tool_name)


@app.get("/health")
async def health() -> JSONResponse:
    """Lightweight health endpoint for monitoring."""
    return JSONResponse(content=HEALTH_STATUS)


@app.get("/metrics")
async def metrics() -> JSONResponse:
    """Return in-process metrics snapshot."""
    return JSONResponse(content=default_metrics.snapshot())


@app.get("/tools")
async def tools_index() -> JSONResponse:
    """List available tools with their input schemas."""
    return JSONResponse(content={"tools": mcp.list_tools()})


@app.post("/tools/{tool_name}")
async def call_tool_route(tool_name: str, request: Request) -> JSONResponse:
    """Call a tool with the JSON request body as its arguments."""
    request_id = getattr(request.state, "request_id", None)
    raw_body = await request.body()
    if raw_body.strip():
        try:
            arguments = json.loads(raw_body)
        except ValueError:
            result = ToolResult.error(ErrorKind.DECODE, "Request body is not valid JSON.")
            _log_tool_result(tool_name, result, request_id)
            return JSONResponse(status_code=400, content=result.to_payload())
    else:
        arguments = {}

    result = await mcp.call_tool(tool_name, arguments)
    _log_tool_result(tool_name, result, request_id)
    status_code = 200
    if result.failure is not None:
        status_code = HTTP_STATUS_BY_KIND[result.failure.kind]
    return JSONResponse(status_code=status_code, content=result.to_payload())


# JSON-RPC 2.0 error codes used by the gateway itself.
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602

_GATEWAY_MESSAGES = {
    PARSE_ERROR: "Parse error",
    INVALID_REQUEST: "Invalid request",
    METHOD_NOT_FOUND: "Method not found",
    INVALID_PARAMS: "Invalid params",
}

# Methods that never get a response body.
NOTIFICATIONS = frozenset({"notifications/initialized", "initialized"})


class GatewayError(Exception):
    """A malformed JSON-RPC exchange; tool failures never use this."""

    def __init__(self, code: int, *, status_code: int = 200) -> None:
        super().__init__(_GATEWAY_MESSAGES[code])
        self.code = code
        self.status_code = status_code

    def member(self) -> Dict[str, Any]:
        return {"error": {"code": self.code, "message": str(self)}}


GatewayMethod = Callable[[Dict[str, Any], Optional[str]], Awaitable[Dict[str, Any]]]


async def _initialize(params: Dict[str, Any], _request_id: Optional[str]) -> Dict[str, Any]:
    protocol_version = params.get("protocolVersion")
    if not isinstance(protocol_version, str) or not protocol_version:
        raise GatewayError(INVALID_PARAMS)
    return {
        "result": {
            "protocolVersion": protocol_version,
            "serverInfo": {"name": MCP_SERVER_NAME, "version": MCP_SERVER_VERSION},
            "capabilities": {"tools": {"listChanged": False}},
        }
    }


async def _list_tools(_params: Dict[str, Any], _request_id: Optional[str]) -> Dict[str, Any]:
    return {"result": {"tools": mcp.list_tools()}}


async def _call_tool(params: Dict[str, Any], request_id: Optional[str]) -> Dict[str, Any]:
    # MCP clients send name/arguments; older clients used tool/params.
    tool_name = params.get("name") or params.get("tool")
    arguments = params.get("arguments")
    if arguments is None:
        arguments = params.get("params") or {}
    if not isinstance(tool_name, str) or not tool_name.strip() or not isinstance(arguments, dict):
        raise GatewayError(INVALID_PARAMS)

    result = await mcp.call_tool(tool_name, arguments)
    _log_tool_result(tool_name, result, request_id)
    if result.failure is not None:
        return {"error": result.failure.to_payload()}
    return {"result": result.to_payload()}


GATEWAY_METHODS: Dict[str, GatewayMethod] = {
    "initialize": _initialize,
    "list_tools": _list_tools,
    "tools/list": _list_tools,
    "call_tool": _call_tool,
    "tools/call": _call_tool,
}


async def _read_body(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        raise GatewayError(PARSE_ERROR, status_code=400) from None
    if not isinstance(body, dict):
        raise GatewayError(INVALID_REQUEST, status_code=400)
    return body


def _params_of(body: Dict[str, Any]) -> Dict[str, Any]:
    params = body.get("params")
    if params is None:
        return {}
    if not isinstance(params, dict):
        raise GatewayError(INVALID_PARAMS)
    return params


@app.post("/mcp")
async def mcp_gateway(request: Request) -> Response:
    """
    JSON-RPC 2.0 entry point for MCP clients.

    Methods are looked up in ``GATEWAY_METHODS``; notifications are
    acknowledged with an empty 204. A failed tool call is reported in the
    ``error`` member with the tool's own error code and kind.
    """
    request_id = getattr(request.state, "request_id", None)
    start_time = time.time()
    rpc_id: Any = None
    method: Any = None
    status_code = 200
    try:
        body = await _read_body(request)
        rpc_id = body.get("id")
        method = body.get("method")
        params = _params_of(body)
        if not method:
            raise GatewayError(INVALID_REQUEST)
        if method in NOTIFICATIONS:
            return Response(status_code=204)
        handler = GATEWAY_METHODS.get(method)
        if handler is None:
            raise GatewayError(METHOD_NOT_FOUND)
        member = await handler(params, request_id)
    except GatewayError as exc:
        member = exc.member()
        status_code = exc.status_code

    error = member.get("error")
    error_code = error["code"] if error else None
    logger.debug(
        "mcp method=%s id=%s status=%s error_code=%s duration_ms=%.2f",
        method,
        rpc_id,
        status_code,
        error_code,
        (time.time() - start_time) * 1000,
        extra={"request_id": request_id, "error": error_code},
    )
    return JSONResponse(status_code=status_code, content={"jsonrpc": "2.0", "id": rpc_id, **member})


# Run with: uvicorn evm_mcp.server:app
