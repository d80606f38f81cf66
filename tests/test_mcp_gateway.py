import pytest
from fastapi.testclient import TestClient

from conftest import StubProvider
from evm_mcp import mcp
from evm_mcp.mcp import TOOL_REGISTRY, Dispatcher
from evm_mcp.server import MCP_SERVER_NAME, MCP_SERVER_VERSION, app


@pytest.fixture
def stub_provider(monkeypatch):
    provider = StubProvider(responses={"client_version": "anvil/v0.2.0"})
    monkeypatch.setattr(mcp, "default_dispatcher", Dispatcher(TOOL_REGISTRY, connect=lambda url: provider))
    return provider


def test_mcp_initialize():
    client = TestClient(app)
    resp = client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": 10,
            "method": "initialize",
            "params": {"protocolVersion": "2025-03-26", "capabilities": {}},
        },
    )
    assert resp.status_code == 200
    result = resp.json()["result"]
    assert result["protocolVersion"] == "2025-03-26"
    assert result["serverInfo"] == {"name": MCP_SERVER_NAME, "version": MCP_SERVER_VERSION}
    assert result["capabilities"]["tools"]["listChanged"] is False


def test_mcp_initialize_requires_protocol_version():
    client = TestClient(app)
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 11, "method": "initialize"})
    assert resp.json()["error"]["code"] == -32602


@pytest.mark.parametrize("method", ["list_tools", "tools/list"])
def test_mcp_list_tools(method):
    client = TestClient(app)
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": method})
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == 1
    tools = data["result"]["tools"]
    block = next(tool for tool in tools if tool["name"] == "block")
    assert block["inputSchema"]["properties"]["fields"]["type"] == "array"


def test_mcp_tools_call(stub_provider):
    client = TestClient(app)
    resp = client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": 2,
            "method": "tools/call",
            "params": {"name": "client", "arguments": {"rpc": "http://node:8545"}},
        },
    )
    data = resp.json()
    assert data["id"] == 2
    assert data["result"] == {"content": [{"type": "text", "text": "anvil/v0.2.0"}]}


def test_mcp_call_tool_legacy_keys():
    client = TestClient(app)
    resp = client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": 3,
            "method": "call_tool",
            "params": {"tool": "max_uint", "params": {"type": "uint8"}},
        },
    )
    assert resp.json()["result"]["content"][0]["text"] == "255"


def test_mcp_tool_failure_is_jsonrpc_error(stub_provider):
    client = TestClient(app)
    resp = client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": 4,
            "method": "tools/call",
            "params": {"name": "balance", "arguments": {"who": "0x12"}},
        },
    )
    data = resp.json()
    assert "result" not in data
    assert data["error"]["code"] == -32602
    assert data["error"]["data"]["kind"] == "resolution"
    assert data["error"]["message"] == "Invalid address format."


def test_mcp_unknown_tool():
    client = TestClient(app)
    resp = client.post(
        "/mcp",
        json={"jsonrpc": "2.0", "id": 5, "method": "tools/call", "params": {"name": "teleport"}},
    )
    assert resp.json()["error"]["code"] == -32601


def test_mcp_missing_tool_name():
    client = TestClient(app)
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 6, "method": "tools/call", "params": {}})
    assert resp.json()["error"]["code"] == -32602


def test_mcp_parse_error():
    client = TestClient(app)
    resp = client.post("/mcp", content=b"{", headers={"content-type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == -32700


def test_mcp_invalid_request():
    client = TestClient(app)
    resp = client.post("/mcp", json=[1, 2, 3])
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == -32600


def test_mcp_unknown_method():
    client = TestClient(app)
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 7, "method": "resources/list"})
    assert resp.json()["error"]["code"] == -32601


def test_mcp_initialized_notification():
    client = TestClient(app)
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "method": "notifications/initialized"})
    assert resp.status_code == 204


@pytest.mark.parametrize("params", [
    ["balance"],
    {"name": "ping", "arguments": ["not", "an", "object"]},
    {"name": "   "},
])
def test_mcp_invalid_params_keep_request_id(params):
    client = TestClient(app)
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 8, "method": "tools/call", "params": params})
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == 8
    assert data["error"] == {"code": -32602, "message": "Invalid params"}


def test_mcp_missing_method():
    client = TestClient(app)
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 9})
    assert resp.json() == {"jsonrpc": "2.0", "id": 9, "error": {"code": -32600, "message": "Invalid request"}}
