import logging
import json

from evm_mcp.config import DEFAULT_RPC_URL, EvmMcpConfig, _load_timeout, default_config
from evm_mcp.metrics import MetricsRecorder
from evm_mcp.server import JsonFormatter


def test_load_timeout_invalid_env(monkeypatch):
    monkeypatch.setenv("EVM_MCP_HTTP_TIMEOUT", "not-a-number")
    assert _load_timeout() == 10.0


def test_load_timeout_valid_env(monkeypatch):
    monkeypatch.setenv("EVM_MCP_HTTP_TIMEOUT", "2.5")
    assert _load_timeout() == 2.5


def test_load_timeout_rejects_non_positive(monkeypatch):
    monkeypatch.setenv("EVM_MCP_HTTP_TIMEOUT", "0")
    assert _load_timeout() == 10.0


def test_default_rpc_is_loopback():
    assert DEFAULT_RPC_URL == "http://localhost:8545"
    assert EvmMcpConfig().default_rpc_url == DEFAULT_RPC_URL


def test_logging_level_config():
    level = getattr(logging, default_config.log_level.upper(), logging.INFO)
    assert level in (logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL)


def test_json_formatter_includes_extras():
    record = logging.LogRecord("evm_mcp.server", logging.WARNING, __file__, 1, "tool failed", None, None)
    record.tool = "balance"
    record.error = "provider"
    payload = json.loads(JsonFormatter().format(record))
    assert payload == {
        "level": "WARNING",
        "message": "tool failed",
        "name": "evm_mcp.server",
        "tool": "balance",
        "error": "provider",
    }


def test_metrics_recorder_snapshot_and_reset():
    recorder = MetricsRecorder()
    recorder.incr_request(1.5)
    recorder.record_tool("ping")
    recorder.record_tool("balance", error_kind="resolution")
    snap = recorder.snapshot()
    assert snap["requests"] == 1
    assert snap["last_request_duration_ms"] == 1.5
    assert snap["tool_success"] == {"ping": 1}
    assert snap["tool_error"] == {"balance": 1}
    assert snap["error_kinds"] == {"resolution": 1}
    recorder.reset()
    assert recorder.snapshot()["requests"] == 0
