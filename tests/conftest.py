import os
import sys

import pytest

# Ensure repository root is on sys.path before importing project modules.
repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if repo_root not in sys.path:
    sys.path.insert(0, repo_root)

from evm_mcp.metrics import default_metrics  # noqa: E402
from evm_mcp.provider import ToolContext  # noqa: E402


class StubProvider:
    """Provider double: canned responses per operation, records every call."""

    def __init__(self, responses=None, errors=None):
        self.responses = dict(responses or {})
        self.errors = dict(errors or {})
        self.calls = []
        self.closed = False

    def __getattr__(self, operation):
        if operation.startswith("_"):
            raise AttributeError(operation)

        async def _call(*args):
            self.calls.append((operation, *args))
            if operation in self.errors:
                raise self.errors[operation]
            return self.responses[operation]

        return _call

    async def aclose(self):
        self.closed = True


@pytest.fixture(autouse=True)
def reset_metrics():
    default_metrics.reset()
    yield
    default_metrics.reset()


@pytest.fixture
def provider():
    return StubProvider()


@pytest.fixture
def connects():
    return []


@pytest.fixture
def ctx(provider, connects):
    def connect(rpc_url):
        connects.append(rpc_url)
        return provider

    return ToolContext(connect=connect)
