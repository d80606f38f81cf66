"""
Tool registry.

Tool groups each build a ``Registry``; the server composes them into one
read-only table at import time. Composition is a disjoint union and rejects
duplicate tool names instead of letting one group silently shadow another.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Iterable, Iterator, Mapping

from evm_mcp.errors import DuplicateToolError, ToolNotFoundError
from evm_mcp.result import ToolResult
from evm_mcp.schema import ArgumentSchema

ToolHandler = Callable[[Any, Any], Awaitable[ToolResult]]


@dataclass(frozen=True, slots=True)
class ToolDescriptor:
    name: str
    description: str
    schema: ArgumentSchema
    handler: ToolHandler

    def to_listing(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.schema.to_json_schema(),
        }


class Registry:
    """Mapping of tool name to descriptor."""

    def __init__(self, descriptors: Iterable[ToolDescriptor] = ()) -> None:
        self._tools: Dict[str, ToolDescriptor] = {}
        self._frozen = False
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: ToolDescriptor) -> None:
        if self._frozen:
            raise RuntimeError("Registry is frozen; tools must be registered at build time.")
        if descriptor.name in self._tools:
            raise DuplicateToolError(descriptor.name)
        self._tools[descriptor.name] = descriptor

    def compose(self, other: "Registry") -> "Registry":
        """Return a new registry holding the tools of both; inputs are untouched."""
        merged = Registry(self._tools.values())
        for descriptor in other:
            merged.register(descriptor)
        return merged

    def __or__(self, other: "Registry") -> "Registry":
        return self.compose(other)

    def freeze(self) -> "Registry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lookup(self, name: str) -> ToolDescriptor:
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    @property
    def tools(self) -> Mapping[str, ToolDescriptor]:
        return MappingProxyType(self._tools)

    def names(self) -> list[str]:
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)


def compose_all(*registries: Registry) -> Registry:
    """Merge tool groups in order and freeze the result."""
    merged = Registry()
    for registry in registries:
        merged = merged.compose(registry)
    return merged.freeze()
