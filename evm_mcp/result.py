"""Uniform result envelope returned by every tool call."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from evm_mcp.errors import ErrorKind, ToolError


@dataclass(frozen=True, slots=True)
class ToolFailure:
    kind: ErrorKind
    message: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        """Error object with a machine-readable code and a human message."""
        return {
            "code": self.kind.code,
            "message": self.message,
            "data": {"kind": self.kind.value, **self.data},
        }


@dataclass(frozen=True, slots=True)
class ToolResult:
    content: List[str] = field(default_factory=list)
    failure: Optional[ToolFailure] = None

    @classmethod
    def text(cls, *texts: str) -> "ToolResult":
        return cls(content=[str(t) for t in texts])

    @classmethod
    def error(cls, kind: ErrorKind, message: str, data: Optional[Dict[str, Any]] = None) -> "ToolResult":
        return cls(failure=ToolFailure(kind=kind, message=message, data=dict(data or {})))

    @classmethod
    def from_exception(cls, exc: ToolError) -> "ToolResult":
        return cls.error(exc.kind, exc.message, exc.data)

    @property
    def is_error(self) -> bool:
        return self.failure is not None

    def to_payload(self) -> Dict[str, Any]:
        """Shape the envelope for the wire: text content blocks or an error object."""
        if self.failure is not None:
            return {"error": self.failure.to_payload()}
        return {"content": [{"type": "text", "text": text} for text in self.content]}
