"""
Argument schemas for tools.

Each tool declares an ``ArgumentSchema``: an ordered set of typed fields with
optional defaults and validators, bound to a frozen dataclass record. Decoding
is a pure transform from a JSON object to that record; it never performs I/O.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Type

from evm_mcp.errors import DecodeError


class FieldType(str, Enum):
    STRING = "string"
    BOOLEAN = "boolean"
    OPTIONAL_STRING = "optional string"
    STRING_LIST = "list of strings"


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()

# Validators receive the decoded value and return it (possibly normalized) or
# raise ValueError with a human readable reason.
Validator = Callable[[Any], Any]


@dataclass(frozen=True, slots=True)
class Field:
    name: str
    type: FieldType
    description: str = ""
    default: Any = MISSING
    validator: Optional[Validator] = None

    @property
    def required(self) -> bool:
        return self.default is MISSING and self.type is not FieldType.OPTIONAL_STRING

    def default_value(self) -> Any:
        if self.default is MISSING:
            # Optional strings without an explicit default are simply absent.
            return None
        value = copy.copy(self.default)
        if self.validator is not None and value is not None:
            value = self.validator(value)
        return value

    def decode(self, value: Any) -> Any:
        if not _matches(self.type, value):
            raise DecodeError(
                f"Invalid value for '{self.name}': expected {self.type.value}.",
                field=self.name,
                expected=self.type.value,
            )
        if self.type is FieldType.STRING_LIST:
            value = list(value)
        if self.validator is not None and value is not None:
            try:
                value = self.validator(value)
            except ValueError as exc:
                raise DecodeError(f"Invalid value for '{self.name}': {exc}", field=self.name) from exc
        return value

    def to_json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any]
        if self.type is FieldType.STRING:
            schema = {"type": "string"}
        elif self.type is FieldType.BOOLEAN:
            schema = {"type": "boolean"}
        elif self.type is FieldType.OPTIONAL_STRING:
            schema = {"type": ["string", "null"]}
        else:
            schema = {"type": "array", "items": {"type": "string"}}
        if self.description:
            schema["description"] = self.description
        if self.default is not MISSING:
            schema["default"] = self.default
        return schema


def _matches(field_type: FieldType, value: Any) -> bool:
    if field_type is FieldType.STRING:
        return isinstance(value, str)
    if field_type is FieldType.BOOLEAN:
        return isinstance(value, bool)
    if field_type is FieldType.OPTIONAL_STRING:
        return value is None or isinstance(value, str)
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


@dataclass(frozen=True, slots=True)
class NoArgs:
    """Record for tools that take no arguments."""


@dataclass(frozen=True, slots=True)
class ArgumentSchema:
    record: Type[Any] = NoArgs
    fields: Tuple[Field, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        names = [f.name for f in self.fields]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate field in schema for {self.record.__name__}")

    def decode(self, raw: Optional[Mapping[str, Any]]) -> Any:
        return decode_arguments(self, raw)

    def to_json_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {f.name: f.to_json_schema() for f in self.fields},
            "required": [f.name for f in self.fields if f.required],
        }


def decode_arguments(schema: ArgumentSchema, raw: Optional[Mapping[str, Any]]) -> Any:
    """
    Decode a raw JSON object into the schema's record type.

    Missing fields take their declared default, required fields without a
    default raise ``DecodeError``, unknown keys are ignored.
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise DecodeError("Arguments must be a JSON object.", expected="object")

    values: Dict[str, Any] = {}
    for spec_field in schema.fields:
        if spec_field.name not in raw:
            if spec_field.required:
                raise DecodeError(
                    f"Missing required field '{spec_field.name}'.",
                    field=spec_field.name,
                    expected=spec_field.type.value,
                )
            values[spec_field.name] = spec_field.default_value()
            continue
        values[spec_field.name] = spec_field.decode(raw[spec_field.name])
    return schema.record(**values)


def schema_for(record: Type[Any], *fields: Field) -> ArgumentSchema:
    return ArgumentSchema(record=record, fields=tuple(fields))


__all__: List[str] = [
    "ArgumentSchema",
    "Field",
    "FieldType",
    "MISSING",
    "NoArgs",
    "decode_arguments",
    "schema_for",
]
