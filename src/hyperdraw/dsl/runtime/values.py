"""
Runtime values for the hyperdraw evaluator.

A ``Value`` is a closed tagged union over none, number, string and
struct. Struct values carry their type tag as a field and their
properties are validated against a per-tag schema.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from ..errors import ArgumentError, EvaluationError
from ...pol import Pol


class ValueKind(Enum):
    NONE = "none"
    NUMBER = "number"
    STRING = "string"
    STRUCT = "struct"


# Property names of every struct type the evaluator knows about
STRUCT_SCHEMAS: Dict[str, Tuple[str, ...]] = {
    "Pol": ("r", "phi"),
}

POL_TYPE = "Pol"


@dataclass(frozen=True)
class Value:
    """
    A runtime value.

    ``data`` holds a float for numbers, a str for strings, and a read-only
    mapping from property name to Value for structs. ``type_tag`` is set
    only for structs.
    """
    kind: ValueKind
    data: Any = None
    type_tag: Optional[str] = None

    def __repr__(self) -> str:
        if self.kind == ValueKind.STRUCT:
            props = ", ".join(f"{k}={v!r}" for k, v in self.data.items())
            return f"{self.type_tag}({props})"
        if self.kind == ValueKind.NONE:
            return "Value(none)"
        return f"Value({self.data!r})"

    @property
    def type_name(self) -> str:
        """Name used in diagnostics: none, number, string, or the struct tag."""
        if self.kind == ValueKind.STRUCT:
            return self.type_tag
        return self.kind.value

    @property
    def is_none(self) -> bool:
        return self.kind == ValueKind.NONE

    def get_property(self, name: str) -> "Value":
        """Look up a struct property, validated against the type's schema."""
        if self.kind != ValueKind.STRUCT:
            raise EvaluationError(
                f"Cannot access property '{name}' of a value of type '{self.type_name}'.")
        if name not in STRUCT_SCHEMAS[self.type_tag]:
            raise EvaluationError(
                f"Type '{self.type_tag}' has no property '{name}'. "
                f"Known properties: {', '.join(STRUCT_SCHEMAS[self.type_tag])}.")
        return self.data[name]


# Convenience constructors

def none_val() -> Value:
    """The 'no value' result."""
    return NONE


def number_val(x: float) -> Value:
    """Create a number value."""
    return Value(ValueKind.NUMBER, float(x))


def string_val(s: str) -> Value:
    """Create a string value."""
    return Value(ValueKind.STRING, str(s))


def struct_val(type_tag: str, properties: Mapping[str, Value]) -> Value:
    """
    Create a struct value.

    The type tag must be known and the properties must match its schema
    exactly; anything else is an argument error.
    """
    schema = STRUCT_SCHEMAS.get(type_tag)
    if schema is None:
        raise ArgumentError(f"Unknown struct type '{type_tag}'.")
    unknown = [name for name in properties if name not in schema]
    if unknown:
        raise ArgumentError(
            f"Type '{type_tag}' has no property '{unknown[0]}'. "
            f"Known properties: {', '.join(schema)}.")
    missing = [name for name in schema if name not in properties]
    if missing:
        raise ArgumentError(
            f"Missing property '{missing[0]}' in construction of type '{type_tag}'.")
    return Value(ValueKind.STRUCT, MappingProxyType(dict(properties)), type_tag)


def pol_val(point: Pol) -> Value:
    """Create a Pol struct value from a point."""
    return struct_val(POL_TYPE, {"r": number_val(point.r), "phi": number_val(point.phi)})


NONE = Value(ValueKind.NONE)
