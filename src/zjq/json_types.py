from __future__ import annotations

"""Immutable tagged representation of JSON documents.

Every parsed document is a tree of the seven variant classes below. Trees are
built once by the parser and never edited; navigation hands out references to
existing nodes.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Iterable, Iterator, TypeAlias


class ValueKind(str, Enum):
    NULL = "null"
    BOOL = "bool"
    INTEGER = "integer"
    FLOAT = "float"
    NUMBER_STRING = "number_string"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


@dataclass(frozen=True)
class JsonNull:
    kind: ClassVar[ValueKind] = ValueKind.NULL


@dataclass(frozen=True)
class JsonBool:
    value: bool
    kind: ClassVar[ValueKind] = ValueKind.BOOL


@dataclass(frozen=True)
class JsonInteger:
    value: int
    kind: ClassVar[ValueKind] = ValueKind.INTEGER

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"JsonInteger needs an int, got {type(self.value).__name__}")
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise ValueError(f"integer {self.value} does not fit in 64 bits")


@dataclass(frozen=True)
class JsonFloat:
    value: float
    kind: ClassVar[ValueKind] = ValueKind.FLOAT


@dataclass(frozen=True)
class JsonNumberString:
    """Numeric literal kept as source text to avoid precision loss."""

    text: str
    kind: ClassVar[ValueKind] = ValueKind.NUMBER_STRING


@dataclass(frozen=True)
class JsonString:
    value: str
    kind: ClassVar[ValueKind] = ValueKind.STRING


@dataclass(frozen=True)
class JsonArray:
    items: tuple[Value, ...] = ()
    kind: ClassVar[ValueKind] = ValueKind.ARRAY

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)


@dataclass(frozen=True)
class JsonObject:
    """Object with unique keys kept in insertion order.

    `members` is the ordered source of truth; `_index` is a lookup table
    built from it and excluded from equality and hashing.
    """

    members: tuple[tuple[str, Value], ...] = ()
    _index: dict[str, Value] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )
    kind: ClassVar[ValueKind] = ValueKind.OBJECT

    def __post_init__(self) -> None:
        members = tuple((str(key), item) for key, item in self.members)
        index: dict[str, Value] = {}
        for key, item in members:
            if key in index:
                raise ValueError(f"duplicate object key {key!r}")
            index[key] = item
        object.__setattr__(self, "members", members)
        object.__setattr__(self, "_index", index)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, Value]]) -> JsonObject:
        """Build from decoder pairs; a repeated key keeps its first position
        and takes its last value."""
        merged: dict[str, Value] = {}
        for key, item in pairs:
            merged[key] = item
        return cls(tuple(merged.items()))

    def get(self, key: str) -> Value | None:
        return self._index.get(key)

    def keys(self) -> list[str]:
        return [key for key, _ in self.members]

    def items(self) -> tuple[tuple[str, Value], ...]:
        return self.members

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __len__(self) -> int:
        return len(self.members)


Value: TypeAlias = (
    JsonNull
    | JsonBool
    | JsonInteger
    | JsonFloat
    | JsonNumberString
    | JsonString
    | JsonArray
    | JsonObject
)

JSON_NULL = JsonNull()


def variant_of(value: Value) -> ValueKind:
    return value.kind


def field_of(value: Value, key: str) -> Value | None:
    """Return the child named `key`, or None when `value` is not an object
    or has no such field."""
    if not isinstance(value, JsonObject):
        return None
    return value.get(key)


def to_python(value: Value) -> object:
    """Convert a Value tree into plain Python data.

    NumberString payloads become `Decimal` so their digits survive.
    """
    if isinstance(value, JsonNull):
        return None
    if isinstance(value, (JsonBool, JsonInteger, JsonFloat, JsonString)):
        return value.value
    if isinstance(value, JsonNumberString):
        return Decimal(value.text)
    if isinstance(value, JsonArray):
        return [to_python(item) for item in value.items]
    if isinstance(value, JsonObject):
        return {key: to_python(item) for key, item in value.members}
    raise TypeError(f"not a JSON value: {type(value).__name__}")
