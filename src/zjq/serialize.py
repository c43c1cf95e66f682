from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

from zjq.exceptions import SerializationError
from zjq.json_types import (
    JsonArray,
    JsonBool,
    JsonFloat,
    JsonInteger,
    JsonNull,
    JsonNumberString,
    JsonObject,
    JsonString,
    Value,
)


class Layout(str, Enum):
    MINIFIED = "minified"
    EXPANDED = "expanded"


@dataclass(frozen=True)
class SerializeOptions:
    indent: int = 2
    ascii_only: bool = False
    max_depth: int | None = None

    def __post_init__(self) -> None:
        if int(self.indent) < 0:
            raise ValueError(f"indent must be >= 0, got {self.indent}")
        if self.max_depth is not None and int(self.max_depth) < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")


# Work items: literal text to emit, or a value to render at a nesting depth.
_Task: TypeAlias = str | tuple[Value, int]


def encode_string(text: str, *, ascii_only: bool = False) -> str:
    """Quote and escape `text` as a JSON string literal."""
    return json.dumps(text, ensure_ascii=ascii_only)


def _scalar_text(value: Value, *, ascii_only: bool) -> str | None:
    if isinstance(value, JsonNull):
        return "null"
    if isinstance(value, JsonBool):
        return "true" if value.value else "false"
    if isinstance(value, JsonInteger):
        return str(value.value)
    if isinstance(value, JsonFloat):
        return repr(value.value)
    if isinstance(value, JsonNumberString):
        return value.text
    if isinstance(value, JsonString):
        return encode_string(value.value, ascii_only=ascii_only)
    return None


def serialize(
    value: Value,
    layout: Layout | str = Layout.MINIFIED,
    *,
    options: SerializeOptions | None = None,
) -> str:
    """Render `value` as JSON text.

    Minified output has no insignificant whitespace. Expanded output puts
    one member per line, indented by `options.indent` spaces per level.
    Members keep their stored order. Containers are walked with an explicit
    stack, so nesting depth is bounded only by `options.max_depth`.
    """
    resolved = options if options is not None else SerializeOptions()
    expanded = Layout(layout) is Layout.EXPANDED
    unit = " " * int(resolved.indent)
    key_separator = ": " if expanded else ":"

    chunks: list[str] = []
    stack: list[_Task] = [(value, 0)]
    while stack:
        task = stack.pop()
        if isinstance(task, str):
            chunks.append(task)
            continue
        node, depth = task
        scalar = _scalar_text(node, ascii_only=resolved.ascii_only)
        if scalar is not None:
            chunks.append(scalar)
            continue

        if resolved.max_depth is not None and depth >= resolved.max_depth:
            raise SerializationError(depth + 1, int(resolved.max_depth))
        if isinstance(node, JsonArray):
            opener, closer = "[", "]"
            entries: list[tuple[str | None, Value]] = [(None, item) for item in node.items]
        elif isinstance(node, JsonObject):
            opener, closer = "{", "}"
            entries = list(node.members)
        else:
            raise TypeError(f"not a JSON value: {type(node).__name__}")
        if not entries:
            chunks.append(opener + closer)
            continue

        child_break = "\n" + unit * (depth + 1) if expanded else ""
        pending: list[_Task] = [opener]
        for position, (key, item) in enumerate(entries):
            prefix = ("," if position else "") + child_break
            if key is not None:
                prefix += encode_string(key, ascii_only=resolved.ascii_only) + key_separator
            pending.append(prefix)
            pending.append((item, depth + 1))
        pending.append(("\n" + unit * depth if expanded else "") + closer)
        stack.extend(reversed(pending))
    return "".join(chunks)


def minify(value: Value) -> str:
    return serialize(value, Layout.MINIFIED)


def expand(value: Value, *, indent: int = 2) -> str:
    return serialize(value, Layout.EXPANDED, options=SerializeOptions(indent=indent))
