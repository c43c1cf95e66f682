from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import IO, AnyStr, Iterator

from zjq.exceptions import ParseError
from zjq.json_types import (
    INT64_MAX,
    INT64_MIN,
    JSON_NULL,
    JsonArray,
    JsonBool,
    JsonFloat,
    JsonInteger,
    JsonNumberString,
    JsonObject,
    JsonString,
    Value,
)

logger = logging.getLogger(__name__)

# Longest digit run that can still be an int64 ("9223372036854775807").
_INT64_MAX_DIGITS = 19


@dataclass(frozen=True)
class ParseOptions:
    exact_floats: bool = False


def _integer_literal(text: str) -> Value:
    digits = text[1:] if text.startswith("-") else text
    if len(digits) > _INT64_MAX_DIGITS:
        return JsonNumberString(text)
    number = int(text)
    if not INT64_MIN <= number <= INT64_MAX:
        return JsonNumberString(text)
    return JsonInteger(number)


def _float_literal(text: str, *, exact: bool) -> Value:
    number = float(text)
    if not math.isfinite(number):
        return JsonNumberString(text)
    if exact and repr(number) != text:
        return JsonNumberString(text)
    return JsonFloat(number)


def _reject_constant(name: str) -> Value:
    raise ParseError(f"non-standard constant {name}")


def _lift_scalar(item: object) -> Value:
    if item is None:
        return JSON_NULL
    if isinstance(item, bool):
        return JsonBool(item)
    if isinstance(item, str):
        return JsonString(item)
    return item  # already a Value from a hook


def _lift(item: object) -> Value:
    """Wrap decoder output that bypassed the number and object hooks.

    Nested lists are converted with an explicit stack; each frame holds the
    remaining entries of one list and the children converted so far.
    """
    if not isinstance(item, list):
        return _lift_scalar(item)
    frames: list[tuple[Iterator[object], list[Value]]] = [(iter(item), [])]
    while True:
        entries, converted = frames[-1]
        for entry in entries:
            if isinstance(entry, list):
                frames.append((iter(entry), []))
                break
            converted.append(_lift_scalar(entry))
        else:
            frames.pop()
            array = JsonArray(tuple(converted))
            if not frames:
                return array
            frames[-1][1].append(array)


def _object_from_pairs(pairs: list[tuple[str, object]]) -> JsonObject:
    return JsonObject.from_pairs((key, _lift(item)) for key, item in pairs)


def _decoder(options: ParseOptions) -> json.JSONDecoder:
    return json.JSONDecoder(
        object_pairs_hook=_object_from_pairs,
        parse_int=_integer_literal,
        parse_float=lambda text: _float_literal(text, exact=options.exact_floats),
        parse_constant=_reject_constant,
    )


def parse(text: str | bytes, *, options: ParseOptions | None = None) -> Value:
    """Parse one JSON document into a Value tree.

    Integer literals outside int64 and float literals that overflow are kept
    as NumberString. Object key order follows the input.
    """
    resolved = options if options is not None else ParseOptions()
    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("utf-8")
        except UnicodeDecodeError as exc:
            logger.debug("rejected non-UTF-8 input at byte %d", exc.start)
            raise ParseError(
                "input is not valid UTF-8",
                position=exc.start,
                line=exc.object.count(b"\n", 0, exc.start) + 1,
                column=exc.start - exc.object.rfind(b"\n", 0, exc.start),
            ) from exc
    try:
        payload = _decoder(resolved).decode(text)
    except json.JSONDecodeError as exc:
        logger.debug("json decode failed: %s", exc)
        raise ParseError(
            exc.msg,
            position=exc.pos,
            line=exc.lineno,
            column=exc.colno,
        ) from exc
    except RecursionError as exc:
        raise ParseError("document nested too deeply") from exc
    return _lift(payload)


def read_line(stream: IO[AnyStr]) -> AnyStr | None:
    """Read one line without its terminator; None at end of input.

    Works on text and binary streams alike; binary lines stay undecoded so
    `parse` can report bad UTF-8 as a per-document failure.
    """
    line = stream.readline()
    if not line:
        return None
    if isinstance(line, bytes):
        return line.rstrip(b"\r\n")
    return line.rstrip("\r\n")


def iter_lines(stream: IO[AnyStr]) -> Iterator[AnyStr]:
    while True:
        line = read_line(stream)
        if line is None:
            return
        yield line
