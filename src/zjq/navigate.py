from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from zjq.exceptions import MalformedQuery, PathNotFound
from zjq.json_types import JSON_NULL, Value, field_of

logger = logging.getLogger(__name__)

SEGMENT_SEPARATOR = "."


class MissingPolicy(str, Enum):
    """What `navigate` does when a segment names no field.

    - `ERROR`: raise `PathNotFound`.
    - `NULL`: return the shared null value, jq style.
    """

    ERROR = "error"
    NULL = "null"


@dataclass(frozen=True)
class Query:
    segments: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        segments = tuple(self.segments)
        for index, segment in enumerate(segments):
            if not segment:
                raise MalformedQuery(self.text_of(segments), index)
        object.__setattr__(self, "segments", segments)

    @staticmethod
    def text_of(segments: tuple[str, ...]) -> str:
        return SEGMENT_SEPARATOR.join(segments)

    @property
    def text(self) -> str:
        return self.text_of(self.segments)

    def __len__(self) -> int:
        return len(self.segments)


def parse_query(text: str) -> Query:
    """Split a dotted path into segments.

    The empty string is the identity query. Any other text that produces an
    empty segment (".", "a..b", ".a", "a.") is malformed.
    """
    if text == "":
        return Query()
    return Query(tuple(text.split(SEGMENT_SEPARATOR)))


def navigate(
    root: Value,
    query: str | Query,
    *,
    missing: MissingPolicy | str = MissingPolicy.ERROR,
) -> Value:
    """Resolve `query` against `root` by repeated object-field lookups.

    Returns a reference into `root`; nothing is copied. Arrays are never
    indexed, so descending into one is a missing path.
    """
    resolved_query = query if isinstance(query, Query) else parse_query(query)
    policy = MissingPolicy(missing)
    current = root
    for depth, segment in enumerate(resolved_query.segments):
        child = field_of(current, segment)
        if child is None:
            path_so_far = Query.text_of(resolved_query.segments[:depth])
            logger.debug(
                "no such value: %s (under %r, found %s)",
                segment,
                path_so_far,
                current.kind.value,
            )
            if policy is MissingPolicy.NULL:
                return JSON_NULL
            raise PathNotFound(segment, path_so_far)
        current = child
    return current
