"""Exception hierarchy for zjq."""

from __future__ import annotations


class ZjqError(Exception):
    """Base class for every failure raised by the zjq core."""


class ParseError(ZjqError):
    """Input text is not a well-formed JSON document."""

    def __init__(
        self,
        message: str,
        *,
        position: int = 0,
        line: int = 1,
        column: int = 1,
    ):
        super().__init__(f"{message} (line {line}, column {column})")
        self.reason = message
        self.position = position
        self.line = line
        self.column = column


class NavigationError(ZjqError):
    """A query could not be resolved against a document."""


class MalformedQuery(NavigationError):
    def __init__(self, query: str, index: int):
        super().__init__(f"malformed query {query!r}: empty segment at index {index}")
        self.query = query
        self.index = index


class PathNotFound(NavigationError):
    """No field named `segment` exists below `path_so_far`.

    `path_so_far` is the dot-joined list of segments resolved before the
    failing one; it is empty when the failure happens at the document root.
    """

    def __init__(self, segment: str, path_so_far: str):
        where = path_so_far if path_so_far else "<root>"
        super().__init__(f"no such field {segment!r} under {where}")
        self.segment = segment
        self.path_so_far = path_so_far

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathNotFound):
            return NotImplemented
        return (self.segment, self.path_so_far) == (other.segment, other.path_so_far)

    def __hash__(self) -> int:
        return hash((PathNotFound, self.segment, self.path_so_far))


class SerializationError(ZjqError):
    """Serialization exceeded a configured limit."""

    def __init__(self, depth: int, limit: int):
        super().__init__(f"nesting depth {depth} exceeds limit {limit}")
        self.depth = depth
        self.limit = limit
