"""zjq package root."""

from zjq.exceptions import (
    MalformedQuery,
    NavigationError,
    ParseError,
    PathNotFound,
    SerializationError,
    ZjqError,
)
from zjq.json_types import Value, ValueKind, field_of, variant_of
from zjq.navigate import MissingPolicy, Query, navigate, parse_query
from zjq.runtime.json_io import ParseOptions, parse, read_line
from zjq.serialize import Layout, SerializeOptions, serialize

__all__ = [
    "__version__",
    "Layout",
    "MalformedQuery",
    "MissingPolicy",
    "NavigationError",
    "ParseError",
    "ParseOptions",
    "PathNotFound",
    "Query",
    "SerializationError",
    "SerializeOptions",
    "Value",
    "ValueKind",
    "ZjqError",
    "field_of",
    "navigate",
    "parse",
    "parse_query",
    "read_line",
    "serialize",
    "variant_of",
]

__version__ = "0.1.0"
