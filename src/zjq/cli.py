from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable, Iterable, Optional
import logging
import sys

import typer

from zjq import __version__
from zjq.config import (
    TomlTable,
    as_bool,
    as_optional_int,
    config_section,
    load_config,
    merge_payload,
)
from zjq.exceptions import MalformedQuery, ZjqError
from zjq.logging_config import setup_logging
from zjq.navigate import MissingPolicy, Query, navigate, parse_query
from zjq.runtime.json_io import ParseOptions, iter_lines, parse
from zjq.serialize import Layout, SerializeOptions, serialize

app = typer.Typer(add_completion=False)
logger = logging.getLogger(__name__)

_STDIN_ALIAS = "-"


@dataclass(frozen=True)
class QueryRun:
    query: Query
    layout: Layout
    missing: MissingPolicy
    parse_options: ParseOptions
    serialize_options: SerializeOptions


def _choice(value: object, enum_type: type, *, option: str):
    try:
        return enum_type(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(member.value for member in enum_type)
        raise typer.BadParameter(
            f"{value!r} is not one of: {choices}", param_hint=option
        ) from None


def resolve_run(
    *,
    query_text: str,
    config: TomlTable,
    layout: str | None = None,
    indent: int | None = None,
    ascii_only: bool | None = None,
    max_depth: int | None = None,
    missing: str | None = None,
    exact_floats: bool | None = None,
) -> QueryRun:
    """Combine command line flags with config file defaults.

    Flags left unset (None) fall back to `zjq.toml`; anything still unset
    uses the built-in default.
    """
    try:
        query = parse_query(query_text)
    except MalformedQuery as exc:
        raise typer.BadParameter(str(exc), param_hint="QUERY") from exc

    output = merge_payload(
        {
            "layout": layout,
            "indent": indent,
            "ascii_only": ascii_only,
            "max_depth": max_depth,
        },
        config_section(config, "output"),
    )
    query_section = merge_payload({"missing": missing}, config_section(config, "query"))
    parse_section = merge_payload({"exact_floats": exact_floats}, config_section(config, "parse"))

    try:
        resolved_indent = as_optional_int(output.get("indent"))
        serialize_options = SerializeOptions(
            indent=2 if resolved_indent is None else resolved_indent,
            ascii_only=as_bool(output.get("ascii_only", False)),
            max_depth=as_optional_int(output.get("max_depth")),
        )
        parse_options = ParseOptions(
            exact_floats=as_bool(parse_section.get("exact_floats", False)),
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    return QueryRun(
        query=query,
        layout=_choice(output.get("layout", Layout.MINIFIED.value), Layout, option="--layout"),
        missing=_choice(
            query_section.get("missing", MissingPolicy.ERROR.value),
            MissingPolicy,
            option="--missing",
        ),
        parse_options=parse_options,
        serialize_options=serialize_options,
    )


def render_document(text: str | bytes, run: QueryRun) -> str:
    """Parse one document, resolve the query in it, and serialize the result."""
    root = parse(text, options=run.parse_options)
    found = navigate(root, run.query, missing=run.missing)
    return serialize(found, run.layout, options=run.serialize_options)


def run_lines(
    lines: Iterable[str | bytes],
    run: QueryRun,
    *,
    echo_fn: Callable[[str], None] = typer.echo,
    error_fn: Callable[[str], None] = lambda message: typer.echo(message, err=True),
) -> int:
    """Process each non-blank line as its own document; return failure count.

    A failing line is reported and skipped; later lines are still processed.
    """
    failures = 0
    for number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            rendered = render_document(line, run)
        except ZjqError as exc:
            failures += 1
            logger.debug("line %d failed", number, exc_info=True)
            error_fn(f"zjq: line {number}: {exc}")
            continue
        echo_fn(rendered)
    return failures


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"zjq {__version__}")
        raise typer.Exit(code=0)


def _open_input(path: Path) -> BinaryIO:
    # Lines stay undecoded; `parse` reports bad UTF-8 per line.
    if str(path) == _STDIN_ALIAS:
        return sys.stdin.buffer
    try:
        return path.open("rb")
    except OSError as exc:
        raise typer.BadParameter(f"cannot read {path}: {exc}", param_hint="--input") from exc


@app.command()
def main(
    query: str = typer.Argument(
        "",
        help="Dot-separated field path, e.g. a.b.c. Empty selects the whole document.",
    ),
    layout: Optional[str] = typer.Option(
        None, "--layout", help="Output layout: minified or expanded."
    ),
    expanded: bool = typer.Option(
        False, "--expanded", "-e", help="Shorthand for --layout expanded."
    ),
    indent: Optional[int] = typer.Option(None, "--indent", help="Spaces per level when expanded."),
    ascii_only: bool = typer.Option(False, "--ascii", help="Escape non-ASCII characters."),
    max_depth: Optional[int] = typer.Option(
        None, "--max-depth", help="Refuse to serialize deeper nesting."
    ),
    missing: Optional[str] = typer.Option(
        None, "--missing", help="What a missing path yields: error or null."
    ),
    exact_floats: bool = typer.Option(
        False,
        "--exact-floats",
        help="Keep float literals as written when they would not round-trip.",
    ),
    input_path: Path = typer.Option(
        Path(_STDIN_ALIAS), "--input", "-i", help="Read documents from a file; - is stdin."
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to zjq.toml."),
    log_level: str = typer.Option("WARNING", "--log-level"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Print the version and exit.",
    ),
) -> None:
    """Select a field from each JSON document on the input, one per line."""
    try:
        setup_logging(log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc
    if expanded:
        layout = Layout.EXPANDED.value
    run = resolve_run(
        query_text=query,
        config=load_config(config_path=config),
        layout=layout,
        indent=indent,
        ascii_only=ascii_only or None,
        max_depth=max_depth,
        missing=missing,
        exact_floats=exact_floats or None,
    )
    stream = _open_input(input_path)
    try:
        failures = run_lines(iter_lines(stream), run)
    finally:
        if stream is not sys.stdin.buffer:
            stream.close()
    if failures:
        raise typer.Exit(code=1)


if __name__ == "__main__":  # pragma: no cover
    app()
