from __future__ import annotations

import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from zjq import __version__, cli, logging_config
from zjq.config import load_config
from zjq.json_types import JsonString
from zjq.navigate import MissingPolicy
from zjq.runtime.json_io import parse
from zjq.serialize import Layout


@pytest.fixture(autouse=True)
def _logging_already_configured(monkeypatch: pytest.MonkeyPatch):
    # Keep basicConfig from binding the runner's temporary stderr.
    monkeypatch.setattr(logging_config, "_configured", True)
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


def _invoke(args: list[str], *, input_text: str | None = None):
    runner = CliRunner()
    return runner.invoke(cli.app, args, input=input_text)


def test_cli_version() -> None:
    result = _invoke(["--version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == f"zjq {__version__}"


def test_cli_help_lists_options() -> None:
    result = _invoke(["--help"])
    assert result.exit_code == 0
    for option in ("--missing", "--input"):
        assert option in result.stdout


def test_cli_echoes_whole_document_minified(full_document_text: str) -> None:
    result = _invoke([], input_text=full_document_text + "\n")
    assert result.exit_code == 0
    assert result.stdout == full_document_text + "\n"


def test_cli_selects_nested_field(full_document_text: str) -> None:
    result = _invoke(["a.b"], input_text=full_document_text + "\n")
    assert result.exit_code == 0
    assert result.stdout == "123\n"


def test_cli_expanded_output() -> None:
    result = _invoke(["a", "--expanded"], input_text='{"a":{"x":[1]}}\n')
    assert result.exit_code == 0
    assert result.stdout == '{\n  "x": [\n    1\n  ]\n}\n'
    short = _invoke(["a", "-e", "--indent", "1"], input_text='{"a":{"x":1}}\n')
    assert short.stdout == '{\n "x": 1\n}\n'


def test_cli_processes_every_line_and_skips_blank_ones() -> None:
    result = _invoke(["k"], input_text='{"k":1}\n\n{"k":"two"}\n{"k":[3]}')
    assert result.exit_code == 0
    assert result.stdout == '1\n"two"\n[3]\n'


def test_cli_reports_failure_and_continues() -> None:
    result = _invoke(["k"], input_text='{"k":1}\n{"j":2}\nnot json\n{"k":4}\n')
    assert result.exit_code == 1
    assert "1\n" in result.output
    assert "4\n" in result.output
    assert "zjq: line 2: no such field 'k' under <root>" in result.output
    assert "zjq: line 3:" in result.output


def test_cli_missing_null_policy() -> None:
    result = _invoke(["a.z", "--missing", "null"], input_text='{"a":{}}\n')
    assert result.exit_code == 0
    assert result.stdout == "null\n"


def test_cli_rejects_unknown_missing_policy() -> None:
    result = _invoke(["a", "--missing", "skip"], input_text="{}\n")
    assert result.exit_code == 2


def test_cli_rejects_malformed_query() -> None:
    result = _invoke(["a..b"], input_text='{"a":1}\n')
    assert result.exit_code == 2


def test_cli_rejects_unknown_log_level() -> None:
    result = _invoke(["--log-level", "chatty"], input_text="{}\n")
    assert result.exit_code == 2


def test_cli_empty_input_is_not_an_error() -> None:
    result = _invoke(["a"], input_text="")
    assert result.exit_code == 0
    assert result.stdout == ""


def test_cli_reads_input_file(tmp_path: Path) -> None:
    source = tmp_path / "docs.jsonl"
    source.write_text('{"a":{"b":"c"}}\n', encoding="utf-8")
    result = _invoke(["a.b", "--input", str(source)])
    assert result.exit_code == 0
    assert result.stdout == '"c"\n'


def test_cli_missing_input_file_is_usage_error(tmp_path: Path) -> None:
    result = _invoke(["--input", str(tmp_path / "absent.jsonl")])
    assert result.exit_code == 2


def test_cli_config_file_supplies_defaults(write_config) -> None:
    config_path = write_config(
        """
        [output]
        layout = "expanded"
        ascii_only = true

        [query]
        missing = "null"
        """
    )
    result = _invoke(["q", "--config", str(config_path)], input_text='{"q":["é"]}\n{}\n')
    assert result.exit_code == 0
    assert result.stdout == '[\n  "\\u00e9"\n]\nnull\n'
    flagged = _invoke(
        ["q", "--config", str(config_path), "--layout", "minified"],
        input_text='{"q":["é"]}\n',
    )
    assert flagged.stdout == '["\\u00e9"]\n'


def test_cli_max_depth_failure_is_per_line() -> None:
    result = _invoke(["--max-depth", "1"], input_text='[[1]]\n[1]\n')
    assert result.exit_code == 1
    assert "nesting depth 2 exceeds limit 1" in result.output
    assert "[1]\n" in result.output


def test_resolve_run_defaults() -> None:
    run = cli.resolve_run(query_text="", config={})
    assert run.layout is Layout.MINIFIED
    assert run.missing is MissingPolicy.ERROR
    assert run.query.segments == ()
    assert run.serialize_options.indent == 2
    assert run.parse_options.exact_floats is False


def test_resolve_run_flags_override_config(write_config) -> None:
    config = load_config(
        config_path=write_config(
            """
            [output]
            layout = "expanded"
            indent = 8

            [parse]
            exact_floats = true
            """
        )
    )
    run = cli.resolve_run(query_text="a.b", config=config, layout="minified", indent=3)
    assert run.layout is Layout.MINIFIED
    assert run.serialize_options.indent == 3
    assert run.parse_options.exact_floats is True
    assert run.query.segments == ("a", "b")


def test_render_document_and_run_lines() -> None:
    run = cli.resolve_run(query_text="x", config={}, exact_floats=True)
    assert cli.render_document('{"x":1.10}', run) == "1.10"
    assert parse(cli.render_document('{"x":"y"}', run)) == JsonString("y")
    echoed: list[str] = []
    errors: list[str] = []
    failures = cli.run_lines(
        ['{"x":1}', "", "[", '{"x":2}'],
        run,
        echo_fn=echoed.append,
        error_fn=errors.append,
    )
    assert failures == 1
    assert echoed == ["1", "2"]
    assert len(errors) == 1
    assert errors[0].startswith("zjq: line 3: ")


def test_cli_invalid_utf8_line_fails_alone() -> None:
    result = _invoke(["k"], input_text=b'{"k":1}\n"\xff"\n{"k":2}\n')
    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert "1\n" in result.output
    assert "zjq: line 2: input is not valid UTF-8 (line 1, column 2)" in result.output
    assert "2\n" in result.output


def test_cli_invalid_utf8_in_input_file(tmp_path: Path) -> None:
    source = tmp_path / "docs.jsonl"
    source.write_bytes(b'{"k":"\xe9"}\n{"k":"ok"}\n')
    result = _invoke(["k", "--input", str(source)])
    assert result.exit_code == 1
    assert "zjq: line 1:" in result.output
    assert '"ok"\n' in result.output


@pytest.mark.parametrize(
    "body",
    [
        '[output]\nascii_only = "sometimes"',
        '[output]\nindent = "wide"',
        '[parse]\nexact_floats = "perhaps"',
        '[output]\nlayout = "pretty"',
    ],
)
def test_cli_rejects_bad_config_values(write_config, body: str) -> None:
    config_path = write_config(body)
    result = _invoke(["--config", str(config_path)], input_text="{}\n")
    assert result.exit_code == 2


def test_run_lines_accepts_bytes() -> None:
    run = cli.resolve_run(query_text="k", config={})
    echoed: list[str] = []
    errors: list[str] = []
    failures = cli.run_lines(
        [b'{"k":"\xc3\xa9"}', b"  ", b'"\xff"'],
        run,
        echo_fn=echoed.append,
        error_fn=errors.append,
    )
    assert failures == 1
    assert echoed == ['"é"']
    assert errors == ["zjq: line 3: input is not valid UTF-8 (line 1, column 2)"]
