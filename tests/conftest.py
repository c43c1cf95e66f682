from __future__ import annotations

import sys
import textwrap
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))


import pytest

from zjq.json_types import Value
from zjq.runtime.json_io import parse


FULL_DOCUMENT = (
    '{"test":"test","zest":["z","e"],"fest":null,"isit":true,"ns":"1232",'
    '"in":12343,"a":{"a":"2","b":123,"c":true,"d":null}}'
)


@pytest.fixture
def full_document_text() -> str:
    return FULL_DOCUMENT


@pytest.fixture
def full_document() -> Value:
    return parse(FULL_DOCUMENT)


@pytest.fixture
def write_config(tmp_path: Path):
    def _write(body: str, *, name: str = "zjq.toml") -> Path:
        path = tmp_path / name
        path.write_text(textwrap.dedent(body).strip() + "\n", encoding="utf-8")
        return path

    return _write
