from __future__ import annotations

from pathlib import Path

import orjson
import pytest

from collect.descriptors import (
    DescriptorError,
    LocationDescriptor,
    load_descriptors,
    parse_descriptor_lines,
)


def _line(**overrides: object) -> bytes:
    data: dict[str, object] = {
        "target_type": "Html",
        "method_name": "H1",
        "return_type": "string",
        "location": {"path": "/src/Program.cs", "line": 4, "column": 9},
        "parameters": [
            {"name": "content", "type": "string"},
            {
                "name": "id",
                "type": "string?",
                "has_default": True,
                "attributes": [{"name": "UniqueId"}],
            },
        ],
    }
    data.update(overrides)
    return orjson.dumps(data)


def test_parse_descriptor_lines_reads_every_object() -> None:
    batch = parse_descriptor_lines([_line(), b"", _line(method_name="H2")])

    assert [d.target for d in batch.descriptors] == ["Html.H1", "Html.H2"]
    assert batch.errors == []
    assert batch.descriptors[0].parameters[1].attributes[0].name == "UniqueId"


def test_invalid_json_line_is_isolated() -> None:
    batch = parse_descriptor_lines([_line(), b"{not json", _line(method_name="H2")])

    assert len(batch.descriptors) == 2
    assert len(batch.errors) == 1
    assert batch.errors[0].line == 2
    assert batch.errors[0].reason.startswith("Invalid JSON")


@pytest.mark.parametrize(
    "raw",
    [
        orjson.dumps({"target_type": "Html", "return_type": "string"}),
        _line(
            parameters=[{"name": "id", "type": "string", "default_literal": "\"x\""}]
        ),
        _line(is_static="sometimes"),
    ],
)
def test_schema_failures_are_isolated(raw: bytes) -> None:
    batch = parse_descriptor_lines([raw, _line()])

    assert len(batch.descriptors) == 1
    assert len(batch.errors) == 1
    assert batch.errors[0].line == 1
    assert batch.errors[0].reason.startswith("Schema validation failed")


def test_location_resolution() -> None:
    assert LocationDescriptor(path="/a.cs", line=0, column=0).resolve() is not None
    assert LocationDescriptor(path="/a.cs", line=1).resolve() is None
    assert LocationDescriptor(line=1, column=1).resolve() is None


def test_load_descriptors_from_file(tmp_path: Path) -> None:
    path = tmp_path / "callsites.jsonl"
    path.write_bytes(_line() + b"\n" + _line(method_name="H2") + b"\n")

    batch = load_descriptors(path)

    assert len(batch.descriptors) == 2
    assert batch.errors == []


def test_load_descriptors_missing_file(tmp_path: Path) -> None:
    with pytest.raises(DescriptorError, match="Failed to read descriptors"):
        load_descriptors(tmp_path / "missing.jsonl")
