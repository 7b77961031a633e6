from __future__ import annotations

from pathlib import Path

import orjson

from artifacts.utils import _load_jsonl
from artifacts.write import generate_all_artifacts
from contract.artifacts import GENERATION_SUMMARY_JSON, INTERCEPTS_JSONL
from rules.config import PraefixumConfig


def _descriptor(line: int | None, *, marked: bool = True) -> dict[str, object]:
    attributes = [{"name": "UniqueId", "arguments": ["Timestamp"]}] if marked else []
    return {
        "target_type": "Demo.Grid",
        "method_name": "Row",
        "return_type": "string",
        "location": {"path": "/src/Grid.cs", "line": line, "column": 17},
        "parameters": [
            {"name": "key", "type": "string?", "has_default": True, "attributes": attributes}
        ],
    }


def _write_descriptors(path: Path, lines: list[bytes]) -> None:
    path.write_bytes(b"".join(line + b"\n" for line in lines))


def test_generate_all_artifacts_summary_counts(tmp_path: Path) -> None:
    descriptors = tmp_path / "callsites.jsonl"
    _write_descriptors(
        descriptors,
        [
            orjson.dumps(_descriptor(2)),
            orjson.dumps(_descriptor(3, marked=False)),
            orjson.dumps(_descriptor(None)),
            orjson.dumps(_descriptor(2)),
            b"{broken",
            orjson.dumps(_descriptor(5)),
        ],
    )
    out_dir = tmp_path / "out"

    result = generate_all_artifacts(root=tmp_path, out_dir=out_dir, descriptors=descriptors)

    summary = result.summary
    assert summary.candidate_count == 4
    assert summary.record_count == 2
    assert summary.routine_count == 2
    assert [d.reason for d in summary.dropped] == [
        "Call site has no resolvable source location.",
        "Duplicate call site.",
    ]
    assert [f.line for f in summary.failures] == [5]
    assert result.ok is False
    assert [p.name for p in result.artifacts] == [
        "PraefixumInterceptor.g.cs",
        INTERCEPTS_JSONL,
        GENERATION_SUMMARY_JSON,
    ]

    manifest = _load_jsonl(out_dir / INTERCEPTS_JSONL)
    assert [r["location_key"] for r in manifest] == ["/src/Grid.cs:2:17", "/src/Grid.cs:5:17"]
    assert manifest[0]["literals"][0]["format"] == "Timestamp"


def test_generate_all_artifacts_uses_config(tmp_path: Path) -> None:
    descriptors = tmp_path / "callsites.jsonl"
    _write_descriptors(descriptors, [orjson.dumps(_descriptor(1))])
    config = PraefixumConfig(
        namespace="Acme.Grid",
        class_name="GridIds",
        source_name="GridIds.g.cs",
        emit_attribute_polyfill=False,
    )

    result = generate_all_artifacts(
        root=tmp_path, out_dir=tmp_path / "out", descriptors=descriptors, config=config
    )

    assert result.ok is True
    source = (tmp_path / "out" / "GridIds.g.cs").read_text(encoding="utf-8")
    assert "namespace Acme.Grid" in source
    assert "file static class GridIds" in source
    assert "InterceptsLocationAttribute" not in source
    assert result.summary.source_name == "GridIds.g.cs"


def test_generated_files_are_byte_identical_across_runs(tmp_path: Path) -> None:
    descriptors = tmp_path / "callsites.jsonl"
    _write_descriptors(descriptors, [orjson.dumps(_descriptor(line)) for line in (9, 1, 4)])

    first = generate_all_artifacts(root=tmp_path, out_dir=tmp_path / "a", descriptors=descriptors)
    second = generate_all_artifacts(root=tmp_path, out_dir=tmp_path / "b", descriptors=descriptors)

    for left, right in zip(first.artifacts, second.artifacts):
        assert left.read_bytes() == right.read_bytes()
