from __future__ import annotations

from typing import TYPE_CHECKING

import orjson
import pytest
from verify.verify import DeterminismResult, verify_determinism

from artifacts.write import generate_all_artifacts
from contract.artifacts import CALLSITES_JSONL, INTERCEPTS_JSONL

if TYPE_CHECKING:
    from pathlib import Path


def _write_minimal_project(root: Path) -> None:
    root.mkdir(parents=True, exist_ok=True)
    descriptor = {
        "target_type": "Demo.Html",
        "method_name": "Form",
        "return_type": "string",
        "location": {"path": "/src/Page.cs", "line": 12, "column": 5},
        "parameters": [
            {
                "name": "id",
                "type": "string?",
                "has_default": True,
                "attributes": [{"name": "UniqueId", "arguments": ["ShortHash"]}],
            }
        ],
    }
    (root / CALLSITES_JSONL).write_bytes(orjson.dumps(descriptor) + b"\n")


def test_verify_determinism_requires_artifacts_dir(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _write_minimal_project(repo_root)

    missing_dir = tmp_path / "missing"
    with pytest.raises(FileNotFoundError, match="Artifacts directory does not exist"):
        verify_determinism(root=repo_root, artifacts_dir=missing_dir)


def test_verify_determinism_rejects_file(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _write_minimal_project(repo_root)
    not_a_dir = tmp_path / "artifacts"
    not_a_dir.write_text("x", encoding="utf-8")

    with pytest.raises(NotADirectoryError):
        verify_determinism(root=repo_root, artifacts_dir=not_a_dir)


def test_verify_determinism_regenerated_output_matches(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _write_minimal_project(repo_root)
    artifacts_dir = tmp_path / "artifacts"
    generate_all_artifacts(root=repo_root, out_dir=artifacts_dir)

    result = verify_determinism(root=repo_root, artifacts_dir=artifacts_dir)

    assert result == DeterminismResult(ok=True)


def test_verify_determinism_reports_missing_and_extra(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _write_minimal_project(repo_root)
    artifacts_dir = tmp_path / "artifacts"
    generate_all_artifacts(root=repo_root, out_dir=artifacts_dir)
    (artifacts_dir / INTERCEPTS_JSONL).unlink()
    (artifacts_dir / "stale.g.cs").write_text("// stale\n", encoding="utf-8")

    result = verify_determinism(root=repo_root, artifacts_dir=artifacts_dir)

    assert result.ok is False
    assert result.missing == ("stale.g.cs",)
    assert result.extra == (INTERCEPTS_JSONL,)


def test_verify_determinism_relative_paths_and_sorted_mismatches(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    repo_root = tmp_path / "repo"
    _write_minimal_project(repo_root)

    artifacts_dir = tmp_path / "artifacts"
    artifacts_dir.mkdir()

    for rel_path, content in (
        ("b.g.cs", "b-original"),
        ("a.g.cs", "a-original"),
        ("c.jsonl", "c-original"),
    ):
        path = artifacts_dir / rel_path
        path.write_text(content, encoding="utf-8")

    def _fake_generate_all_artifacts(
        *, root: Path, out_dir: Path, descriptors: object, config: object
    ) -> None:
        (out_dir / "a.g.cs").write_text("a-regenerated", encoding="utf-8")
        (out_dir / "b.g.cs").write_text("b-regenerated", encoding="utf-8")
        (out_dir / "c.jsonl").write_text("c-original", encoding="utf-8")

    monkeypatch.setattr(
        "verify.verify.generate_all_artifacts",
        _fake_generate_all_artifacts,
    )

    result = verify_determinism(root=repo_root, artifacts_dir=artifacts_dir)

    assert result == DeterminismResult(
        ok=False,
        mismatches=("a.g.cs", "b.g.cs"),
        missing=(),
        extra=(),
    )
