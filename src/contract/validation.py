"""Validation helpers for a generation output directory."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from artifacts.generators.csharp import render_tag_arguments
from artifacts.models.artifacts.intercepts import GenerationSummary, InterceptRecord
from contract.artifacts import (
    ARTIFACT_SCHEMA_VERSION,
    GENERATION_SUMMARY_JSON,
    INTERCEPTOR_SOURCE,
    INTERCEPTS_JSONL,
)
from ids.location import parse_location_key
from parse.csharp_syntax import TaggedMethod, find_syntax_errors, list_tagged_methods

if TYPE_CHECKING:
    from pathlib import Path


@dataclass(frozen=True)
class ValidationMessage:
    artifact: str
    path: Path
    message: str
    line: int | None = None

    def location(self) -> str:
        if self.line is None:
            return str(self.path)
        return f"{self.path}:{self.line}"


@dataclass
class ValidationResult:
    errors: list[ValidationMessage] = field(default_factory=list)
    warnings: list[ValidationMessage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def validate_artifacts(
    artifacts_dir: Path, *, source_name: str | None = None
) -> ValidationResult:
    """Check a generation output directory for consistency.

    The summary and manifest must match their schemas, the generated source
    must parse, and every manifest routine must appear in the source tagged
    with its call site. Failed records listed in the summary are reported as
    warnings.
    """
    result = ValidationResult()

    if not artifacts_dir.exists():
        result.errors.append(
            ValidationMessage(
                artifact="artifacts_dir",
                path=artifacts_dir,
                message="Artifacts directory does not exist.",
            )
        )
        return result

    if not artifacts_dir.is_dir():
        result.errors.append(
            ValidationMessage(
                artifact="artifacts_dir",
                path=artifacts_dir,
                message="Artifacts path is not a directory.",
            )
        )
        return result

    summary = _validate_summary(artifacts_dir / GENERATION_SUMMARY_JSON, result)
    if source_name is None:
        source_name = summary.source_name if summary else INTERCEPTOR_SOURCE

    intercepts = _validate_intercepts(artifacts_dir / INTERCEPTS_JSONL, result)
    _validate_source(artifacts_dir / source_name, intercepts, result)

    if summary is not None:
        if intercepts is not None and summary.routine_count != len(intercepts):
            result.errors.append(
                ValidationMessage(
                    artifact="summary",
                    path=artifacts_dir / GENERATION_SUMMARY_JSON,
                    message=(
                        f"routine_count is {summary.routine_count} but the manifest "
                        f"lists {len(intercepts)} routines."
                    ),
                )
            )
        for failure in summary.failures:
            where = failure.location_key or (
                f"descriptor line {failure.line}" if failure.line else "unknown call site"
            )
            result.warnings.append(
                ValidationMessage(
                    artifact="summary",
                    path=artifacts_dir / GENERATION_SUMMARY_JSON,
                    message=f"No interceptor for {where}: {failure.reason}",
                )
            )

    return result


def _missing(artifact: str, path: Path, result: ValidationResult) -> bool:
    if path.exists():
        return False
    result.errors.append(
        ValidationMessage(
            artifact=artifact, path=path, message="Required artifact file is missing."
        )
    )
    return True


def _validate_summary(path: Path, result: ValidationResult) -> GenerationSummary | None:
    if _missing("summary", path, result):
        return None
    try:
        raw = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as exc:
        result.errors.append(
            ValidationMessage(artifact="summary", path=path, message=f"Invalid JSON: {exc}.")
        )
        return None

    try:
        summary = GenerationSummary.model_validate(raw)
    except ValidationError as exc:
        result.errors.append(
            ValidationMessage(
                artifact="summary",
                path=path,
                message=f"Schema validation failed: {exc}.",
            )
        )
        return None

    _check_schema_version("summary", path, None, summary.schema_version, result)
    return summary


def _validate_intercepts(
    path: Path, result: ValidationResult
) -> list[InterceptRecord] | None:
    if _missing("manifest", path, result):
        return None
    try:
        handle = path.open("rb")
    except OSError as exc:
        result.errors.append(
            ValidationMessage(
                artifact="manifest", path=path, message=f"Failed to read file: {exc}."
            )
        )
        return None

    records: list[InterceptRecord] = []
    seen_routines: set[str] = set()
    seen_keys: set[str] = set()
    with handle:
        for line_number, raw_line in enumerate(handle, 1):
            line = raw_line.strip()
            if not line:
                continue
            try:
                record = InterceptRecord.model_validate(orjson.loads(line))
            except orjson.JSONDecodeError as exc:
                result.errors.append(
                    ValidationMessage(
                        artifact="manifest",
                        path=path,
                        line=line_number,
                        message=f"Invalid JSON: {exc}.",
                    )
                )
                continue
            except ValidationError as exc:
                result.errors.append(
                    ValidationMessage(
                        artifact="manifest",
                        path=path,
                        line=line_number,
                        message=f"Schema validation failed: {exc}.",
                    )
                )
                continue

            _check_schema_version(
                "manifest", path, line_number, record.schema_version, result
            )
            if record.routine_name in seen_routines:
                result.errors.append(
                    ValidationMessage(
                        artifact="manifest",
                        path=path,
                        line=line_number,
                        message=f"Duplicate routine name {record.routine_name!r}.",
                    )
                )
            if record.location_key in seen_keys:
                result.errors.append(
                    ValidationMessage(
                        artifact="manifest",
                        path=path,
                        line=line_number,
                        message=f"Call site {record.location_key!r} intercepted twice.",
                    )
                )
            seen_routines.add(record.routine_name)
            seen_keys.add(record.location_key)
            records.append(record)
    return records


def _validate_source(
    path: Path,
    intercepts: list[InterceptRecord] | None,
    result: ValidationResult,
) -> None:
    if _missing("source", path, result):
        return
    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        result.errors.append(
            ValidationMessage(
                artifact="source", path=path, message=f"Failed to read file: {exc}."
            )
        )
        return

    for issue in find_syntax_errors(source):
        result.errors.append(
            ValidationMessage(
                artifact="source", path=path, line=issue.line, message=issue.message
            )
        )

    if intercepts is None:
        return

    tagged = {method.name: method for method in list_tagged_methods(source)}
    for record in intercepts:
        method = tagged.get(record.routine_name)
        if method is None:
            result.errors.append(
                ValidationMessage(
                    artifact="source",
                    path=path,
                    message=(
                        f"Routine {record.routine_name!r} for {record.location_key} "
                        "is missing or has no InterceptsLocation tag."
                    ),
                )
            )
            continue
        _check_tag(path, record, method, result)
    expected = {record.routine_name for record in intercepts}
    for name, method in sorted(tagged.items()):
        if name not in expected:
            result.errors.append(
                ValidationMessage(
                    artifact="source",
                    path=path,
                    line=method.line,
                    message=f"Routine {name!r} is not listed in {INTERCEPTS_JSONL}.",
                )
            )


def _check_tag(
    path: Path,
    record: InterceptRecord,
    method: TaggedMethod,
    result: ValidationResult,
) -> None:
    """Report a routine whose tag does not point at its manifest call site."""
    try:
        file_identity, line, column = parse_location_key(record.location_key)
    except ValueError as exc:
        result.errors.append(
            ValidationMessage(
                artifact="source",
                path=path,
                line=method.line,
                message=f"Routine {record.routine_name!r} cannot be checked: {exc}.",
            )
        )
        return

    expected = render_tag_arguments(file_identity, line, column, record.intercepts_data)
    if expected in method.tags:
        return
    found = ", ".join(method.tags)
    result.errors.append(
        ValidationMessage(
            artifact="source",
            path=path,
            line=method.line,
            message=(
                f"Routine {record.routine_name!r} is tagged {found} "
                f"but intercepts {record.location_key}; expected {expected}."
            ),
        )
    )


def _check_schema_version(
    artifact_name: str,
    path: Path,
    line: int | None,
    schema_version: int,
    result: ValidationResult,
) -> None:
    if schema_version != ARTIFACT_SCHEMA_VERSION:
        result.errors.append(
            ValidationMessage(
                artifact=artifact_name,
                path=path,
                line=line,
                message=(
                    "Schema version mismatch: "
                    f"expected {ARTIFACT_SCHEMA_VERSION}, got {schema_version}."
                ),
            )
        )


__all__ = [
    "ValidationMessage",
    "ValidationResult",
    "validate_artifacts",
]
