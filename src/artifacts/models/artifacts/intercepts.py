"""Manifest models for emitted interceptor routines."""

from __future__ import annotations

from pydantic import BaseModel, Field

from contract.artifacts import ARTIFACT_SCHEMA_VERSION


class LiteralAssignment(BaseModel):
    """The literal a routine substitutes for one marked parameter."""

    parameter: str
    ordinal: int
    format: str
    prefix: str | None = None
    literal: str


class InterceptRecord(BaseModel):
    """Schema for intercepts.jsonl records."""

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    routine_name: str
    target: str
    return_type: str
    location_key: str
    intercepts_data: str | None = None
    literals: list[LiteralAssignment]


class RecordFailure(BaseModel):
    """A candidate or record left out of the generated source."""

    location_key: str | None = None
    target: str | None = None
    line: int | None = Field(
        default=None, description="Descriptor file line, when the input was unreadable"
    )
    reason: str


class GenerationSummary(BaseModel):
    """Schema for generation_summary.json."""

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    source_name: str
    candidate_count: int
    record_count: int
    routine_count: int
    dropped: list[RecordFailure] = Field(default_factory=list)
    failures: list[RecordFailure] = Field(default_factory=list)


__all__ = [
    "GenerationSummary",
    "InterceptRecord",
    "LiteralAssignment",
    "RecordFailure",
]
