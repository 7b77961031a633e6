"""Candidate-invocation descriptors supplied by the compiler host.

The host resolves every invocation it sees to a target method symbol and
writes one JSON object per line. Nothing here interprets marker attributes;
that happens once, in ``collect.collector``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import orjson
from pydantic import BaseModel, Field, ValidationError, model_validator

from artifacts.models.artifacts.callsites import SourceLocation
from artifacts.models.artifacts.intercepts import RecordFailure

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class DescriptorError(Exception):
    """Raised when the descriptor file cannot be read at all."""


class AttributeDescriptor(BaseModel):
    """An attribute applied to a parameter, with its constructor arguments."""

    name: str
    arguments: list[Any] = Field(default_factory=list)
    named_arguments: dict[str, Any] = Field(default_factory=dict)


class ParameterDescriptor(BaseModel):
    name: str
    type: str
    has_default: bool = False
    default_literal: str | None = None
    attributes: list[AttributeDescriptor] = Field(default_factory=list)

    @model_validator(mode="after")
    def _default_requires_flag(self) -> ParameterDescriptor:
        if self.default_literal is not None and not self.has_default:
            msg = f"Parameter '{self.name}' has a default literal but has_default is false"
            raise ValueError(msg)
        return self


class LocationDescriptor(BaseModel):
    """Source position of the invocation; any field may be unknown."""

    path: str | None = None
    line: int | None = None
    column: int | None = None

    def resolve(self) -> SourceLocation | None:
        """Return the concrete location, or None when any part is unknown."""
        if not self.path or self.line is None or self.column is None:
            return None
        if self.line < 0 or self.column < 0:
            return None
        return SourceLocation(path=self.path, line=self.line, column=self.column)


class InvocationDescriptor(BaseModel):
    """One candidate invocation resolved by the host."""

    target_type: str
    method_name: str
    return_type: str
    is_static: bool = True
    location: LocationDescriptor | None = None
    intercepts_data: str | None = Field(
        default=None,
        description="Opaque host token for the call site (InterceptableLocation data)",
    )
    parameters: list[ParameterDescriptor] = Field(default_factory=list)

    @property
    def target(self) -> str:
        return f"{self.target_type}.{self.method_name}"

    def resolved_location(self) -> SourceLocation | None:
        if self.location is None:
            return None
        return self.location.resolve()


@dataclass
class DescriptorBatch:
    descriptors: list[InvocationDescriptor] = field(default_factory=list)
    errors: list[RecordFailure] = field(default_factory=list)


def parse_descriptor_lines(lines: list[bytes]) -> DescriptorBatch:
    """Parse JSONL descriptor lines, isolating malformed ones."""
    batch = DescriptorBatch()
    for line_number, raw_line in enumerate(lines, 1):
        line = raw_line.strip()
        if not line:
            continue
        try:
            data = orjson.loads(line)
        except orjson.JSONDecodeError as exc:
            batch.errors.append(
                RecordFailure(line=line_number, reason=f"Invalid JSON: {exc}.")
            )
            logger.error("Descriptor line %d is not valid JSON: %s", line_number, exc)
            continue
        try:
            batch.descriptors.append(InvocationDescriptor.model_validate(data))
        except ValidationError as exc:
            batch.errors.append(
                RecordFailure(
                    line=line_number, reason=f"Schema validation failed: {exc}."
                )
            )
            logger.error("Descriptor line %d failed validation: %s", line_number, exc)
    return batch


def load_descriptors(path: Path) -> DescriptorBatch:
    """Load a descriptor JSONL file written by the host."""
    try:
        raw = path.read_bytes()
    except OSError as exc:
        msg = f"Failed to read descriptors from {path}: {exc}"
        raise DescriptorError(msg) from exc

    batch = parse_descriptor_lines(raw.splitlines())
    logger.info(
        "Loaded %d descriptors from %s (%d unreadable)",
        len(batch.descriptors),
        path,
        len(batch.errors),
    )
    return batch


__all__ = [
    "AttributeDescriptor",
    "DescriptorBatch",
    "DescriptorError",
    "InvocationDescriptor",
    "LocationDescriptor",
    "ParameterDescriptor",
    "load_descriptors",
    "parse_descriptor_lines",
]
