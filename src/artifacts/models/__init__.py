"""Model namespace for call-site records and generation artifacts."""

from artifacts.models.artifacts.callsites import (
    CallSiteRecord,
    MarkedParameter,
    ParameterInfo,
    SourceLocation,
)
from artifacts.models.artifacts.intercepts import (
    GenerationSummary,
    InterceptRecord,
    LiteralAssignment,
    RecordFailure,
)

__all__ = [
    "CallSiteRecord",
    "GenerationSummary",
    "InterceptRecord",
    "LiteralAssignment",
    "MarkedParameter",
    "ParameterInfo",
    "RecordFailure",
    "SourceLocation",
]
