"""Stable contract surface for praefixum generation output.

Treat these exports as the authoritative boundary between a generation pass
and whatever consumes its output directory.
"""

from contract.artifacts import (
    ARTIFACT_SCHEMA_VERSION,
    CALLSITES_JSONL,
    GENERATION_SUMMARY_JSON,
    INTERCEPTOR_SOURCE,
    INTERCEPTS_JSONL,
)


def __getattr__(name: str) -> object:
    if name in {"ValidationMessage", "ValidationResult", "validate_artifacts"}:
        from contract.validation import (
            ValidationMessage,
            ValidationResult,
            validate_artifacts,
        )

        return {
            "ValidationMessage": ValidationMessage,
            "ValidationResult": ValidationResult,
            "validate_artifacts": validate_artifacts,
        }[name]

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "ARTIFACT_SCHEMA_VERSION",
    "CALLSITES_JSONL",
    "GENERATION_SUMMARY_JSON",
    "INTERCEPTOR_SOURCE",
    "INTERCEPTS_JSONL",
    "ValidationMessage",
    "ValidationResult",
    "validate_artifacts",
]
