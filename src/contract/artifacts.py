"""Generation output contract definitions.

This module defines the stable file names of one generation pass.
"""

from __future__ import annotations

# Schema version for the JSON artifacts written next to the generated source.
ARTIFACT_SCHEMA_VERSION = 1

# Default descriptor input file name (relative to the project root).
CALLSITES_JSONL = "callsites.jsonl"

# Output file name constants (stable contract identifiers).
INTERCEPTOR_SOURCE = "PraefixumInterceptor.g.cs"
INTERCEPTS_JSONL = "intercepts.jsonl"
GENERATION_SUMMARY_JSON = "generation_summary.json"


__all__ = [
    "ARTIFACT_SCHEMA_VERSION",
    "CALLSITES_JSONL",
    "GENERATION_SUMMARY_JSON",
    "INTERCEPTOR_SOURCE",
    "INTERCEPTS_JSONL",
]
