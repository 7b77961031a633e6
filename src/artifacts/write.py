from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from artifacts.generators import EmitOptions, InterceptorsGenerator
from artifacts.models.artifacts.intercepts import GenerationSummary, RecordFailure
from artifacts.utils import _write_json, _write_jsonl, _write_source
from collect.collector import collect_call_sites
from collect.descriptors import load_descriptors
from contract.artifacts import GENERATION_SUMMARY_JSON, INTERCEPTS_JSONL
from rules.config import load_config, resolve_descriptors_path, resolve_output_dir

if TYPE_CHECKING:
    from pathlib import Path

    from rules.config import PraefixumConfig

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    summary: GenerationSummary
    artifacts: list[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.summary.failures


def generate_all_artifacts(
    *,
    root: Path,
    out_dir: Path | None = None,
    descriptors: Path | None = None,
    config: PraefixumConfig | None = None,
) -> GenerationResult:
    """Run one generation pass over the host's call-site descriptors.

    Args:
        root: Project root holding praefixum.toml
        out_dir: Optional output directory (the sink)
        descriptors: Optional descriptor file overriding the config
        config: Optional configuration

    Returns:
        GenerationResult with the written summary and artifact paths.

    Raises:
        DescriptorError: If the descriptor file cannot be read.
    """
    if config is None:
        config = load_config(root)

    if out_dir is None:
        out_dir = resolve_output_dir(root, config.output_dir)

    if descriptors is None:
        descriptors = resolve_descriptors_path(root, config.descriptors)

    batch = load_descriptors(descriptors)
    collection = collect_call_sites(batch.descriptors, marker_names=config.marker_names)

    emission = InterceptorsGenerator().generate(
        collection.records,
        EmitOptions(
            namespace=config.namespace,
            class_name=config.class_name,
            attribute_polyfill=config.emit_attribute_polyfill,
        ),
    )

    failures: list[RecordFailure] = [
        *batch.errors,
        *collection.failures,
        *emission.failures,
    ]
    summary = GenerationSummary(
        source_name=config.source_name,
        candidate_count=collection.candidate_count,
        record_count=len(collection.records),
        routine_count=len(emission.intercepts),
        dropped=collection.dropped,
        failures=failures,
    )

    out_dir.mkdir(parents=True, exist_ok=True)
    source_path = out_dir / config.source_name
    intercepts_path = out_dir / INTERCEPTS_JSONL
    summary_path = out_dir / GENERATION_SUMMARY_JSON

    _write_source(source_path, emission.source)
    _write_jsonl(intercepts_path, emission.intercepts)
    _write_json(summary_path, summary)

    logger.info(
        "Wrote %d interceptors to %s (%d dropped, %d failed)",
        summary.routine_count,
        source_path,
        len(summary.dropped),
        len(summary.failures),
    )
    return GenerationResult(
        summary=summary, artifacts=[source_path, intercepts_path, summary_path]
    )
