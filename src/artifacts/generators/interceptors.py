"""Interceptor emission for collected call sites."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from artifacts.generators.csharp import (
    ForwardArgument,
    RoutineTemplate,
    render_callee,
    render_parameter,
    render_receiver,
    render_routine,
    render_tag,
    render_unit,
)
from artifacts.models.artifacts.intercepts import (
    InterceptRecord,
    LiteralAssignment,
    RecordFailure,
)
from ids.formats import MarkerConfigError, UniqueIdFormat, format_id
from utils import to_identifier

if TYPE_CHECKING:
    from collections.abc import Sequence

    from artifacts.models.artifacts.callsites import CallSiteRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmitOptions:
    namespace: str = "Praefixum"
    class_name: str = "PraefixumInterceptor"
    attribute_polyfill: bool = True


@dataclass
class EmissionResult:
    source: str
    intercepts: list[InterceptRecord] = field(default_factory=list)
    failures: list[RecordFailure] = field(default_factory=list)


def synthesize_literals(record: CallSiteRecord) -> list[LiteralAssignment]:
    """Compute the literal for every marked parameter of a record.

    Raises:
        MarkerConfigError: If a marked parameter names an unknown format.
    """
    assignments: list[LiteralAssignment] = []
    for marked in record.marked_parameters:
        parameter = record.parameters[marked.ordinal]
        literal = format_id(
            record.location_key, marked.ordinal, marked.format, marked.prefix
        )
        assignments.append(
            LiteralAssignment(
                parameter=parameter.name,
                ordinal=marked.ordinal,
                format=UniqueIdFormat.coerce(marked.format).display_name,
                prefix=marked.prefix,
                literal=literal,
            )
        )
    return assignments


def build_routine(
    record: CallSiteRecord, index: int, literals: Sequence[LiteralAssignment]
) -> RoutineTemplate:
    by_ordinal = {assignment.ordinal: assignment.literal for assignment in literals}
    parameters = [render_parameter(parameter) for parameter in record.parameters]
    if not record.is_static:
        parameters.insert(0, render_receiver(record.target_type))

    return RoutineTemplate(
        name=f"{to_identifier(record.method_name)}_{index}",
        tag=render_tag(record.location, record.intercepts_data),
        return_type=record.return_type,
        callee=render_callee(
            record.target_type, record.method_name, is_static=record.is_static
        ),
        parameters=parameters,
        arguments=[
            ForwardArgument(name=parameter.name, literal=by_ordinal.get(ordinal))
            for ordinal, parameter in enumerate(record.parameters)
        ],
    )


def emit_interceptors(
    records: Sequence[CallSiteRecord], options: EmitOptions | None = None
) -> EmissionResult:
    """Emit one routine per record, in input order.

    A record whose literals cannot be derived is left out and reported in
    ``EmissionResult.failures``; the remaining records are still emitted.
    """
    if options is None:
        options = EmitOptions()

    rendered: list[list[str]] = []
    intercepts: list[InterceptRecord] = []
    failures: list[RecordFailure] = []

    for record in records:
        target = f"{record.target_type}.{record.method_name}"
        try:
            literals = synthesize_literals(record)
        except MarkerConfigError as exc:
            failures.append(
                RecordFailure(
                    location_key=record.location_key, target=target, reason=str(exc)
                )
            )
            logger.error(
                "Skipping interceptor for %s at %s: %s", target, record.location_key, exc
            )
            continue

        routine = build_routine(record, len(rendered), literals)
        rendered.append(render_routine(routine))
        intercepts.append(
            InterceptRecord(
                routine_name=routine.name,
                target=target,
                return_type=record.return_type,
                location_key=record.location_key,
                intercepts_data=record.intercepts_data,
                literals=literals,
            )
        )

    source = render_unit(
        rendered,
        namespace=options.namespace,
        class_name=options.class_name,
        attribute_polyfill=options.attribute_polyfill,
    )
    logger.info("Emitted %d interceptors (%d failed)", len(intercepts), len(failures))
    return EmissionResult(source=source, intercepts=intercepts, failures=failures)


class InterceptorsGenerator:
    """Generates the interceptor source and its manifest from call-site records."""

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "interceptors"

    def generate(
        self,
        records: Sequence[CallSiteRecord],
        options: EmitOptions | None = None,
    ) -> EmissionResult:
        ordered = sorted(
            records,
            key=lambda record: (
                record.location.path,
                record.location.line,
                record.location.column,
                record.target_type,
                record.method_name,
            ),
        )
        return emit_interceptors(ordered, options)


__all__ = [
    "EmissionResult",
    "EmitOptions",
    "InterceptorsGenerator",
    "build_routine",
    "emit_interceptors",
    "synthesize_literals",
]
