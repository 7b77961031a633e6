"""Build call-site records from host descriptors."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from artifacts.models.artifacts.callsites import (
    CallSiteRecord,
    MarkedParameter,
    ParameterInfo,
)
from artifacts.models.artifacts.intercepts import RecordFailure
from ids.formats import MarkerConfigError, UniqueIdFormat
from ids.location import derive_location_key

if TYPE_CHECKING:
    from collections.abc import Iterable

    from collect.descriptors import (
        AttributeDescriptor,
        InvocationDescriptor,
        ParameterDescriptor,
    )

logger = logging.getLogger(__name__)

DEFAULT_MARKER_NAMES: tuple[str, ...] = ("UniqueIdAttribute", "UniqueId")

# Constructor parameter order of the marker attribute.
_MARKER_PARAMETERS = ("format", "prefix", "deterministic")


@dataclass(frozen=True)
class MarkerConfig:
    """Marker constructor arguments, decoded once."""

    format: UniqueIdFormat = UniqueIdFormat.GUID
    prefix: str | None = None
    deterministic: bool = True


@dataclass
class CollectionResult:
    records: list[CallSiteRecord] = field(default_factory=list)
    dropped: list[RecordFailure] = field(default_factory=list)
    failures: list[RecordFailure] = field(default_factory=list)
    candidate_count: int = 0


def _simple_attribute_name(name: str) -> str:
    name = name.strip()
    if name.startswith("global::"):
        name = name[len("global::") :]
    return name.rsplit(".", 1)[-1]


def is_marker(attribute: AttributeDescriptor, marker_names: Iterable[str]) -> bool:
    """Return True when the attribute is the unique-id marker."""
    simple = _simple_attribute_name(attribute.name)
    return any(simple == _simple_attribute_name(name) for name in marker_names)


def decode_marker(attribute: AttributeDescriptor) -> MarkerConfig:
    """Map raw marker arguments onto a typed ``MarkerConfig``.

    Positional arguments follow the constructor order
    ``(format, prefix, deterministic)``; named arguments use the same names.

    Raises:
        MarkerConfigError: On unknown arguments or values of the wrong kind.
    """
    if len(attribute.arguments) > len(_MARKER_PARAMETERS):
        msg = (
            f"Marker takes at most {len(_MARKER_PARAMETERS)} arguments, "
            f"got {len(attribute.arguments)}"
        )
        raise MarkerConfigError(msg)

    values: dict[str, Any] = dict(zip(_MARKER_PARAMETERS, attribute.arguments))
    for key, value in attribute.named_arguments.items():
        normalized = key[:1].lower() + key[1:]
        if normalized not in _MARKER_PARAMETERS:
            msg = f"Unknown marker argument '{key}'"
            raise MarkerConfigError(msg)
        if normalized in values:
            msg = f"Marker argument '{normalized}' given twice"
            raise MarkerConfigError(msg)
        values[normalized] = value

    # Only an absent format defaults; an explicit null is malformed.
    format_kind = UniqueIdFormat.GUID
    if "format" in values:
        format_kind = UniqueIdFormat.coerce(values["format"])

    prefix = values.get("prefix")
    if prefix is not None and not isinstance(prefix, str):
        msg = f"Marker prefix must be a string, got {prefix!r}"
        raise MarkerConfigError(msg)

    deterministic = values.get("deterministic", True)
    if not isinstance(deterministic, bool):
        msg = f"Marker deterministic flag must be a boolean, got {deterministic!r}"
        raise MarkerConfigError(msg)

    return MarkerConfig(format=format_kind, prefix=prefix, deterministic=deterministic)


def _find_marker(
    parameter: ParameterDescriptor, marker_names: Iterable[str]
) -> AttributeDescriptor | None:
    for attribute in parameter.attributes:
        if is_marker(attribute, marker_names):
            return attribute
    return None


def build_record(
    descriptor: InvocationDescriptor,
    *,
    marker_names: Iterable[str] = DEFAULT_MARKER_NAMES,
) -> CallSiteRecord | None:
    """Build the record for one candidate.

    Returns None when the target has no marked parameter or the call site has
    no resolvable location.

    Raises:
        MarkerConfigError: If a marker's arguments cannot be decoded.
    """
    marker_names = tuple(marker_names)
    marked: list[MarkedParameter] = []
    for ordinal, parameter in enumerate(descriptor.parameters):
        attribute = _find_marker(parameter, marker_names)
        if attribute is None:
            continue
        try:
            config = decode_marker(attribute)
        except MarkerConfigError as exc:
            msg = f"Parameter '{parameter.name}' of {descriptor.target}: {exc}"
            raise MarkerConfigError(msg) from exc
        marked.append(
            MarkedParameter(
                ordinal=ordinal,
                format=config.format,
                prefix=config.prefix,
                deterministic=config.deterministic,
            )
        )

    if not marked:
        return None

    location = descriptor.resolved_location()
    if location is None:
        return None

    return CallSiteRecord(
        target_type=descriptor.target_type,
        method_name=descriptor.method_name,
        return_type=descriptor.return_type,
        is_static=descriptor.is_static,
        location=location,
        location_key=derive_location_key(location.path, location.line, location.column),
        intercepts_data=descriptor.intercepts_data,
        parameters=tuple(
            ParameterInfo(
                name=parameter.name,
                type=parameter.type,
                has_default=parameter.has_default,
                default_literal=parameter.default_literal,
            )
            for parameter in descriptor.parameters
        ),
        marked_parameters=tuple(marked),
    )


def _has_marker(
    descriptor: InvocationDescriptor, marker_names: tuple[str, ...]
) -> bool:
    return any(
        _find_marker(parameter, marker_names) is not None
        for parameter in descriptor.parameters
    )


def collect_call_sites(
    descriptors: Iterable[InvocationDescriptor],
    *,
    marker_names: Iterable[str] = DEFAULT_MARKER_NAMES,
) -> CollectionResult:
    """Collect one record per call site whose target has marked parameters.

    Candidates without a resolvable location, and repeats of a call site
    already collected, are dropped. Candidates with malformed marker
    configuration are reported as failures. Neither stops collection.
    """
    marker_names = tuple(marker_names)
    result = CollectionResult()
    seen_keys: set[str] = set()

    for descriptor in descriptors:
        if not _has_marker(descriptor, marker_names):
            continue
        result.candidate_count += 1

        try:
            record = build_record(descriptor, marker_names=marker_names)
        except (MarkerConfigError, ValidationError) as exc:
            location_key = _describe_location(descriptor)
            result.failures.append(
                RecordFailure(
                    location_key=location_key,
                    target=descriptor.target,
                    reason=str(exc),
                )
            )
            logger.error(
                "Cannot intercept call to %s at %s: %s",
                descriptor.target,
                location_key or "<unknown location>",
                exc,
            )
            continue

        if record is None:
            result.dropped.append(
                RecordFailure(
                    target=descriptor.target,
                    reason="Call site has no resolvable source location.",
                )
            )
            logger.warning(
                "Dropping call to %s: no resolvable source location", descriptor.target
            )
            continue

        if record.location_key in seen_keys:
            result.dropped.append(
                RecordFailure(
                    location_key=record.location_key,
                    target=descriptor.target,
                    reason="Duplicate call site.",
                )
            )
            logger.warning(
                "Dropping duplicate call site %s for %s",
                record.location_key,
                descriptor.target,
            )
            continue

        seen_keys.add(record.location_key)
        result.records.append(record)

    logger.info(
        "Collected %d call sites from %d candidates (%d dropped, %d failed)",
        len(result.records),
        result.candidate_count,
        len(result.dropped),
        len(result.failures),
    )
    return result


def _describe_location(descriptor: InvocationDescriptor) -> str | None:
    location = descriptor.resolved_location()
    if location is None:
        return None
    return derive_location_key(location.path, location.line, location.column)


__all__ = [
    "DEFAULT_MARKER_NAMES",
    "CollectionResult",
    "MarkerConfig",
    "build_record",
    "collect_call_sites",
    "decode_marker",
    "is_marker",
]
