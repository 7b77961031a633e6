"""Call-site collection from host descriptors."""

from collect.collector import (
    DEFAULT_MARKER_NAMES,
    CollectionResult,
    MarkerConfig,
    build_record,
    collect_call_sites,
    decode_marker,
)
from collect.descriptors import (
    DescriptorBatch,
    DescriptorError,
    InvocationDescriptor,
    load_descriptors,
)

__all__ = [
    "DEFAULT_MARKER_NAMES",
    "CollectionResult",
    "DescriptorBatch",
    "DescriptorError",
    "InvocationDescriptor",
    "MarkerConfig",
    "build_record",
    "collect_call_sites",
    "decode_marker",
    "load_descriptors",
]
