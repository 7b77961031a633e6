"""Location keys and deterministic literal formats."""

from ids.formats import MarkerConfigError, UniqueIdFormat, format_id
from ids.location import derive_location_key, parse_location_key

__all__ = [
    "MarkerConfigError",
    "UniqueIdFormat",
    "derive_location_key",
    "format_id",
    "parse_location_key",
]
