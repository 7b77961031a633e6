"""Call-site location keys.

A location key is the hash input that identifies one call site. Canonical
format: ``{file}:{line}:{column}``.

- file: the file identity exactly as the host reported it
- line/column: integers, in whatever base the host uses consistently

Line and column never contain ``:``, so splitting from the right on the last
two separators recovers the triple even for paths like ``C:\\src\\Html.cs``.
"""

from __future__ import annotations

LOCATION_KEY_SEPARATOR = ":"


def derive_location_key(file_identity: str, line: int, column: int) -> str:
    """Build the location key for a call site.

    Examples:
        >>> derive_location_key("/src/Html.cs", 10, 5)
        '/src/Html.cs:10:5'
        >>> derive_location_key("C:\\\\src\\\\Html.cs", 3, 1)
        'C:\\\\src\\\\Html.cs:3:1'

    Raises:
        ValueError: If ``line`` or ``column`` is negative. The collector
            drops such call sites before deriving a key.
    """
    if line < 0 or column < 0:
        msg = f"Source positions must be non-negative, got line={line} column={column}"
        raise ValueError(msg)
    return f"{file_identity}{LOCATION_KEY_SEPARATOR}{line}{LOCATION_KEY_SEPARATOR}{column}"


def parse_location_key(location_key: str) -> tuple[str, int, int]:
    """Split a location key back into ``(file, line, column)``."""
    parts = location_key.rsplit(LOCATION_KEY_SEPARATOR, 2)
    if len(parts) != 3:
        msg = f"Not a location key: {location_key!r}"
        raise ValueError(msg)
    file_identity, line, column = parts
    try:
        return file_identity, int(line), int(column)
    except ValueError as exc:
        msg = f"Not a location key: {location_key!r}"
        raise ValueError(msg) from exc


__all__ = ["LOCATION_KEY_SEPARATOR", "derive_location_key", "parse_location_key"]
