"""Deterministic literal derivation for marked parameters.

Every literal is a pure function of ``(location_key, ordinal, format, prefix)``.
The hash input is ``{location_key}:{ordinal}:{salt}`` where the salt names the
format, so one call site can request several formats without two of them ever
hashing the same bytes.
"""

from __future__ import annotations

import base64
import hashlib
import uuid
from enum import Enum

# Timestamp literals land in [TIMESTAMP_BASE, TIMESTAMP_BASE + TIMESTAMP_WINDOW).
TIMESTAMP_BASE = 1_700_000_000_000
TIMESTAMP_WINDOW = 100_000_000_000

SHORT_HASH_LENGTH = 8
HTML_ID_FALLBACK_LEAD = "x"


class MarkerConfigError(ValueError):
    """Raised when marker configuration cannot be decoded."""


class UniqueIdFormat(int, Enum):
    """Output encodings, numbered as the marker attribute's enum."""

    GUID = 0
    HTML_ID = 1
    TIMESTAMP = 2
    SHORT_HASH = 3

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def salt(self) -> str:
        return _DISPLAY_NAMES[self].lower()

    @classmethod
    def coerce(cls, value: object) -> UniqueIdFormat:
        """Decode a format given as a member, its integer value or its name.

        Names are accepted as written in the host language (``HtmlId``),
        qualified (``UniqueIdFormat.HtmlId``) or as the Python member name
        (``HTML_ID``).
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            msg = f"Invalid unique-id format: {value!r}"
            raise MarkerConfigError(msg)
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError as exc:
                msg = f"Unique-id format value out of range: {value}"
                raise MarkerConfigError(msg) from exc
        if isinstance(value, str):
            name = value.strip().rsplit(".", 1)[-1]
            for member in cls:
                if name in (member.display_name, member.name):
                    return member
            msg = f"Unknown unique-id format name: {value!r}"
            raise MarkerConfigError(msg)
        msg = f"Invalid unique-id format: {value!r}"
        raise MarkerConfigError(msg)


_DISPLAY_NAMES: dict[UniqueIdFormat, str] = {
    UniqueIdFormat.GUID: "Guid",
    UniqueIdFormat.HTML_ID: "HtmlId",
    UniqueIdFormat.TIMESTAMP: "Timestamp",
    UniqueIdFormat.SHORT_HASH: "ShortHash",
}


def hash_input(location_key: str, ordinal: int, format_kind: UniqueIdFormat) -> str:
    return f"{location_key}:{ordinal}:{format_kind.salt}"


def _digest(location_key: str, ordinal: int, format_kind: UniqueIdFormat) -> bytes:
    data = hash_input(location_key, ordinal, format_kind).encode("utf-8")
    return hashlib.sha256(data).digest()


def _short_hash(digest: bytes) -> str:
    encoded = base64.b64encode(digest).decode("ascii")
    encoded = encoded.replace("+", "a").replace("/", "b").replace("=", "")
    return encoded[: min(SHORT_HASH_LENGTH, len(encoded))]


def _guid(digest: bytes) -> str:
    # .NET Guid(byte[]) reads the first three fields little-endian.
    return uuid.UUID(bytes_le=digest[:16]).hex


def _html_id(digest: bytes) -> str:
    short = _short_hash(digest)
    if short and _is_ascii_letter(short[0]):
        return short
    return HTML_ID_FALLBACK_LEAD + short


def _timestamp(digest: bytes) -> str:
    value = abs(int.from_bytes(digest[:8], "little", signed=True))
    return str(TIMESTAMP_BASE + value % TIMESTAMP_WINDOW)


def _is_ascii_letter(char: str) -> bool:
    return ("a" <= char <= "z") or ("A" <= char <= "Z")


_RENDERERS = {
    UniqueIdFormat.GUID: _guid,
    UniqueIdFormat.HTML_ID: _html_id,
    UniqueIdFormat.TIMESTAMP: _timestamp,
    UniqueIdFormat.SHORT_HASH: _short_hash,
}


def format_id(
    location_key: str,
    ordinal: int,
    format_kind: UniqueIdFormat | int | str,
    prefix: str | None = None,
) -> str:
    """Derive the literal for one marked parameter at one call site.

    Args:
        location_key: Key of the call site (see ``ids.location``).
        ordinal: Zero-based position of the parameter in the full
            declared parameter list.
        format_kind: Requested encoding.
        prefix: Prepended verbatim when not ``None``; ``""`` is a valid prefix.

    Returns:
        The literal. Identical inputs always give identical output.

    Raises:
        MarkerConfigError: If ``format_kind`` does not name a known format.
    """
    kind = UniqueIdFormat.coerce(format_kind)
    base_literal = _RENDERERS[kind](_digest(location_key, ordinal, kind))
    if prefix is None:
        return base_literal
    return f"{prefix}{base_literal}"


__all__ = [
    "HTML_ID_FALLBACK_LEAD",
    "MarkerConfigError",
    "SHORT_HASH_LENGTH",
    "TIMESTAMP_BASE",
    "TIMESTAMP_WINDOW",
    "UniqueIdFormat",
    "format_id",
    "hash_input",
]
