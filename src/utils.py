"""Shared C# text helpers."""

from __future__ import annotations

import re

CSHARP_KEYWORDS = frozenset(
    {
        "abstract", "as", "base", "bool", "break", "byte", "case", "catch",
        "char", "checked", "class", "const", "continue", "decimal", "default",
        "delegate", "do", "double", "else", "enum", "event", "explicit",
        "extern", "false", "finally", "fixed", "float", "for", "foreach",
        "goto", "if", "implicit", "in", "int", "interface", "internal", "is",
        "lock", "long", "namespace", "new", "null", "object", "operator",
        "out", "override", "params", "private", "protected", "public",
        "readonly", "ref", "return", "sbyte", "sealed", "short", "sizeof",
        "stackalloc", "static", "string", "struct", "switch", "this", "throw",
        "true", "try", "typeof", "uint", "ulong", "unchecked", "unsafe",
        "ushort", "using", "virtual", "void", "volatile", "while",
    }
)  # fmt: skip

_NON_IDENTIFIER = re.compile(r"[^0-9A-Za-z_]")

_STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\0": "\\0",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def to_identifier(name: str) -> str:
    """Reduce an arbitrary name to a plain C# identifier.

    Examples:
        >>> to_identifier("H1")
        'H1'
        >>> to_identifier("Create<T>")
        'Create_T_'
        >>> to_identifier("1st")
        '_1st'
    """
    cleaned = _NON_IDENTIFIER.sub("_", name) or "_"
    if cleaned[0].isdigit():
        cleaned = f"_{cleaned}"
    return cleaned


def escape_identifier(name: str) -> str:
    """Prefix reserved words with ``@`` so they can name a parameter."""
    if name.startswith("@"):
        return name
    if name in CSHARP_KEYWORDS:
        return f"@{name}"
    return name


def string_literal(value: str) -> str:
    """Render a regular C# string literal."""
    out: list[str] = []
    for char in value:
        if char in _STRING_ESCAPES:
            out.append(_STRING_ESCAPES[char])
        elif ord(char) < 0x20 or 0x7F <= ord(char) < 0xA0 or char in "\u2028\u2029":
            out.append(f"\\u{ord(char):04x}")
        else:
            out.append(char)
    return '"' + "".join(out) + '"'


def verbatim_string_literal(value: str) -> str:
    """Render a C# verbatim string literal (``@"..."``), used for file paths."""
    return '@"' + value.replace('"', '""') + '"'
