"""Tree-sitter based checks of generated C# source."""

from __future__ import annotations

from dataclasses import dataclass

import tree_sitter_c_sharp
from tree_sitter import Language, Node, Parser

_PARSER: Parser | None = None

INTERCEPTS_LOCATION_NAME = "InterceptsLocation"


def _get_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with the C# language."""
    global _PARSER
    if _PARSER is None:
        lang = Language(tree_sitter_c_sharp.language())
        _PARSER = Parser(lang)

    return _PARSER


@dataclass(frozen=True)
class SyntaxIssue:
    line: int
    column: int
    message: str


@dataclass(frozen=True)
class TaggedMethod:
    """A method declaration and the text of its InterceptsLocation arguments."""

    name: str
    line: int
    tags: tuple[str, ...]


def _decode_node_text(source_bytes: bytes, node: Node) -> str:
    return source_bytes[node.start_byte : node.end_byte].decode("utf8", errors="ignore")


def _walk(node: Node):
    yield node
    for child in node.children:
        yield from _walk(child)


def find_syntax_errors(source: str) -> list[SyntaxIssue]:
    """Return ERROR and MISSING nodes of the parsed source (1-based positions)."""
    source_bytes = source.encode("utf-8")
    tree = _get_parser().parse(source_bytes)
    if not tree.root_node.has_error:
        return []

    issues: list[SyntaxIssue] = []
    for node in _walk(tree.root_node):
        if node.type == "ERROR":
            snippet = _decode_node_text(source_bytes, node).strip().splitlines()
            issues.append(
                SyntaxIssue(
                    line=node.start_point[0] + 1,
                    column=node.start_point[1] + 1,
                    message=f"Syntax error near {snippet[0] if snippet else '<empty>'!r}",
                )
            )
        elif node.is_missing:
            issues.append(
                SyntaxIssue(
                    line=node.start_point[0] + 1,
                    column=node.start_point[1] + 1,
                    message=f"Missing {node.type!r}",
                )
            )
    return issues


def _attribute_simple_name(source_bytes: bytes, attribute: Node) -> str:
    name_node = attribute.child_by_field_name("name")
    if name_node is None:
        return ""
    name = _decode_node_text(source_bytes, name_node).strip()
    name = name.rsplit("::", 1)[-1].rsplit(".", 1)[-1]
    return name.removesuffix("Attribute")


def _normalize_arguments(source_bytes: bytes, arguments: Node | None) -> str:
    """Render an attribute argument list as ``(a, b, c)``, ignoring layout."""
    if arguments is None:
        return ""
    parts = [
        _decode_node_text(source_bytes, node).strip()
        for node in arguments.named_children
        if node.type == "attribute_argument"
    ]
    return "(" + ", ".join(parts) + ")"


def _intercept_tags(source_bytes: bytes, method: Node) -> tuple[str, ...]:
    tags: list[str] = []
    for child in method.children:
        if child.type != "attribute_list":
            continue
        for attribute in child.named_children:
            if attribute.type != "attribute":
                continue
            if _attribute_simple_name(source_bytes, attribute) != INTERCEPTS_LOCATION_NAME:
                continue
            arguments = next(
                (
                    node
                    for node in attribute.named_children
                    if node.type == "attribute_argument_list"
                ),
                None,
            )
            tags.append(_normalize_arguments(source_bytes, arguments))
    return tuple(tags)


def list_tagged_methods(source: str) -> list[TaggedMethod]:
    """List method declarations carrying an InterceptsLocation attribute."""
    source_bytes = source.encode("utf-8")
    tree = _get_parser().parse(source_bytes)

    methods: list[TaggedMethod] = []
    for node in _walk(tree.root_node):
        if node.type != "method_declaration":
            continue
        tags = _intercept_tags(source_bytes, node)
        if not tags:
            continue
        name_node = node.child_by_field_name("name")
        methods.append(
            TaggedMethod(
                name=_decode_node_text(source_bytes, name_node) if name_node else "",
                line=node.start_point[0] + 1,
                tags=tags,
            )
        )
    return methods


__all__ = [
    "SyntaxIssue",
    "TaggedMethod",
    "find_syntax_errors",
    "list_tagged_methods",
]
