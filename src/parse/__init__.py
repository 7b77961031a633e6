"""Checks over generated C# source."""

from parse.csharp_syntax import (
    SyntaxIssue,
    TaggedMethod,
    find_syntax_errors,
    list_tagged_methods,
)

__all__ = [
    "SyntaxIssue",
    "TaggedMethod",
    "find_syntax_errors",
    "list_tagged_methods",
]
