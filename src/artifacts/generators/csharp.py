"""C# text templates for interceptor routines.

Every routine has the same two-state body:

    if (<all marked arguments non-null>)
    {
        <forward the arguments unchanged>
    }

    <forward with `arg ?? "literal"` for each marked argument>

``render_routine`` is the only place that shape is written down.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from utils import escape_identifier, string_literal, verbatim_string_literal

if TYPE_CHECKING:
    from collections.abc import Sequence

    from artifacts.models.artifacts.callsites import ParameterInfo, SourceLocation

INDENT = "    "
INTERCEPTS_LOCATION = "global::System.Runtime.CompilerServices.InterceptsLocation"
RECEIVER_NAME = "@this"

AUTO_GENERATED_HEADER = "// <auto-generated/>"

ATTRIBUTE_POLYFILL = """\
namespace System.Runtime.CompilerServices
{
    [global::System.Diagnostics.Conditional("DEBUG")]
    [global::System.AttributeUsage(global::System.AttributeTargets.Method, AllowMultiple = true)]
    file sealed class InterceptsLocationAttribute : global::System.Attribute
    {
        public InterceptsLocationAttribute(int version, string data)
        {
            _ = version;
            _ = data;
        }

        public InterceptsLocationAttribute(string filePath, int line, int character)
        {
            _ = filePath;
            _ = line;
            _ = character;
        }
    }
}
"""


@dataclass(frozen=True)
class ForwardArgument:
    """One argument of the forwarding call.

    ``literal`` is set for marked parameters and used when the caller's
    value is null.
    """

    name: str
    literal: str | None = None

    def passthrough(self) -> str:
        return escape_identifier(self.name)

    def synthesized(self) -> str:
        if self.literal is None:
            return self.passthrough()
        return f"{self.passthrough()} ?? {string_literal(self.literal)}"


@dataclass(frozen=True)
class RoutineTemplate:
    name: str
    tag: str
    return_type: str
    callee: str
    parameters: Sequence[str]
    arguments: Sequence[ForwardArgument]

    @property
    def is_void(self) -> bool:
        return self.return_type == "void"


def render_parameter(parameter: ParameterInfo) -> str:
    """Render a parameter declaration with its default verbatim."""
    text = f"{parameter.type} {escape_identifier(parameter.name)}"
    if parameter.has_default:
        default = "null" if parameter.default_literal is None else parameter.default_literal
        text = f"{text} = {default}"
    return text


def render_receiver(target_type: str) -> str:
    return f"this {global_type(target_type)} {RECEIVER_NAME}"


def global_type(target_type: str) -> str:
    if target_type.startswith("global::"):
        return target_type
    return f"global::{target_type}"


def render_callee(target_type: str, method_name: str, *, is_static: bool) -> str:
    if is_static:
        return f"{global_type(target_type)}.{method_name}"
    return f"{RECEIVER_NAME}.{method_name}"


def render_tag_arguments(
    path: str, line: int, column: int, intercepts_data: str | None = None
) -> str:
    """Render the argument list of a call-site tag, parentheses included."""
    if intercepts_data is not None:
        return f"(1, {string_literal(intercepts_data)})"
    return f"({verbatim_string_literal(path)}, {line}, {column})"


def render_tag(location: SourceLocation, intercepts_data: str | None) -> str:
    """Render the attribute binding a routine to its call site."""
    arguments = render_tag_arguments(
        location.path, location.line, location.column, intercepts_data
    )
    return f"[{INTERCEPTS_LOCATION}{arguments}]"


def _forward(routine: RoutineTemplate, arguments: list[str]) -> str:
    call = f"{routine.callee}({', '.join(arguments)});"
    if routine.is_void:
        return call
    return f"return {call}"


def render_routine(routine: RoutineTemplate) -> list[str]:
    """Render one interceptor routine as lines, without class indentation."""
    guard = " && ".join(
        f"{argument.passthrough()} != null"
        for argument in routine.arguments
        if argument.literal is not None
    )
    passthrough = [argument.passthrough() for argument in routine.arguments]
    synthesized = [argument.synthesized() for argument in routine.arguments]

    lines = [
        routine.tag,
        f"public static {routine.return_type} {routine.name}({', '.join(routine.parameters)})",
        "{",
        f"{INDENT}if ({guard})",
        f"{INDENT}{{",
        f"{INDENT * 2}{_forward(routine, passthrough)}",
    ]
    if routine.is_void:
        lines.append(f"{INDENT * 2}return;")
    lines.extend(
        [
            f"{INDENT}}}",
            "",
            f"{INDENT}{_forward(routine, synthesized)}",
            "}",
        ]
    )
    return lines


def render_unit(
    routines: Sequence[list[str]],
    *,
    namespace: str,
    class_name: str,
    attribute_polyfill: bool = True,
) -> str:
    """Render the generated file around already rendered routines."""
    if not routines:
        return f"{AUTO_GENERATED_HEADER}\n"

    lines = [AUTO_GENERATED_HEADER, "#nullable enable", ""]
    if attribute_polyfill:
        lines.extend(ATTRIBUTE_POLYFILL.splitlines())
        lines.append("")

    lines.extend([f"namespace {namespace}", "{"])
    lines.append(f"{INDENT}file static class {class_name}")
    lines.append(f"{INDENT}{{")
    for index, routine in enumerate(routines):
        if index:
            lines.append("")
        lines.extend(f"{INDENT * 2}{line}" if line else "" for line in routine)
    lines.append(f"{INDENT}}}")
    lines.append("}")
    return "\n".join(lines) + "\n"


__all__ = [
    "ATTRIBUTE_POLYFILL",
    "AUTO_GENERATED_HEADER",
    "ForwardArgument",
    "RoutineTemplate",
    "render_callee",
    "render_parameter",
    "render_receiver",
    "render_routine",
    "render_tag",
    "render_tag_arguments",
    "render_unit",
]
