from __future__ import annotations

from artifacts.generators.interceptors import emit_interceptors
from artifacts.models.artifacts.callsites import (
    CallSiteRecord,
    MarkedParameter,
    ParameterInfo,
    SourceLocation,
)
from ids.formats import UniqueIdFormat
from parse.csharp_syntax import find_syntax_errors, list_tagged_methods


def _record(line: int, *, is_static: bool = True, return_type: str = "string") -> CallSiteRecord:
    return CallSiteRecord(
        target_type="Demo.Html",
        method_name="Input",
        return_type=return_type,
        is_static=is_static,
        location=SourceLocation(path="/src/Page.cs", line=line, column=5),
        location_key=f"/src/Page.cs:{line}:5",
        parameters=(
            ParameterInfo(name="name", type="string"),
            ParameterInfo(name="id", type="string?", has_default=True),
        ),
        marked_parameters=(
            MarkedParameter(ordinal=1, format=UniqueIdFormat.HTML_ID, prefix="in-"),
        ),
    )


def test_generated_source_parses_cleanly() -> None:
    records = [
        _record(1),
        _record(2, is_static=False),
        _record(3, return_type="void"),
    ]

    source = emit_interceptors(records).source

    assert find_syntax_errors(source) == []


def test_tagged_methods_match_emitted_routines() -> None:
    result = emit_interceptors([_record(7), _record(8)])

    methods = list_tagged_methods(result.source)

    assert [m.name for m in methods] == [i.routine_name for i in result.intercepts]
    assert methods[0].tags == ('(@"/src/Page.cs", 7, 5)',)


def test_attribute_polyfill_constructors_are_not_tagged() -> None:
    source = emit_interceptors([_record(1)]).source

    assert "class InterceptsLocationAttribute" in source
    assert len(list_tagged_methods(source)) == 1


def test_broken_source_reports_errors() -> None:
    issues = find_syntax_errors("namespace Demo { class A { void M( { } }\n")

    assert issues
    assert all(issue.line >= 1 and issue.column >= 1 for issue in issues)


def test_tag_arguments_are_normalized() -> None:
    source = """\
namespace Demo
{
    static class Hooks
    {
        [InterceptsLocation( @"/src/A.cs" ,3,
            7 )]
        [global::System.Runtime.CompilerServices.InterceptsLocationAttribute(1, "AQ==")]
        [Obsolete]
        public static void Run_0() { }
    }
}
"""

    methods = list_tagged_methods(source)

    assert len(methods) == 1
    assert methods[0].name == "Run_0"
    assert methods[0].tags == ('(@"/src/A.cs", 3, 7)', '(1, "AQ==")')
