from __future__ import annotations

import re

import pytest

from ids.formats import (
    TIMESTAMP_BASE,
    TIMESTAMP_WINDOW,
    MarkerConfigError,
    UniqueIdFormat,
    format_id,
    hash_input,
)
from ids.location import derive_location_key

HTML_KEY = "/src/Html.cs:10:5"
ALL_FORMATS = list(UniqueIdFormat)

_KEYS = [
    HTML_KEY,
    "C:\\src\\Forms.cs:1:1",
    "/src/Program.cs:120:33",
    "",
    "/ünïcode/Файл.cs:7:9",
]


def test_known_literals_for_html_call_site() -> None:
    assert format_id(HTML_KEY, 0, UniqueIdFormat.SHORT_HASH) == "3150bhHL"
    assert format_id(HTML_KEY, 0, UniqueIdFormat.HTML_ID) == "x5Z5JHAyN"
    assert format_id(HTML_KEY, 0, UniqueIdFormat.GUID) == "8e5c1f9870a2dd69bf3ff824fded7ddc"
    assert format_id(HTML_KEY, 0, UniqueIdFormat.TIMESTAMP) == "1789776654005"


@pytest.mark.parametrize("format_kind", ALL_FORMATS)
@pytest.mark.parametrize("key", _KEYS)
def test_format_id_is_deterministic(key: str, format_kind: UniqueIdFormat) -> None:
    first = format_id(key, 2, format_kind, "p-")
    second = format_id(key, 2, format_kind, "p-")

    assert first == second


@pytest.mark.parametrize("key", _KEYS)
def test_formats_are_pairwise_distinct(key: str) -> None:
    literals = {format_id(key, 0, format_kind) for format_kind in ALL_FORMATS}

    assert len(literals) == len(ALL_FORMATS)


def test_hash_inputs_are_salted_per_format() -> None:
    inputs = {hash_input(HTML_KEY, 0, format_kind) for format_kind in ALL_FORMATS}

    assert len(inputs) == len(ALL_FORMATS)
    assert hash_input(HTML_KEY, 0, UniqueIdFormat.GUID) == f"{HTML_KEY}:0:guid"


@pytest.mark.parametrize("format_kind", ALL_FORMATS)
def test_prefix_is_prepended_verbatim(format_kind: UniqueIdFormat) -> None:
    bare = format_id(HTML_KEY, 1, format_kind)

    assert format_id(HTML_KEY, 1, format_kind, "p-") == "p-" + bare
    assert format_id(HTML_KEY, 1, format_kind, "") == bare


@pytest.mark.parametrize("format_kind", ALL_FORMATS)
def test_ordinal_changes_the_literal(format_kind: UniqueIdFormat) -> None:
    assert format_id(HTML_KEY, 0, format_kind) != format_id(HTML_KEY, 1, format_kind)


def test_html_ids_start_with_a_letter() -> None:
    for line in range(1, 200):
        key = derive_location_key("/src/Page.cs", line, 9)
        literal = format_id(key, 0, UniqueIdFormat.HTML_ID)

        assert re.match(r"^[A-Za-z]", literal), literal
        assert len(literal) in (8, 9)


def test_guid_shape() -> None:
    for ordinal in range(50):
        literal = format_id(HTML_KEY, ordinal, UniqueIdFormat.GUID)

        assert re.fullmatch(r"[0-9a-f]{32}", literal), literal


def test_short_hash_alphabet() -> None:
    for ordinal in range(50):
        literal = format_id(HTML_KEY, ordinal, UniqueIdFormat.SHORT_HASH)

        assert re.fullmatch(r"[A-Za-z0-9]{8}", literal), literal


def test_timestamp_stays_in_window() -> None:
    for ordinal in range(50):
        value = int(format_id(HTML_KEY, ordinal, UniqueIdFormat.TIMESTAMP))

        assert TIMESTAMP_BASE <= value < TIMESTAMP_BASE + TIMESTAMP_WINDOW


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (0, UniqueIdFormat.GUID),
        (1, UniqueIdFormat.HTML_ID),
        (3, UniqueIdFormat.SHORT_HASH),
        ("Timestamp", UniqueIdFormat.TIMESTAMP),
        ("UniqueIdFormat.HtmlId", UniqueIdFormat.HTML_ID),
        ("SHORT_HASH", UniqueIdFormat.SHORT_HASH),
        (UniqueIdFormat.GUID, UniqueIdFormat.GUID),
    ],
)
def test_coerce_accepts_values_and_names(raw: object, expected: UniqueIdFormat) -> None:
    assert UniqueIdFormat.coerce(raw) is expected


def test_format_id_accepts_raw_format_values() -> None:
    assert format_id(HTML_KEY, 0, 1) == format_id(HTML_KEY, 0, UniqueIdFormat.HTML_ID)
    assert format_id(HTML_KEY, 0, "Guid") == format_id(HTML_KEY, 0, UniqueIdFormat.GUID)


@pytest.mark.parametrize("raw", [4, -1, "Hex16", True, 1.0, None])
def test_unknown_formats_raise(raw: object) -> None:
    with pytest.raises(MarkerConfigError):
        format_id(HTML_KEY, 0, raw)  # type: ignore[arg-type]
