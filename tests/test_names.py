"""Tests for name generation and id deduplication."""

import pytest

from specmark.core.utils import (
    fragment_of,
    generate_group_name,
    generate_name,
    split_for_values,
)
from specmark.dom import dedup_ids, parse_fragment


def test_generate_name_basic():
    assert generate_name("Flex Container") == "flex-container"
    assert generate_name("getComputedStyle()") == "getcomputedstyle"


def test_generate_name_separators():
    assert generate_name("a/b, c(d") == "a-b-c-d"
    assert generate_name("multiple   spaces") == "multiple-spaces"


def test_generate_name_strips_other_characters():
    assert generate_name("<length>") == "length"
    assert generate_name("don't stop!") == "dont-stop"
    assert generate_name("snake_case-ok") == "snake_case-ok"


@pytest.mark.parametrize("text", [
    "Flex Container",
    "getComputedStyle()",
    "  leading / trailing  ",
    "<percentage> values (of, it)",
    "Ünïcödé Text",
    "()",
])
def test_generate_name_idempotent(text):
    once = generate_name(text)
    assert generate_name(once) == once


def test_generate_group_name():
    assert generate_group_name("Flex") == "fl"
    assert generate_group_name("<length>") == "le"
    assert generate_group_name("x") == "x_"
    assert generate_group_name("") == "__"


def test_split_for_values():
    assert split_for_values("display, flex-direction") == ("display", "flex-direction")
    assert split_for_values(" / ") == ("/",)
    assert split_for_values("") == ()


def test_fragment_of():
    assert fragment_of("https://example.org/spec#foo") == "foo"
    assert fragment_of("#bar") == "bar"


def test_dedup_ids_first_untouched():
    soup = parse_fragment('<p id="foo">a</p><p id="foo">b</p><p id="bar">c</p>')
    dedup_ids(soup)
    assert [p["id"] for p in soup.find_all("p")] == ["foo", "foo①", "bar"]


def test_dedup_ids_many():
    soup = parse_fragment("".join('<span id="x"></span>' for _ in range(12)))
    dedup_ids(soup)
    ids = [s["id"] for s in soup.find_all("span")]
    assert ids[0] == "x"
    assert ids[1] == "x①"
    assert ids[10] == "x①⓪"
    assert len(set(ids)) == 12


def test_dedup_ids_avoids_existing_suffix():
    soup = parse_fragment('<a id="foo"></a><a id="foo"></a><a id="foo①"></a>')
    dedup_ids(soup)
    ids = [a["id"] for a in soup.find_all("a")]
    assert ids[0] == "foo"
    assert ids[2] == "foo①"
    assert len(set(ids)) == 3
