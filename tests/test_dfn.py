"""Tests for definition classification."""

import pytest

from specmark.dom import parse_fragment
from specmark.errors import ClassificationError
from specmark.links import classify_dfns


def classify(markup: str):
    soup = parse_fragment(markup)
    return soup, classify_dfns(soup)


def test_plain_dfn_defaults():
    soup, dfns = classify("<p><dfn>Flex Container</dfn></p>")
    (dfn,) = dfns
    assert dfn.dfn_type == "dfn"
    assert dfn.id == "flex-container"
    assert dfn.export is False
    assert dfn.element.has_attr("data-noexport")
    assert dfn.element["data-dfn-type"] == "dfn"


def test_typed_dfn_gets_prefix_and_export():
    soup, dfns = classify('<p><dfn data-dfn-type="property">align-items</dfn></p>')
    (dfn,) = dfns
    assert dfn.id == "propdef-align-items"
    assert dfn.export is True
    assert dfn.element.has_attr("data-export")


def test_type_from_definition_class():
    soup, dfns = classify('<table class="propdef"><tr><td><dfn>gap</dfn></td></tr></table>')
    assert dfns[0].dfn_type == "property"
    assert dfns[0].id == "propdef-gap"


def test_unknown_type_is_fatal():
    with pytest.raises(ClassificationError):
        classify('<dfn data-dfn-type="gizmo">x</dfn>')


def test_explicit_export_wins():
    soup, dfns = classify('<div data-noexport><dfn data-export>shared</dfn></div>')
    assert dfns[0].export is True


def test_closest_ancestor_export():
    soup, dfns = classify(
        '<div data-export><section data-noexport><dfn data-dfn-type="value">auto</dfn></section></div>'
    )
    assert dfns[0].export is False


def test_existing_id_kept():
    soup, dfns = classify('<dfn id="custom">term</dfn>')
    assert dfns[0].id == "custom"


def test_for_values_and_lt():
    soup, dfns = classify(
        '<div data-dfn-for="display, box"><dfn data-dfn-type="value" data-lt="flex|flexbox">Flex layout</dfn></div>'
    )
    (dfn,) = dfns
    assert dfn.for_values == ("display", "box")
    assert dfn.link_text == "flex"
    assert dfn.id == "valdef-flex"


def test_heading_dfn():
    soup, dfns = classify('<h3 data-dfn-type="interface">Element</h3>')
    assert dfns[0].id == "interfacedef-element"


def test_empty_dfn_is_fatal():
    with pytest.raises(ClassificationError):
        classify("<dfn>()</dfn>")
