"""Tests for inline shorthand expansion."""

import pytest

from specmark.core.toggles import ToggleSet
from specmark.dom import parse_fragment
from specmark.shorthand import transform_shorthands


def expand(markup: str, toggles: ToggleSet | None = None):
    soup = parse_fragment(markup)
    transform_shorthands(soup, soup, toggles if toggles is not None else ToggleSet())
    return soup


def test_biblio_links():
    soup = expand("<p>See [[!css-flexbox-1]] and [[html current|HTML]].</p>")
    normative, informative = soup.find_all("a")
    assert normative["data-lt"] == "css-flexbox-1"
    assert normative["data-link-type"] == "biblio"
    assert normative["data-biblio-type"] == "normative"
    assert normative.get_text() == "[css-flexbox-1]"
    assert informative["data-biblio-type"] == "informative"
    assert informative["data-biblio-status"] == "current"
    assert informative.get_text() == "HTML"


def test_dfn_links():
    soup = expand("<p>[=flex container=], [=display/flex=], [=/term=], [=term|the term=]</p>")
    plain, scoped, unscoped, texted = soup.find_all("a")
    assert plain["data-lt"] == "flex container"
    assert not plain.has_attr("data-link-for")
    assert scoped["data-link-for"] == "display"
    assert scoped["data-lt"] == "flex"
    assert unscoped["data-link-for"] == "/"
    assert texted["data-lt"] == "term"
    assert texted.get_text() == "the term"


def test_css_property_link():
    soup = expand("<p>The 'display' property, but don't touch this.</p>")
    (a,) = soup.find_all("a")
    assert a["data-link-type"] == "property"
    assert a.get_text() == "display"


def test_var():
    soup = expand("<p>Let |result list| be empty.</p>")
    assert soup.var.get_text() == "result list"


def test_markdown_inline():
    soup = expand('<p>`code` with **bold**, *em* and [site](https://x.test "T").</p>')
    assert soup.code.get_text() == "code"
    assert soup.strong.get_text() == "bold"
    assert soup.em.get_text() == "em"
    assert soup.a["href"] == "https://x.test"
    assert soup.a["title"] == "T"
    assert soup.a.get_text() == "site"


def test_code_contents_left_alone():
    soup = expand("<p>`a *b* c`</p>")
    assert soup.code.get_text() == "a *b* c"
    assert soup.em is None


@pytest.mark.parametrize("inner", ["'width'", "[=foo=]", "|x|", "[[KEY]]"])
def test_code_hides_link_shorthands(inner):
    soup = expand(f"<p>Write `{inner}` here.</p>")
    assert soup.code.get_text() == inner
    assert soup.find("a") is None
    assert soup.find("var") is None


def test_escapes():
    soup = expand(r"<p>\[[foo]] and \[=bar=] and \*plain\*</p>")
    assert soup.find("a") is None
    assert soup.find("em") is None
    assert soup.get_text() == "[[foo]] and [=bar=] and *plain*"


def test_skipped_elements():
    soup = expand("<pre>[[foo]]</pre><code>'display'</code><script>a = *b*;</script>")
    assert soup.find("a") is None
    assert soup.find("em") is None


def test_toggles():
    soup = expand("<p>'display' and [=term=]</p>", ToggleSet({"css": False}))
    (a,) = soup.find_all("a")
    assert a["data-link-type"] == "dfn"

    soup = expand("<p>**x**</p>", ToggleSet(default=False))
    assert soup.strong is None
    assert soup.get_text() == "**x**"
