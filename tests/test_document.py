"""End-to-end tests: source text through the whole pipeline."""

import pytest

from specmark.config import SpecConfig, SpecmarkConfig
from specmark.document import Document, default_output_path
from specmark.errors import LinkResolutionError, ParseError
from specmark.runtime import Runtime

SOURCE = """\
# Introduction

A <dfn>widget</dfn> is a thing. Every [=widget=] has a 'display' and uses
[=flex container=] layout [[!css-flexbox-1]]. See also [[html]].

## Details

Widgets are [=widget|great=].
"""


@pytest.fixture
def runtime(data_dir):
    config = SpecmarkConfig(spec=SpecConfig(shortname="my-spec", title="My Spec"))
    return Runtime(config=config, data_dir=data_dir)


def render(runtime, text):
    return Document("-", runtime, text=text).preprocess()


def test_headings_and_self_links(runtime):
    soup = render(runtime, SOURCE).soup
    assert soup.title.get_text() == "My Spec"
    intro = soup.find("h2", id="introduction")
    assert intro["class"] == ["heading", "settled"]
    assert intro.find("a", class_="self-link")["href"] == "#introduction"
    assert soup.find("h3", id="details") is not None


def test_local_and_external_links(runtime):
    doc = render(runtime, SOURCE)
    soup = doc.soup
    links = {a.get_text(): a for a in soup.body.select("p a")}
    assert links["widget"]["href"] == "#widget"
    assert links["great"]["href"] == "#widget"
    assert links["display"]["href"] == "https://drafts.csswg.org/css-display-3/#propdef-display"
    assert links["flex container"]["href"] == "https://drafts.csswg.org/css-flexbox-1/#flex-container"
    assert links["flex container"]["id"] == "ref-for-flex-container"
    assert links["[css-flexbox-1]"]["href"] == "#biblio-css-flexbox-1"


def test_dfn_panel(runtime):
    soup = render(runtime, SOURCE).soup
    dfn = soup.find("dfn", id="widget")
    assert "dfn-paneled" in dfn["class"]
    panel = soup.find("aside", attrs={"data-for": "widget"})
    assert [li.get_text() for li in panel.select("ul > li")] == ["Introduction", "Details"]
    for a in panel.select("ul a"):
        assert soup.find(id=a["href"][1:]) is not None


def test_uncited_dfn_gets_self_link(runtime):
    soup = render(runtime, "A <dfn>lonely</dfn> term.").soup
    dfn = soup.find("dfn", id="lonely")
    assert dfn.find("a", class_="self-link")["href"] == "#lonely"
    assert soup.find("aside") is None


def test_index(runtime):
    soup = render(runtime, SOURCE).soup
    assert soup.find("h2", id="index") is not None
    here = soup.find("h3", id="index-defined-here").find_next_sibling("ul")
    assert here.li.get_text() == "widget, in Introduction"

    elsewhere = soup.find("h3", id="index-defined-elsewhere").find_next_sibling("ul")
    specs = [li.contents[0].get_text() for li in elsewhere.find_all("li", recursive=False)]
    assert specs == ["[CSS-DISPLAY-3]", "[CSS-FLEXBOX-1]"]
    term = soup.find("span", id="term-for-flex-container")
    assert term.get_text() == "flex container"
    assert soup.find("aside", attrs={"data-for": "term-for-flex-container"}) is not None


def test_references_section(runtime):
    doc = render(runtime, SOURCE)
    soup = doc.soup
    assert set(doc.citations.normative) == {"css-flexbox-1", "css-display-3"}
    assert set(doc.citations.informative) == {"html"}

    normative = soup.find("h3", id="normative").find_next_sibling("dl")
    assert [dt["id"] for dt in normative.find_all("dt")] == ["biblio-css-display-3", "biblio-css-flexbox-1"]
    informative = soup.find("h3", id="informative").find_next_sibling("dl")
    assert informative.dt.get_text() == "[HTML]"
    assert "HTML Standard" in informative.dd.get_text()


def test_duplicate_definitions_are_deduplicated(runtime):
    soup = render(runtime, "<dfn>thing</dfn> and <dfn>thing</dfn>, see [=thing=].").soup
    ids = [d["id"] for d in soup.find_all("dfn")]
    assert ids == ["thing", "thing①"]
    assert soup.find("a", attrs={"data-link-type": "dfn"})["href"] == "#thing"


def test_data_blocks_feed_links(runtime):
    text = """\
<pre class=anchors>
urlPrefix: https://example.org/; spec: example
    type: dfn; text: gizmo
</pre>
<pre class=biblio>
{"example": {"title": "Example Spec", "href": "https://example.org/"}}
</pre>

Uses [=gizmo=] from [[example]].
"""
    doc = render(runtime, text)
    a = doc.soup.find("a", attrs={"data-link-type": "dfn"})
    assert a["href"] == "https://example.org/#gizmo"
    assert "example" in doc.citations.normative
    assert "example" not in doc.citations.informative


def test_unresolved_link_is_fatal(runtime):
    with pytest.raises(LinkResolutionError):
        render(runtime, "A [=missing term=] here.")


def test_parse_error_reports_line(runtime):
    with pytest.raises(ParseError) as exc:
        render(runtime, "# A\n\n### C")
    assert exc.value.line == 3


def test_finish_writes_next_to_source(runtime, tmp_path):
    source = tmp_path / "widgets.bs"
    source.write_text("A <dfn>widget</dfn>.\n", encoding="utf-8")
    out = Document(source, runtime).preprocess().finish()
    assert out == tmp_path / "widgets.html"
    assert '<dfn data-dfn-type="dfn"' in out.read_text(encoding="utf-8")


def test_finish_to_stdout(runtime, capsys):
    assert render(runtime, "Hello.").finish() is None
    assert "<p>Hello.</p>" in capsys.readouterr().out


def test_default_output_path(tmp_path):
    assert default_output_path(tmp_path / "a.bs") == tmp_path / "a.html"
    assert default_output_path(tmp_path / "a.src.html") == tmp_path / "a.html"
    assert default_output_path(tmp_path / "a.txt") == tmp_path / "a.html"


def test_code_span_hides_property_shorthand(runtime):
    soup = render(runtime, "# Intro\n\nWrite `'my-prop'` in CSS.\n").soup
    assert soup.code.get_text() == "'my-prop'"
    assert soup.code.find("a") is None


def test_external_terms_sharing_a_fragment_get_distinct_panels(runtime):
    text = """\
<pre class=anchors>
type: dfn; text: alpha; url: https://a.test/#x; spec: a
type: dfn; text: beta; url: https://b.test/#x; spec: b
</pre>

Uses [=alpha=] and [=beta=].
"""
    soup = render(runtime, text).soup
    elsewhere = soup.find("h3", id="index-defined-elsewhere").find_next_sibling("ul")
    term_ids = [span["id"] for span in elsewhere.find_all("span", class_="dfn-paneled")]
    assert term_ids == ["term-for-x", "term-for-x①"]
    panels = {aside["data-for"]: aside for aside in soup.find_all("aside")}
    assert set(term_ids) <= set(panels)
    assert panels["term-for-x"].a["href"] == "https://a.test/#x"
    assert panels["term-for-x①"].a["href"] == "https://b.test/#x"
