"""Self-links, "referenced in" panels, the terms index and the references list."""

from collections import defaultdict

from bs4 import BeautifulSoup, Tag

from ..core.model import Dfn
from ..core.utils import fragment_of, generate_name
from ..core.vocab import HEADING_SELECTOR
from ..dom.tree import (
    add_class,
    circled_number,
    has_class,
    new_a,
    new_element,
    section_name,
    select,
)
from .autolinks import Citations, ExternalTerms
from .biblio import biblio_entry_to_node, format_biblio_term


def _skip_citation(a: Tag) -> bool:
    if has_class(a, "self-link"):
        return True
    return any(
        (parent.name == "aside" and has_class(parent, "dfn-panel"))
        or (parent.name == "ul" and has_class(parent, "index"))
        for parent in a.parents
    )


def collect_citations(root: Tag) -> dict[str, list[Tag]]:
    """Links to in-document targets, keyed by the target id."""
    links: dict[str, list[Tag]] = defaultdict(list)
    for a in select(root, 'a[href^="#"]'):
        if not _skip_citation(a):
            links[a["href"][1:]].append(a)
    return links


def _all_ids(root: Tag) -> set[str]:
    return {el["id"] for el in root.find_all(id=True)}


def _reserve_id(base: str, taken: set[str]) -> str:
    candidate, n = base, 1
    while candidate in taken:
        candidate = base + circled_number(n)
        n += 1
    taken.add(candidate)
    return candidate


def _ensure_link_id(a: Tag, target: str, taken: set[str]) -> str:
    if not a.get("id"):
        a["id"] = _reserve_id(f"ref-for-{target}", taken)
    return a["id"]


def make_panel(
    soup: BeautifulSoup,
    panel_for: str,
    header: Tag,
    links: list[Tag],
    taken: set[str],
    target: str,
) -> Tag:
    """
    `<aside class="dfn-panel">` listing where `links` sit, one `<li>` per
    section. The first link of a section is labelled with the section
    name, later ones `(2)`, `(3)`, ...
    """
    aside = new_element(soup, "aside", {"class": "dfn-panel", "data-for": panel_for})
    bold = new_element(soup, "b")
    bold.append(header)
    aside.append(bold)
    aside.append(new_element(soup, "b", text="Referenced in:"))

    by_section: dict[str, list[str]] = {}
    for a in links:
        by_section.setdefault(section_name(a), []).append(_ensure_link_id(a, target, taken))

    ul = new_element(soup, "ul")
    for section, ids in by_section.items():
        li = new_element(soup, "li")
        for n, link_id in enumerate(ids, start=1):
            if n > 1:
                li.append(" ")
            li.append(new_a(soup, {"href": f"#{link_id}"}, section if n == 1 else f"({n})"))
        ul.append(li)
    aside.append(ul)
    return aside


def add_heading_self_links(soup: BeautifulSoup, root: Tag) -> None:
    for heading in select(root, HEADING_SELECTOR):
        if not heading.get("id") or heading.has_attr("data-dfn-type") or has_class(heading, "no-ref"):
            continue
        heading.append(new_a(soup, {"class": "self-link", "href": f"#{heading['id']}"}, ""))


def add_dfn_panels(soup: BeautifulSoup, root: Tag, dfns: list[Dfn]) -> None:
    """
    A definition cited elsewhere gets a panel listing the citations;
    one that is never cited gets a plain self-link.
    """
    citations = collect_citations(root)
    taken = _all_ids(root)
    body = soup.body or root

    for dfn in dfns:
        dfn_id = dfn.element["id"]
        links = citations.get(dfn_id)
        if not links:
            dfn.element.append(new_a(soup, {"class": "self-link", "href": f"#{dfn_id}"}, ""))
            continue
        add_class(dfn.element, "dfn-paneled")
        header = new_a(soup, {"href": f"#{dfn_id}"}, f"#{dfn_id}")
        body.append(make_panel(soup, dfn_id, header, links, taken, dfn_id))


def _fill_container(root: Tag, name: str) -> Tag:
    container = root.find(attrs={"data-fill-with": name})
    if container is not None:
        return container
    return root


def index_disambiguator(dfn: Dfn) -> str:
    return "definition of" if dfn.dfn_type == "dfn" else dfn.dfn_type


def add_index_section(
    soup: BeautifulSoup,
    root: Tag,
    dfns: list[Dfn],
    external: ExternalTerms,
    citations: Citations | None = None,
) -> None:
    """
    Index with two parts: terms defined in this document, sorted by
    (text, disambiguator), and terms used from other specs, grouped by spec.
    """
    if not dfns and not external:
        return

    container = _fill_container(root, "index")
    container.append(new_element(soup, "h2", {"class": "no-num no-ref", "id": "index"}, "Index"))

    if dfns:
        container.append(new_element(
            soup, "h3", {"class": "no-num no-ref", "id": "index-defined-here"},
            "Terms defined by this specification",
        ))
        ul = new_element(soup, "ul", {"class": "index"})
        entries = sorted(dfns, key=lambda d: (d.link_text.casefold(), index_disambiguator(d)))
        for dfn in entries:
            li = new_element(soup, "li")
            li.append(new_a(soup, {"href": f"#{dfn.element['id']}"}, dfn.link_text))
            label = "" if dfn.dfn_type == "dfn" else f" ({dfn.dfn_type})"
            li.append(f"{label}, in {section_name(dfn.element)}")
            ul.append(li)
        container.append(ul)

    if external:
        container.append(new_element(
            soup, "h3", {"class": "no-num no-ref", "id": "index-defined-elsewhere"},
            "Terms defined by reference",
        ))
        ul = new_element(soup, "ul", {"class": "index"})
        taken = _all_ids(root)
        uses = collect_citations_by_url(root)
        body = soup.body or root
        for spec in sorted(external.by_spec, key=str.casefold):
            terms = external.by_spec[spec]
            li = new_element(soup, "li")
            label = format_biblio_term(spec)
            if citations is not None and spec.lower() in citations.normative:
                li.append(new_a(soup, {"data-link-type": "biblio", "href": f"#biblio-{generate_name(spec)}"}, label))
            else:
                li.append(label)
            li.append(" defines the following terms:")
            terms_ul = new_element(soup, "ul")
            for text in sorted(terms, key=str.casefold):
                ref = terms[text]
                term_id = _reserve_id(f"term-for-{fragment_of(ref.url)}", taken)
                term_li = new_element(soup, "li")
                term_li.append(new_element(soup, "span", {"class": "dfn-paneled", "id": term_id}, text))
                terms_ul.append(term_li)
                header = new_a(soup, {"href": ref.url}, ref.url)
                body.append(make_panel(soup, term_id, header, uses.get(ref.url, []), taken, fragment_of(ref.url)))
            li.append(terms_ul)
            ul.append(li)
        container.append(ul)


def collect_citations_by_url(root: Tag) -> dict[str, list[Tag]]:
    links: dict[str, list[Tag]] = defaultdict(list)
    for a in select(root, "a[href][data-link-type]"):
        if not _skip_citation(a):
            links[a["href"]].append(a)
    return links


def add_references_section(soup: BeautifulSoup, root: Tag, citations: Citations) -> None:
    if not citations:
        return

    container = _fill_container(root, "references")
    container.append(new_element(soup, "h2", {"class": "no-num no-ref", "id": "references"}, "References"))

    for part_id, title, part in (
        ("normative", "Normative References", citations.normative),
        ("informative", "Informative References", citations.informative),
    ):
        if not part:
            continue
        container.append(new_element(soup, "h3", {"class": "no-num no-ref", "id": part_id}, title))
        dl = new_element(soup, "dl")
        for name in sorted(part):
            citation = part[name]
            dl.append(new_element(
                soup, "dt", {"id": f"biblio-{generate_name(citation.key)}"},
                format_biblio_term(citation.key),
            ))
            dl.append(biblio_entry_to_node(soup, citation.entry, citation.status))
        container.append(dl)
