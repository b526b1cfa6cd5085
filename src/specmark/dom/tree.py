"""Element tree helpers on top of BeautifulSoup."""

from __future__ import annotations

import html
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace

from bs4 import BeautifulSoup, NavigableString, Tag

from ..core.vocab import CIRCLED_DIGITS, DFN_CLASS_TO_TYPE, HEADING_SELECTOR

PARSER = "html.parser"

SKELETON = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
{body}
</body>
</html>
"""


def parse_fragment(markup: str) -> BeautifulSoup:
    return BeautifulSoup(markup, PARSER)


def parse_document(body: str, title: str = "") -> BeautifulSoup:
    """Wrap body markup in a minimal HTML document."""
    return BeautifulSoup(SKELETON.format(title=html.escape(title), body=body), PARSER)


def new_element(
    soup: BeautifulSoup,
    tag: str,
    attrs: Mapping[str, str] | None = None,
    text: str | None = None,
) -> Tag:
    el = soup.new_tag(tag, attrs=dict(attrs or {}))
    if text is not None:
        el.append(NavigableString(text))
    return el


def new_a(soup: BeautifulSoup, attrs: Mapping[str, str], text: str) -> Tag:
    return new_element(soup, "a", attrs, text)


def get_text_content(el: Tag) -> str:
    """Text of an element with whitespace runs collapsed."""
    return " ".join(el.get_text().split())


def classes_of(el: Tag) -> list[str]:
    value = el.get("class")
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    return list(value)


def has_class(el: Tag, cls: str) -> bool:
    return cls in classes_of(el)


def add_class(el: Tag, cls: str) -> None:
    classes = classes_of(el)
    if cls not in classes:
        el["class"] = [*classes, cls]


def has_ancestor(el: Tag, tags: Iterable[str]) -> bool:
    names = set(tags)
    return any(parent.name in names for parent in el.parents)


def select(root: Tag, selector: str) -> list[Tag]:
    return list(root.select(selector))


# --- Inherited attributes ---------------------------------------------------


@dataclass(frozen=True)
class Scope:
    """
    Nearest value (on the element itself or an ancestor) of the attributes
    that definitions and links inherit.
    """
    export: bool | None = None
    dfn_for: str | None = None
    class_dfn_type: str | None = None  # from a propdef-style class on an ancestor
    link_for: str | None = None

    def narrowed(self, el: Tag) -> Scope:
        changes: dict[str, object] = {}
        if el.has_attr("data-export"):
            changes["export"] = True
        elif el.has_attr("data-noexport"):
            changes["export"] = False
        if el.has_attr("data-dfn-for"):
            changes["dfn_for"] = el["data-dfn-for"]
        for cls in classes_of(el):
            if cls in DFN_CLASS_TO_TYPE:
                changes["class_dfn_type"] = DFN_CLASS_TO_TYPE[cls]
                break
        if el.has_attr("data-link-for"):
            changes["link_for"] = el["data-link-for"]
        return replace(self, **changes) if changes else self


def compute_scopes(root: Tag) -> dict[int, Scope]:
    """
    One top-down walk giving every element its Scope, keyed by id(element).
    """
    scopes: dict[int, Scope] = {}
    stack: list[tuple[Tag, Scope]] = [(root, Scope())]
    while stack:
        el, parent_scope = stack.pop()
        scope = parent_scope.narrowed(el)
        scopes[id(el)] = scope
        for child in reversed(el.contents):
            if isinstance(child, Tag):
                stack.append((child, scope))
    return scopes


# --- Ids ---------------------------------------------------------------------


def circled_number(n: int) -> str:
    return "".join(CIRCLED_DIGITS[int(d)] for d in str(n))


def dedup_ids(root: Tag) -> None:
    """
    Make every id unique. The first element keeps its id; later ones get a
    circled-digit suffix (foo, foo①, foo②, ...).
    """
    by_id: dict[str, list[Tag]] = defaultdict(list)
    for el in root.find_all(id=True):
        by_id[el["id"]].append(el)

    taken = set(by_id)
    for base, els in by_id.items():
        if len(els) < 2:
            continue
        n = 1
        for el in els[1:]:
            candidate = base + circled_number(n)
            while candidate in taken:
                n += 1
                candidate = base + circled_number(n)
            el["id"] = candidate
            taken.add(candidate)
            n += 1


def section_name(el: Tag) -> str:
    """Label for the section containing `el`: its nearest preceding heading."""
    heading = el.find_previous(HEADING_SELECTOR.replace(" ", "").split(","))
    if heading is None:
        return "Unnumbered section"
    text = get_text_content(heading)
    level = heading.get("data-level")
    if level:
        return f"§ {level} {text}".rstrip()
    return text or "Unnamed section"
