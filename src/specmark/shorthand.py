"""Inline markup shorthands, expanded on the text nodes of the tree.

Each family is switched by a toggle of the same name:

- biblio:    [[KEY]], [[!KEY]], [[KEY current]], [[KEY|text]]
- dfn:       [=term=], [=for/term=], [=term|text=]
- css:       'property'
- algorithm: |var|
- markdown:  `code`, [text](href "title"), **strong**, *em*, \\*

A leading backslash keeps the shorthand as literal text. Code spans are
expanded first, so nothing inside backticks is rewritten.
"""

import re
from collections.abc import Callable

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag

from .core.toggles import ToggleSet
from .dom.tree import has_ancestor, new_a, new_element

Replacer = Callable[[BeautifulSoup, re.Match], list]

SKIPPED_TAGS = ("code", "pre", "script", "style", "xmp")

BIBLIO_LINK_RE = re.compile(
    r"""
    (?P<escape>\\)?
    \[\[
    (?P<bang>!)?
    (?P<term>[\w.+-]+)
    (?:\s+(?P<status>current|snapshot))?
    (?:\|(?P<text>[^\]]+))?
    \]\]
    """,
    re.VERBOSE,
)

DFN_LINK_RE = re.compile(
    r"""
    (?P<escape>\\)?
    \[=
    (?P<term>[^=\]|]+?)
    (?:\|(?P<text>[^=\]]+?))?
    =\]
    """,
    re.VERBOSE,
)

CSS_PROPERTY_RE = re.compile(r"(?P<escape>\\)?(?<![\w'])'(?P<term>-?[a-z][a-z0-9-]*)'(?![\w'])")

VAR_RE = re.compile(r"(?P<escape>\\)?\|(?P<inner>\w(?:[\w\s-]*\w)?)\|")

CODE_RE = re.compile(r"(?P<escape>\\)?`(?P<inner>[^`]+)`")

INLINE_LINK_RE = re.compile(
    r"""
    (?P<escape>\\)?
    \[(?P<text>[^\]]*)\]
    \(\s*
    (?P<href>[^\s)]+)
    (?:\s+"(?P<title>[^"]*)")?
    \s*\)
    """,
    re.VERBOSE,
)

STRONG_RE = re.compile(r"(?<!\\)\*\*(?P<inner>[^\s*](?:[^*]*[^\s\\*])?)\*\*")

EMPHASIS_RE = re.compile(r"(?<![\\*])\*(?P<inner>[^\s*](?:[^*]*[^\s\\*])?)\*(?!\*)")

ESCAPED_ASTERISK_RE = re.compile(r"\\\*")


def _unescaped(m: re.Match) -> list:
    return [m.group(0)[1:]]


def biblio_link_replacer(soup: BeautifulSoup, m: re.Match) -> list:
    if m.group("escape"):
        return _unescaped(m)
    term = m.group("term")
    attrs = {
        "data-lt": term,
        "data-link-type": "biblio",
        "data-biblio-type": "normative" if m.group("bang") else "informative",
    }
    if m.group("status"):
        attrs["data-biblio-status"] = m.group("status")
    return [new_a(soup, attrs, m.group("text") or f"[{term}]")]


def dfn_link_replacer(soup: BeautifulSoup, m: re.Match) -> list:
    if m.group("escape"):
        return _unescaped(m)
    link_for, sep, term = m.group("term").rpartition("/")
    term = term.strip()
    attrs = {"data-link-type": "dfn", "data-lt": term}
    if sep:
        attrs["data-link-for"] = link_for.strip() or "/"
    return [new_a(soup, attrs, (m.group("text") or term).strip())]


def css_property_replacer(soup: BeautifulSoup, m: re.Match) -> list:
    if m.group("escape"):
        return _unescaped(m)
    term = m.group("term")
    return [new_a(soup, {"data-link-type": "property", "data-lt": term}, term)]


def _wrap(tag: str) -> Replacer:
    def replacer(soup: BeautifulSoup, m: re.Match) -> list:
        if "escape" in m.re.groupindex and m.group("escape"):
            return _unescaped(m)
        return [new_element(soup, tag, text=m.group("inner"))]
    return replacer


def inline_link_replacer(soup: BeautifulSoup, m: re.Match) -> list:
    if m.group("escape"):
        return _unescaped(m)
    attrs = {"href": m.group("href")}
    if m.group("title") is not None:
        attrs["title"] = m.group("title")
    return [new_a(soup, attrs, m.group("text"))]


def escaped_asterisk_replacer(soup: BeautifulSoup, m: re.Match) -> list:
    return ["*"]


SHORTHANDS: list[tuple[str, re.Pattern, Replacer]] = [
    ("markdown", CODE_RE, _wrap("code")),
    ("biblio", BIBLIO_LINK_RE, biblio_link_replacer),
    ("dfn", DFN_LINK_RE, dfn_link_replacer),
    ("css", CSS_PROPERTY_RE, css_property_replacer),
    ("algorithm", VAR_RE, _wrap("var")),
    ("markdown", INLINE_LINK_RE, inline_link_replacer),
    ("markdown", STRONG_RE, _wrap("strong")),
    ("markdown", EMPHASIS_RE, _wrap("em")),
    ("markdown", ESCAPED_ASTERISK_RE, escaped_asterisk_replacer),
]


def replace_all(soup: BeautifulSoup, text: str, regex: re.Pattern, replacer: Replacer) -> list:
    pieces: list = []
    last = 0
    for m in regex.finditer(text):
        pieces.append(text[last:m.start()])
        pieces.extend(replacer(soup, m))
        last = m.end()
    pieces.append(text[last:])
    return pieces


def _apply(soup: BeautifulSoup, pieces: list, regex: re.Pattern, replacer: Replacer) -> list:
    # Only plain strings are rewritten; elements made by an earlier
    # shorthand are left alone.
    out: list = []
    for piece in pieces:
        if isinstance(piece, str):
            out.extend(replace_all(soup, piece, regex, replacer))
        else:
            out.append(piece)
    return out


def expand_text(soup: BeautifulSoup, text: str, toggles: ToggleSet) -> list:
    """Pieces (strings and elements) that `text` expands to."""
    pieces: list = [text]
    for toggle, regex, replacer in SHORTHANDS:
        if toggles[toggle]:
            pieces = _apply(soup, pieces, regex, replacer)
    return [p for p in pieces if not (isinstance(p, str) and p == "")]


def transform_shorthands(soup: BeautifulSoup, root: Tag, toggles: ToggleSet) -> None:
    """Expand shorthands in every text node under `root`, outside code and raw text."""
    for node in list(root.find_all(string=True)):
        if type(node) is not NavigableString or has_ancestor(node, SKIPPED_TAGS):
            continue
        pieces = expand_text(soup, str(node), toggles)
        if len(pieces) == 1 and pieces[0] == str(node):
            continue
        replacements: list[PageElement] = [
            NavigableString(p) if isinstance(p, str) else p for p in pieces
        ]
        if not replacements:
            node.extract()
            continue
        node.replace_with(*replacements)
