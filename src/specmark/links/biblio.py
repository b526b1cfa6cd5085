"""Citation lookup and the rendering of bibliography entries."""

import logging

from bs4 import BeautifulSoup, Tag

from ..core.model import BiblioEntry, BiblioFormat
from ..core.ports import BiblioSource
from ..dom.tree import new_a, new_element, parse_fragment
from ..errors import BiblioError

logger = logging.getLogger(__name__)

MAX_ALIAS_DEPTH = 16


class BiblioManager:
    """Looks citation keys up in each source in turn, following aliases."""

    def __init__(self, sources: list[BiblioSource]):
        self.sources = list(sources)

    def _fetch(self, key: str) -> BiblioEntry | None:
        for source in self.sources:
            entry = source.fetch_biblio(key)
            if entry is not None:
                return entry
        return None

    def get_biblio(self, key: str) -> BiblioEntry | None:
        """
        Entry for `key`, or None if no source knows it. An alias resolves to
        whatever its target resolves to.

        Raises:
            BiblioError: on an alias cycle or an alias chain deeper than
                MAX_ALIAS_DEPTH
        """
        seen: list[str] = []
        current = key
        while True:
            if current.lower() in seen:
                chain = " -> ".join([*seen, current.lower()])
                raise BiblioError(f"Biblio alias cycle: {chain}")
            if len(seen) >= MAX_ALIAS_DEPTH:
                raise BiblioError(f"Biblio alias chain for '{key}' is too deep")
            seen.append(current.lower())

            entry = self._fetch(current)
            if entry is None or entry.format is not BiblioFormat.ALIAS:
                return entry
            if not entry.alias_of:
                raise BiblioError(f"Biblio alias '{current}' has no target")
            logger.debug("Biblio alias %s -> %s", current, entry.alias_of)
            current = entry.alias_of


def format_biblio_term(key: str) -> str:
    """Citation label: `[KEY]`, uppercased when written all lowercase."""
    if key == key.lower():
        key = key.upper()
    return f"[{key}]"


def format_authors(authors: list[str]) -> str:
    if not authors:
        return ""
    if len(authors) == 1:
        return f"{authors[0]}. "
    if len(authors) < 4:
        return "; ".join(authors) + ". "
    return f"{authors[0]}; et al. "


def biblio_entry_to_node(soup: BeautifulSoup, entry: BiblioEntry, status: str | None = None) -> Tag:
    """`<dd>` holding the formatted citation."""
    dd = new_element(soup, "dd")
    if entry.format is BiblioFormat.STRING:
        for child in list(parse_fragment(entry.data or "").contents):
            dd.append(child.extract())
        return dd

    url = entry.url_for(status)
    authors = format_authors(entry.authors)
    if authors:
        dd.append(authors)
    title = entry.title or entry.link_text
    if url:
        dd.append(new_a(soup, {"href": url}, title))
    else:
        dd.append(title)

    tail = [part for part in (entry.date, entry.status) if part]
    dd.append("".join(f". {part}" for part in tail) + (". URL: " if url else "."))
    if url:
        dd.append(new_a(soup, {"href": url}, url))
    return dd
