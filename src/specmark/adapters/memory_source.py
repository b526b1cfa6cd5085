from collections import defaultdict

from ..core.model import BiblioEntry, Query, Reference
from ..core.query import fetch_candidates, filter_references
from ..core.variations import ordered_link_text_variations


class InMemoryReferenceSource:
    """
    References held entirely in memory: the document's own definitions, or
    the ones declared in its anchor blocks.
    """

    def __init__(self, name: str = "local"):
        self.name = name
        self._refs: dict[str, list[Reference]] = defaultdict(list)

    def add_reference(self, link_text: str, ref: Reference) -> None:
        self._refs[link_text].append(ref)

    def query_references(self, query: Query, inexact: bool = False) -> list[Reference]:
        if inexact:
            texts = ordered_link_text_variations(query.link_type, query.link_text)
        else:
            texts = [query.link_text]
        return filter_references(fetch_candidates(self._refs, texts), query)

    def texts(self) -> list[str]:
        return list(self._refs)

    def __len__(self) -> int:
        return sum(len(refs) for refs in self._refs.values())


class InMemoryBiblioSource:
    """Biblio entries declared inside the document."""

    def __init__(self):
        self._entries: dict[str, BiblioEntry] = {}

    def add_entry(self, key: str, entry: BiblioEntry) -> None:
        self._entries[key.lower()] = entry

    def fetch_biblio(self, key: str) -> BiblioEntry | None:
        return self._entries.get(key.lower())

    def __len__(self) -> int:
        return len(self._entries)
