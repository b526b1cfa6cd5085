from typing import Protocol

from .model import BiblioEntry, Query, Reference


class ReferenceSource(Protocol):
    """
    Maps link text to the references defined for it. Implementations filter
    candidates with `filter_references` and raise QueryError when nothing
    survives.
    """

    def query_references(self, query: Query, inexact: bool = False) -> list[Reference]:
        pass


class BiblioSource(Protocol):
    """
    Maps a citation key to a single entry, without following aliases.
    """

    def fetch_biblio(self, key: str) -> BiblioEntry | None:
        pass
