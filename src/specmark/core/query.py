"""Candidate filtering shared by every reference source."""

from collections.abc import Iterable, Mapping

from ..errors import QueryError, QueryErrorKind
from .model import Query, Reference


def for_values_match(ref: Reference, query: Query) -> bool:
    """
    `"/"` asks for a reference with no for-values and is never compared
    literally. With no for-values at all, an explicit (empty) `for` still
    requires an empty for-set.
    """
    if not query.for_values:
        return not ref.for_values if query.explicit_for else True
    wants_empty = "/" in query.for_values
    named = [v for v in query.for_values if v != "/"]
    if wants_empty and not ref.for_values:
        return True
    return any(v in ref.for_values for v in named)


def fetch_candidates(
    index: Mapping[str, list[Reference]],
    texts: Iterable[str],
) -> list[Reference]:
    """References stored under any of `texts`, in the order the texts are given."""
    found: list[Reference] = []
    for text in texts:
        found.extend(index.get(text, ()))
    return found


def filter_references(candidates: list[Reference], query: Query) -> list[Reference]:
    """
    Narrow candidates by link type, then status, then for-values.

    Raises:
        QueryError: naming the first stage that left nothing
    """
    if not candidates:
        raise QueryError(QueryErrorKind.TEXT, query.link_text)

    refs = [r for r in candidates if r.link_type == query.link_type]
    if not refs:
        raise QueryError(QueryErrorKind.LINK_TYPE, query.link_text)

    if query.status is not None:
        refs = [r for r in refs if r.status == query.status]
        if not refs:
            raise QueryError(QueryErrorKind.STATUS, query.link_text)

    refs = [r for r in refs if for_values_match(r, query)]
    if not refs:
        raise QueryError(QueryErrorKind.FOR, query.link_text)
    return refs
