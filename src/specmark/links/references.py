"""Reference resolution across the local, anchor-block and external tiers."""

import logging
from dataclasses import replace

from ..adapters.memory_source import InMemoryReferenceSource
from ..core.model import Dfn, Query, Reference
from ..core.ports import ReferenceSource
from ..errors import LinkResolutionError, QueryError

logger = logging.getLogger(__name__)


def dfn_link_texts(dfn: Dfn) -> list[str]:
    """Every text a definition answers to: its `data-lt` alternatives, or its text."""
    lt = dfn.element.get("data-lt")
    if lt:
        texts = [t.strip() for t in lt.split("|") if t.strip()]
        if texts:
            return texts
    return [dfn.link_text]


class ReferenceManager:
    """
    Resolves link queries. Tiers are tried in order and the first one that
    yields a reference wins:

    1. definitions in this document (exact text)
    2. anchors declared in the document's anchor blocks (exact text)
    3. the external store, exactly and then, if allowed, with the
       inflected spellings of the text
    """

    def __init__(
        self,
        external: ReferenceSource | None = None,
        spec: str | None = None,
        external_status: str = "current",
        allow_inexact: bool = True,
    ):
        self.local = InMemoryReferenceSource("local")
        self.anchor_block = InMemoryReferenceSource("anchor-block")
        self.external = external
        self.spec = spec
        self.external_status = external_status
        self.allow_inexact = allow_inexact

    def add_local_dfns(self, dfns: list[Dfn]) -> None:
        for dfn in dfns:
            ref = Reference(
                link_type=dfn.dfn_type,
                url=f"#{dfn.element['id']}",
                status="local",
                spec=self.spec,
                for_values=dfn.for_values,
            )
            for text in dfn_link_texts(dfn):
                self.local.add_reference(text, ref)

    def add_anchor_block_references(self, anchors: list[tuple[str, Reference]]) -> None:
        for text, ref in anchors:
            self.anchor_block.add_reference(text, ref)

    def tiers(self, query: Query, allow_inexact: bool):
        unscoped = replace(query, status=None)
        yield "local", self.local, unscoped, False
        yield "anchor-block", self.anchor_block, unscoped, False
        if self.external is not None:
            external = replace(query, status=query.status or self.external_status)
            yield "external", self.external, external, False
            if allow_inexact:
                yield "external (inexact)", self.external, external, True

    def get_reference(self, query: Query, allow_inexact: bool | None = None) -> Reference:
        """
        Raises:
            LinkResolutionError: when no tier resolves the query
        """
        if allow_inexact is None:
            allow_inexact = self.allow_inexact

        last_error: QueryError | None = None
        for name, source, tier_query, inexact in self.tiers(query, allow_inexact):
            try:
                refs = source.query_references(tier_query, inexact=inexact)
            except QueryError as e:
                logger.debug("%s: no match for %r (%s)", name, query.link_text, e.kind.value)
                last_error = e
                continue
            if len(refs) > 1:
                logger.debug("%s: %d matches for %r, using the first", name, len(refs), query.link_text)
            return refs[0]

        detail = f" ({last_error.kind.value} mismatch)" if last_error else ""
        for_part = f" for '{', '.join(query.for_values)}'" if query.for_values else ""
        raise LinkResolutionError(
            f"No '{query.link_type}' reference for '{query.link_text}'{for_part}{detail}"
        )

    def is_external(self, ref: Reference) -> bool:
        return ref.status != "local" and ref.spec is not None and ref.spec != self.spec
