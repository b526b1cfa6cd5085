"""Resolve biblio links and dfn autolinks in the element tree."""

import logging
from collections import defaultdict
from dataclasses import dataclass, field

from bs4 import Tag

from ..core.model import BiblioEntry, Query, Reference
from ..core.utils import fragment_of, generate_name, split_for_values
from ..core.vocab import LINK_TYPES
from ..dom.tree import compute_scopes, dedup_ids, get_text_content, select
from ..errors import LinkResolutionError
from .biblio import BiblioManager
from .references import ReferenceManager

logger = logging.getLogger(__name__)

AUTOLINK_SELECTOR = "a:not([href]):not([data-link-type=biblio])"


@dataclass
class Citation:
    key: str
    entry: BiblioEntry
    status: str | None = None


@dataclass
class Citations:
    """Biblio entries cited by the document, split by normativity."""
    normative: dict[str, Citation] = field(default_factory=dict)
    informative: dict[str, Citation] = field(default_factory=dict)

    def cite(self, key: str, entry: BiblioEntry, normative: bool, status: str | None = None) -> None:
        name = key.lower()
        if normative:
            self.informative.pop(name, None)
            self.normative.setdefault(name, Citation(key, entry, status))
        elif name not in self.normative:
            self.informative.setdefault(name, Citation(key, entry, status))

    def __bool__(self) -> bool:
        return bool(self.normative or self.informative)


@dataclass
class ExternalTerms:
    """Terms from other specs that this document links to, by spec."""
    by_spec: dict[str, dict[str, Reference]] = field(default_factory=lambda: defaultdict(dict))

    def add(self, spec: str, text: str, ref: Reference) -> None:
        self.by_spec[spec].setdefault(text, ref)

    def __bool__(self) -> bool:
        return any(self.by_spec.values())


def biblio_link_key(a: Tag) -> str:
    return a.get("data-lt") or get_text_content(a).strip("[]! ")


def process_biblio_links(root: Tag, biblio: BiblioManager, citations: Citations) -> None:
    """
    Raises:
        LinkResolutionError: for a key no biblio source knows
    """
    for a in select(root, "a[data-link-type=biblio]"):
        key = biblio_link_key(a)
        entry = biblio.get_biblio(key)
        if entry is None:
            raise LinkResolutionError(f"Couldn't find biblio reference '{key}'")
        a["href"] = f"#biblio-{generate_name(key)}"
        normative = a.get("data-biblio-type") == "normative"
        citations.cite(key, entry, normative, a.get("data-biblio-status"))


def _query_for(a: Tag, link_for: str | None) -> Query:
    link_type = a["data-link-type"]
    return Query(
        link_type=link_type,
        link_text=a.get("data-lt") or get_text_content(a),
        status=a.get("data-link-status"),
        for_values=split_for_values(link_for) if link_for else None,
        explicit_for=link_for is not None,
    )


def process_auto_links(
    root: Tag,
    manager: ReferenceManager,
    biblio: BiblioManager | None = None,
    citations: Citations | None = None,
) -> ExternalTerms:
    """
    Give every `<a>` without an href the url of the definition it names,
    plus an id of the form `ref-for-<target>` unless it already has one.

    Links into other specs are collected for the index; when such a spec
    has a biblio entry it becomes a normative reference.

    Raises:
        LinkResolutionError: for a link no tier resolves
    """
    scopes = compute_scopes(root)
    external = ExternalTerms()

    for a in select(root, AUTOLINK_SELECTOR):
        link_type = a.get("data-link-type") or "dfn"
        if link_type not in LINK_TYPES:
            raise LinkResolutionError(f"Unknown link type '{link_type}' on '{get_text_content(a)}'")
        a["data-link-type"] = link_type

        query = _query_for(a, scopes[id(a)].link_for)
        ref = manager.get_reference(query)
        a["href"] = ref.url
        if not a.get("id"):
            a["id"] = f"ref-for-{fragment_of(ref.url)}"

        if manager.is_external(ref):
            external.add(ref.spec, query.link_text, ref)
            if biblio is not None and citations is not None:
                entry = biblio.get_biblio(ref.spec)
                if entry is not None:
                    citations.cite(ref.spec, entry, normative=True)
                else:
                    logger.debug("No biblio entry for linked spec %s", ref.spec)

    dedup_ids(root)
    return external
