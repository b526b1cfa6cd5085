"""Element tree utilities for specmark."""

from .clean import clean_dom
from .headings import process_headings
from .tree import (
    Scope,
    add_class,
    compute_scopes,
    dedup_ids,
    get_text_content,
    new_a,
    new_element,
    parse_document,
    parse_fragment,
    section_name,
    select,
)

__all__ = [
    "Scope",
    "add_class",
    "clean_dom",
    "compute_scopes",
    "dedup_ids",
    "get_text_content",
    "new_a",
    "new_element",
    "parse_document",
    "parse_fragment",
    "process_headings",
    "section_name",
    "select",
]
