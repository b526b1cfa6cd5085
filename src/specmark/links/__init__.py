"""Definitions, cross-reference resolution and the sections built from them."""

from .autolinks import Citations, ExternalTerms, process_auto_links, process_biblio_links
from .biblio import BiblioManager
from .datablocks import DataBlocks, extract_data_blocks, parse_info_tree
from .dfn import classify_dfns
from .panels import (
    add_dfn_panels,
    add_heading_self_links,
    add_index_section,
    add_references_section,
)
from .references import ReferenceManager

__all__ = [
    "BiblioManager",
    "Citations",
    "DataBlocks",
    "ExternalTerms",
    "ReferenceManager",
    "add_dfn_panels",
    "add_heading_self_links",
    "add_index_section",
    "add_references_section",
    "classify_dfns",
    "extract_data_blocks",
    "parse_info_tree",
    "process_auto_links",
    "process_biblio_links",
]
