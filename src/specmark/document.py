"""One source document going through the whole pipeline."""

import logging
import sys
from pathlib import Path

from bs4 import BeautifulSoup

from .adapters.memory_source import InMemoryBiblioSource
from .core.model import Dfn, Line
from .core.vocab import SOURCE_FILE_EXTENSIONS
from .dom import clean_dom, dedup_ids, parse_document, process_headings
from .errors import SpecmarkError
from .links import (
    Citations,
    ExternalTerms,
    add_dfn_panels,
    add_heading_self_links,
    add_index_section,
    add_references_section,
    classify_dfns,
    extract_data_blocks,
    process_auto_links,
    process_biblio_links,
)
from .markdown import parse, remove_comments, to_lines
from .runtime import Runtime
from .shorthand import transform_shorthands

logger = logging.getLogger(__name__)

STDIO = "-"


def default_output_path(source: Path) -> Path:
    """`spec.bs` and `spec.src.html` both become `spec.html`."""
    name = source.name
    for ext in SOURCE_FILE_EXTENSIONS:
        if name.endswith(ext):
            return source.with_name(name[: -len(ext)] + ".html")
    return source.with_suffix(".html")


class Document:
    """
    A specification source compiled to HTML.

    `preprocess()` builds the tree and resolves every link; `finish()`
    writes it out. `text` replaces reading from `source`.
    """

    def __init__(self, source: str | Path, runtime: Runtime, text: str | None = None):
        self.source = source
        self.runtime = runtime
        self.text = text
        self.soup: BeautifulSoup | None = None
        self.dfns: list[Dfn] = []
        self.citations = Citations()
        self.external_terms = ExternalTerms()
        self.biblio_source = InMemoryBiblioSource()
        self.references = runtime.new_reference_manager()
        self.biblio = runtime.new_biblio_manager(self.biblio_source)

    @property
    def title(self) -> str:
        if self.runtime.config.spec.title:
            return self.runtime.config.spec.title
        if self.source != STDIO:
            return Path(self.source).name.split(".")[0]
        return ""

    def read_lines(self) -> list[Line]:
        if self.text is not None:
            text = self.text
        elif self.source == STDIO:
            text = sys.stdin.read()
        else:
            try:
                text = Path(self.source).read_text(encoding="utf-8")
            except OSError as e:
                raise SpecmarkError(f"Cannot read {self.source}: {e}") from e
        return to_lines(text)

    def preprocess(self) -> "Document":
        config = self.runtime.config
        tab_size = config.markdown.indent

        lines = remove_comments(self.read_lines())
        blocks = extract_data_blocks(lines, tab_size)
        self.references.add_anchor_block_references(blocks.anchors)
        for key, entry in blocks.biblio.items():
            self.biblio_source.add_entry(key, entry)

        body = "\n".join(parse(blocks.lines, tab_size))
        self.soup = soup = parse_document(body, self.title)
        root = soup.body

        transform_shorthands(soup, root, config.markdown.shorthands)
        process_headings(root)

        self.dfns = classify_dfns(root)
        # Local references point at the final definition ids.
        dedup_ids(root)
        for dfn in self.dfns:
            dfn.id = dfn.element["id"]
        self.references.add_local_dfns(self.dfns)

        process_biblio_links(root, self.biblio, self.citations)
        self.external_terms = process_auto_links(root, self.references, self.biblio, self.citations)

        add_index_section(soup, root, self.dfns, self.external_terms, self.citations)
        add_references_section(soup, root, self.citations)
        add_heading_self_links(soup, root)
        add_dfn_panels(soup, root, self.dfns)

        clean_dom(root)
        dedup_ids(root)
        logger.info(
            "%s: %d definitions, %d normative and %d informative references",
            self.source, len(self.dfns), len(self.citations.normative), len(self.citations.informative),
        )
        return self

    def serialize(self) -> str:
        if self.soup is None:
            raise SpecmarkError("Document has not been preprocessed")
        return str(self.soup)

    def finish(self, outfile: str | Path | None = None) -> Path | None:
        """
        Write the result. Without `outfile` it lands next to the source
        (`spec.bs` -> `spec.html`); `-` writes to stdout.

        Returns:
            The path written, or None for stdout
        """
        html = self.serialize()
        if outfile is None:
            if self.source == STDIO or self.text is not None:
                outfile = STDIO
            else:
                outfile = default_output_path(Path(self.source))

        if outfile == STDIO:
            sys.stdout.write(html)
            return None

        out_path = Path(outfile)
        try:
            out_path.write_text(html, encoding="utf-8")
        except OSError as e:
            raise SpecmarkError(f"Cannot write {out_path}: {e}") from e
        logger.info("Wrote %s", out_path)
        return out_path
