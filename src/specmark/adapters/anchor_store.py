"""On-disk anchor data for terms defined by other specifications.

The store is sharded: every link text lives in
`<root>/anchors/anchors-<group>.data`, where `<group>` is
`generate_group_name(text)`. A shard is a run of records:

    <link text>
    <link type>
    <spec>
    <shortname>
    <level>
    <status>
    <url>
    <export>
    <normative>
    <for value>...
    -
"""

import logging
import threading
from collections import defaultdict
from pathlib import Path

from ..core.model import Query, Reference
from ..core.query import fetch_candidates, filter_references
from ..core.utils import generate_group_name
from ..core.variations import ordered_link_text_variations
from .records import RecordReader

logger = logging.getLogger(__name__)

_HEADER_FIELDS = (
    "type", "spec", "shortname", "level", "status", "url", "export", "normative",
)


def read_anchor_records(reader: RecordReader) -> list[tuple[str, Reference]]:
    records = []
    while not reader.at_end():
        key = reader.field("key")
        link_type, spec, shortname, _level, status, url, _export, _normative = (
            reader.fields(*_HEADER_FIELDS)
        )
        for_values = tuple(reader.until_end("for"))
        ref = Reference(
            link_type=link_type,
            url=url,
            status=status,
            spec=shortname or spec or None,
            for_values=for_values,
        )
        records.append((key, ref))
    return records


class AnchorStore:
    """
    External reference source. Each shard is read at most once, even when
    several threads query the store; a shard without the requested text is
    still remembered as loaded.
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        self._refs: dict[str, list[Reference]] = defaultdict(list)
        self.loaded_groups: set[str] = set()
        self._lock = threading.Lock()

    def shard_path(self, group: str) -> Path:
        return self.root / "anchors" / f"anchors-{group}.data"

    def _ensure_loaded(self, text: str) -> None:
        group = generate_group_name(text)
        if group in self.loaded_groups:
            return

        with self._lock:
            if group in self.loaded_groups:
                return
            path = self.shard_path(group)
            reader = RecordReader.open(path)
            records = read_anchor_records(reader) if reader is not None else []
            for key, ref in records:
                self._refs[key].append(ref)
            self.loaded_groups.add(group)

        if reader is None:
            logger.debug("No anchor shard %s", path)
        else:
            logger.info("Loaded %d anchors from %s", len(records), path)

    def query_references(self, query: Query, inexact: bool = False) -> list[Reference]:
        if inexact:
            texts = ordered_link_text_variations(query.link_type, query.link_text)
        else:
            texts = [query.link_text]
        for text in texts:
            self._ensure_loaded(text)
        return filter_references(fetch_candidates(self._refs, texts), query)
