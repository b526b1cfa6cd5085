"""On-disk bibliography data, sharded like the anchor store.

Keys live in `<root>/biblio/biblio-<group>.data`. Each record starts with a
`<prefix>:<key>` line:

- `d:` a full entry: link text, date, status, title, snapshot url,
  current url, obsoleted-by, other, et-al flag, authors..., `-`
- `s:` a preformatted entry: link text, citation markup, `-`
- `a:` an alias: link text, target key, `-`
"""

import logging
import threading
from pathlib import Path

from ..core.model import BiblioEntry, BiblioFormat
from ..core.utils import generate_group_name
from ..errors import DataSourceError
from .records import RecordReader

logger = logging.getLogger(__name__)


def _read_dict_entry(reader: RecordReader) -> BiblioEntry:
    link_text, date, status, title, snapshot_url, current_url, _obsoleted_by, _other, _et_al = (
        reader.fields(
            "linkText", "date", "status", "title", "snapshot_url", "current_url",
            "obsoletedBy", "other", "etAl",
        )
    )
    authors = reader.until_end("authors")
    return BiblioEntry(
        format=BiblioFormat.DICT,
        link_text=link_text,
        date=date or None,
        status=status or None,
        title=title or None,
        url=current_url or snapshot_url or None,
        snapshot_url=snapshot_url or None,
        current_url=current_url or None,
        authors=authors,
    )


def read_biblio_records(reader: RecordReader) -> list[tuple[str, BiblioEntry]]:
    records = []
    while not reader.at_end():
        header = reader.field("key")
        prefix, sep, key = header.partition(":")
        if not sep or not key.strip():
            raise DataSourceError(f"{reader.path}:{reader.pos}: bad biblio key line {header!r}")
        key = key.strip().lower()

        if prefix == "d":
            entry = _read_dict_entry(reader)
        elif prefix == "s":
            link_text, data = reader.fields("linkText", "data")
            reader.expect_end()
            entry = BiblioEntry(BiblioFormat.STRING, link_text, data=data)
        elif prefix == "a":
            link_text, alias_of = reader.fields("linkText", "aliasOf")
            reader.expect_end()
            entry = BiblioEntry(BiblioFormat.ALIAS, link_text, alias_of=alias_of.strip())
        else:
            raise DataSourceError(f"{reader.path}:{reader.pos}: unknown biblio prefix {prefix!r}")
        records.append((key, entry))
    return records


class BiblioStore:
    """Biblio source over the sharded files; keys are case-insensitive. Safe to share between threads."""

    def __init__(self, root: Path):
        self.root = Path(root)
        self._entries: dict[str, BiblioEntry] = {}
        self.loaded_groups: set[str] = set()
        self._lock = threading.Lock()

    def shard_path(self, group: str) -> Path:
        return self.root / "biblio" / f"biblio-{group}.data"

    def fetch_biblio(self, key: str) -> BiblioEntry | None:
        key = key.lower()
        if key in self._entries:
            return self._entries[key]

        group = generate_group_name(key)
        with self._lock:
            if group not in self.loaded_groups:
                path = self.shard_path(group)
                reader = RecordReader.open(path)
                records = read_biblio_records(reader) if reader is not None else []
                for k, entry in records:
                    self._entries.setdefault(k, entry)
                self.loaded_groups.add(group)
                if reader is not None:
                    logger.info("Loaded %d biblio entries from %s", len(records), path)

        return self._entries.get(key)
