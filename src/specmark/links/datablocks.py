"""Data blocks: `<pre class=anchors>` and `<pre class=biblio>` in the source.

Both are cut out of the source lines before markdown parsing and turned
into reference and biblio records for the current document.
"""

import logging
import re
import textwrap
from dataclasses import dataclass, field

import yaml

from ..core.model import BiblioEntry, BiblioFormat, Line, Reference
from ..core.utils import generate_name, split_for_values
from ..errors import ParseError
from ..markdown.indent import get_indent_level, trim_indent

logger = logging.getLogger(__name__)

_BLOCK_START_RE = re.compile(
    r"""^\s*<pre\s[^>]*class=["']?[^"'>]*\b(?P<kind>anchors|biblio)\b[^>]*>(?P<rest>.*)$"""
)
_BLOCK_END_RE = re.compile(r"^(?P<before>.*?)</pre>\s*$")
_PAIR_RE = re.compile(r"^(?P<key>[^:]+):\s*(?P<val>.*)$")

InfoEntry = dict[str, list[str]]


@dataclass
class DataBlocks:
    lines: list[Line]
    anchors: list[tuple[str, Reference]] = field(default_factory=list)
    biblio: dict[str, BiblioEntry] = field(default_factory=dict)


def _parse_pairs(text: str, line_no: int) -> InfoEntry:
    pairs: InfoEntry = {}
    for piece in text.split(";"):
        if not piece.strip():
            continue
        m = _PAIR_RE.match(piece.strip())
        if not m:
            raise ParseError(f"Line doesn't match the grammar 'key: value': {piece.strip()!r}", line_no)
        pairs.setdefault(m.group("key").strip(), []).append(m.group("val").strip())
    return pairs


def _merge(levels: list[InfoEntry]) -> InfoEntry:
    merged: InfoEntry = {}
    for pairs in levels:
        for key, values in pairs.items():
            merged.setdefault(key, []).extend(values)
    return merged


def parse_info_tree(lines: list[Line], tab_size: int = 4) -> list[InfoEntry]:
    """
    Parse `key: value` lines into flat entries.

    Pairs on one line are separated by `;`. A more indented line extends
    the pairs of the line above it, and siblings share their parent:

        urlPrefix: https://example.org/
            type: dfn; text: foo
            type: dfn; text: bar

    gives two entries, each with the urlPrefix. Only leaves become entries.
    """
    entries: list[InfoEntry] = []
    levels: list[InfoEntry] = []
    last_level = -1

    for line in lines:
        if not line.text.strip():
            continue
        level = get_indent_level(line.text, tab_size)
        if level > last_level + 1:
            raise ParseError(f"Line jumps {level - last_level} indent levels", line.index)
        if level <= last_level:
            entries.append(_merge(levels[: last_level + 1]))

        text = trim_indent(line.text, level, tab_size, line.index)
        pairs = _parse_pairs(text, line.index)
        del levels[level:]
        levels.append(pairs)
        last_level = level

    if levels:
        entries.append(_merge(levels))
    return entries


def anchors_from_info(entries: list[InfoEntry], first_line: int) -> list[tuple[str, Reference]]:
    anchors = []
    for entry in entries:
        for required in ("type", "text"):
            if required not in entry:
                raise ParseError(f"Anchor is missing '{required}'", first_line)
        if "url" not in entry and "urlPrefix" not in entry:
            raise ParseError("Anchor needs a 'url' or 'urlPrefix'", first_line)

        prefix = "".join(entry.get("urlPrefix", []))
        for_values: tuple[str, ...] = ()
        for value in entry.get("for", []):
            for_values += split_for_values(value)
        spec = entry.get("spec", [None])[0]
        status = entry.get("status", ["anchor-block"])[0]

        for link_type in entry["type"]:
            for text in entry["text"]:
                if "url" in entry:
                    url = prefix + entry["url"][0]
                else:
                    url = f"{prefix}#{generate_name(text)}"
                anchors.append((text, Reference(link_type, url, status, spec, for_values)))
    return anchors


def _as_list(value) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


def biblio_from_yaml(text: str, first_line: int) -> dict[str, BiblioEntry]:
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid biblio block: {e}", first_line) from e
    if not isinstance(data, dict):
        raise ParseError("A biblio block must map citation keys to entries", first_line)

    entries = {}
    for key, fields in data.items():
        if not isinstance(fields, dict):
            raise ParseError(f"Biblio entry '{key}' must be a mapping", first_line)
        key = str(key)
        if "aliasOf" in fields:
            entry = BiblioEntry(BiblioFormat.ALIAS, key, alias_of=str(fields["aliasOf"]))
        else:
            date = fields.get("date")
            entry = BiblioEntry(
                BiblioFormat.DICT,
                key,
                date=str(date) if date is not None else None,
                status=fields.get("status"),
                title=fields.get("title"),
                url=fields.get("href") or fields.get("url"),
                authors=_as_list(fields.get("authors")),
            )
        entries[key.lower()] = entry
    return entries


def extract_data_blocks(lines: list[Line], tab_size: int = 4) -> DataBlocks:
    """Remove data blocks from `lines` and parse their contents."""
    result = DataBlocks(lines=[])
    kind: str | None = None
    start = 0
    body: list[Line] = []

    def close_block() -> None:
        text = textwrap.dedent("\n".join(line.text for line in body))
        dedented = [Line(line.index, t) for line, t in zip(body, text.split("\n"))]
        if kind == "anchors":
            anchors = anchors_from_info(parse_info_tree(dedented, tab_size), start)
            result.anchors.extend(anchors)
            logger.debug("Anchor block at line %d declared %d anchors", start, len(anchors))
        else:
            result.biblio.update(biblio_from_yaml(text, start))

    for line in lines:
        if kind is None:
            m = _BLOCK_START_RE.match(line.text)
            if not m:
                result.lines.append(line)
                continue
            kind, start, body = m.group("kind"), line.index, []
            rest = m.group("rest")
            end = _BLOCK_END_RE.match(rest)
            if end:
                body.append(Line(line.index, end.group("before")))
                close_block()
                kind = None
            elif rest.strip():
                body.append(Line(line.index, rest))
            continue

        end = _BLOCK_END_RE.match(line.text)
        if end:
            if end.group("before").strip():
                body.append(Line(line.index, end.group("before")))
            close_block()
            kind = None
        else:
            body.append(line)

    if kind is not None:
        raise ParseError(f"Unclosed <pre class={kind}> block", start)
    return result
