"""Shared fixtures: temporary anchor/biblio data directories."""

import tempfile
from pathlib import Path

import pytest

from specmark.core.utils import generate_group_name


def anchor_record(key, link_type, spec, url, status="current", for_values=()):
    return [key, link_type, spec, spec, "1", status, url, "1", "1", *for_values, "-"]


def biblio_dict_record(key, title, url, authors=(), date="1 January 2024", status="REC", link_text=None):
    return [
        f"d:{key}", link_text or key, date, status, title, url, url, "", "", "",
        *authors, "-",
    ]


def write_shards(root: Path, kind: str, records: list[list[str]]) -> None:
    """Group records by the shard of their key and write them out."""
    shards: dict[str, list[str]] = {}
    for record in records:
        key = record[0].split(":", 1)[1] if kind == "biblio" else record[0]
        shards.setdefault(generate_group_name(key), []).extend(record)
    directory = root / kind
    directory.mkdir(parents=True, exist_ok=True)
    for group, lines in shards.items():
        (directory / f"{kind}-{group}.data").write_text("\n".join(lines) + "\n", encoding="utf-8")


@pytest.fixture
def data_dir():
    """A spec-data directory with a few CSS anchors and biblio entries."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir) / "spec-data"
        write_shards(root, "anchors", [
            anchor_record("flex container", "dfn", "css-flexbox-1",
                          "https://drafts.csswg.org/css-flexbox-1/#flex-container"),
            anchor_record("flex", "value", "css-flexbox-1",
                          "https://drafts.csswg.org/css-flexbox-1/#valdef-display-flex",
                          for_values=("display",)),
            anchor_record("display", "property", "css-display-3",
                          "https://drafts.csswg.org/css-display-3/#propdef-display"),
            anchor_record("navigate", "dfn", "html",
                          "https://html.spec.whatwg.org/#navigate"),
            anchor_record("snapshot term", "dfn", "old-spec",
                          "https://example.org/old/#snapshot-term", status="snapshot"),
        ])
        write_shards(root, "biblio", [
            biblio_dict_record("css-flexbox-1", "CSS Flexible Box Layout Module Level 1",
                               "https://drafts.csswg.org/css-flexbox-1/",
                               authors=("Tab Atkins Jr.", "Elika Etemad", "Rossen Atanassov")),
            biblio_dict_record("css-display-3", "CSS Display Module Level 3",
                               "https://drafts.csswg.org/css-display-3/",
                               authors=("Elika Etemad",)),
            biblio_dict_record("html", "HTML Standard", "https://html.spec.whatwg.org/multipage/",
                               authors=("Anne van Kesteren", "Domenic Denicola", "Ian Hickson",
                                        "Philip Jägenstedt", "Simon Pieters"),
                               date="", status="Living Standard"),
            ["s:rfc2119", "RFC2119", "S. Bradner. <a href=\"https://www.rfc-editor.org/rfc/rfc2119\">Key words</a>.", "-"],
            ["a:css3-flexbox", "css3-flexbox", "css-flexbox-1", "-"],
        ])
        yield root
