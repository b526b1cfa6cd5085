"""Tests for the on-disk anchor and biblio stores."""

from threading import Barrier, Thread

import pytest

from specmark.adapters.anchor_store import AnchorStore
from specmark.adapters.biblio_store import BiblioStore
from specmark.adapters.memory_source import InMemoryBiblioSource, InMemoryReferenceSource
from specmark.core.model import BiblioFormat, Query, Reference
from specmark.errors import DataSourceError, QueryError, QueryErrorKind


def test_anchor_store_exact_query(data_dir):
    store = AnchorStore(data_dir)
    (ref,) = store.query_references(Query("value", "flex", status="current"))
    assert ref.url == "https://drafts.csswg.org/css-flexbox-1/#valdef-display-flex"
    assert ref.spec == "css-flexbox-1"
    assert ref.for_values == ("display",)


def test_anchor_store_loads_each_shard_once(data_dir):
    store = AnchorStore(data_dir)
    store.query_references(Query("dfn", "flex container"))
    assert store.loaded_groups == {"fl"}

    # The shard is not re-read even if the file disappears.
    store.shard_path("fl").unlink()
    (ref,) = store.query_references(Query("value", "flex"))
    assert ref.link_type == "value"


def test_anchor_store_missing_shard_is_empty(data_dir):
    store = AnchorStore(data_dir)
    with pytest.raises(QueryError) as exc:
        store.query_references(Query("dfn", "zzz"))
    assert exc.value.kind is QueryErrorKind.TEXT
    assert "zz" in store.loaded_groups


def test_anchor_store_inexact(data_dir):
    store = AnchorStore(data_dir)
    with pytest.raises(QueryError):
        store.query_references(Query("dfn", "navigating"))
    (ref,) = store.query_references(Query("dfn", "navigating"), inexact=True)
    assert ref.url == "https://html.spec.whatwg.org/#navigate"


def test_anchor_store_truncated_shard(tmp_path):
    (tmp_path / "anchors").mkdir()
    (tmp_path / "anchors" / "anchors-fl.data").write_text("flex\nvalue\ncss\n", encoding="utf-8")
    store = AnchorStore(tmp_path)
    with pytest.raises(DataSourceError):
        store.query_references(Query("value", "flex"))
    assert "fl" not in store.loaded_groups


def test_biblio_store_dict_entry(data_dir):
    store = BiblioStore(data_dir)
    entry = store.fetch_biblio("CSS-Flexbox-1")
    assert entry.format is BiblioFormat.DICT
    assert entry.title == "CSS Flexible Box Layout Module Level 1"
    assert entry.authors == ["Tab Atkins Jr.", "Elika Etemad", "Rossen Atanassov"]
    assert entry.url == "https://drafts.csswg.org/css-flexbox-1/"
    assert store.loaded_groups == {"cs"}


def test_biblio_store_string_and_alias(data_dir):
    store = BiblioStore(data_dir)
    rfc = store.fetch_biblio("rfc2119")
    assert rfc.format is BiblioFormat.STRING
    assert "Key words" in rfc.data

    alias = store.fetch_biblio("css3-flexbox")
    assert alias.format is BiblioFormat.ALIAS
    assert alias.alias_of == "css-flexbox-1"


def test_biblio_store_unknown_key(data_dir):
    assert BiblioStore(data_dir).fetch_biblio("nope") is None


def test_anchor_store_shared_between_threads(data_dir):
    store = AnchorStore(data_dir)
    start = Barrier(8)
    results = []

    def query():
        start.wait()
        results.append(store.query_references(Query("value", "flex")))

    threads = [Thread(target=query) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert [len(refs) for refs in results] == [1] * 8
    assert store.loaded_groups == {"fl"}


def test_biblio_store_shared_between_threads(data_dir):
    store = BiblioStore(data_dir)
    start = Barrier(8)
    results = []

    def fetch():
        start.wait()
        results.append(store.fetch_biblio("css-flexbox-1"))

    threads = [Thread(target=fetch) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 8
    assert all(entry is results[0] for entry in results)
    assert results[0].title == "CSS Flexible Box Layout Module Level 1"


def test_biblio_store_bad_prefix(tmp_path):
    (tmp_path / "biblio").mkdir()
    (tmp_path / "biblio" / "biblio-ab.data").write_text("x:abc\nABC\n-\n", encoding="utf-8")
    with pytest.raises(DataSourceError):
        BiblioStore(tmp_path).fetch_biblio("abc")


def test_in_memory_sources():
    source = InMemoryReferenceSource()
    source.add_reference("term", Reference("dfn", "#term", "local"))
    source.add_reference("term", Reference("dfn", "#term①", "local"))
    assert len(source) == 2
    assert [r.url for r in source.query_references(Query("dfn", "term"))] == ["#term", "#term①"]
    assert source.texts() == ["term"]

    biblio = InMemoryBiblioSource()
    biblio.add_entry("MyRef", object())
    assert biblio.fetch_biblio("myref") is not None
