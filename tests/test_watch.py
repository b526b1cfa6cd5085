"""Tests for watch mode functionality."""

import pytest

try:
    from watchdog.events import DirModifiedEvent, FileCreatedEvent, FileModifiedEvent, FileMovedEvent

    from specmark.watch import DebounceHandler, watch_document
    WATCHDOG_AVAILABLE = True
except ImportError:
    WATCHDOG_AVAILABLE = False

pytestmark = pytest.mark.skipif(not WATCHDOG_AVAILABLE, reason="watchdog not installed")


@pytest.fixture
def watched(tmp_path):
    source = tmp_path / "index.bs"
    source.write_text("Hello.\n")
    config = tmp_path / "specmark.toml"
    config.write_text("")
    return source, config


def test_only_watched_files_are_collected(watched, tmp_path):
    source, config = watched
    batches = []
    handler = DebounceHandler({source, config}, batches.append, debounce_ms=50)

    handler.on_any_event(FileModifiedEvent(str(tmp_path / "index.html")))
    handler.on_any_event(FileCreatedEvent(str(tmp_path / "notes.txt")))
    handler.on_any_event(DirModifiedEvent(str(tmp_path)))
    assert handler.changed == set()

    handler.on_any_event(FileModifiedEvent(str(source)))
    assert handler.changed == {source.resolve()}


def test_save_by_rename(watched, tmp_path):
    """Editors that write a temp file and move it over the source still trigger."""
    source, _ = watched
    handler = DebounceHandler({source}, lambda changed: None)
    handler.on_any_event(FileMovedEvent(str(tmp_path / ".index.bs.swp"), str(source)))
    assert handler.changed == {source.resolve()}


def test_watch_debounce(watched):
    """Test that debouncing coalesces multiple events."""
    source, config = watched
    batches = []
    handler = DebounceHandler({source, config}, batches.append, debounce_ms=10_000)

    handler.on_any_event(FileModifiedEvent(str(source)))
    handler.on_any_event(FileModifiedEvent(str(source)))
    handler.on_any_event(FileModifiedEvent(str(config)))

    # Still inside the debounce window
    handler.check_and_flush()
    assert batches == []

    handler.flush()
    assert batches == [{source.resolve(), config.resolve()}]
    assert handler.changed == set()

    # Nothing pending, nothing fired
    handler.flush()
    assert len(batches) == 1


def test_check_and_flush_after_window(watched):
    source, _ = watched
    batches = []
    handler = DebounceHandler({source}, batches.append, debounce_ms=0)
    handler.on_any_event(FileModifiedEvent(str(source)))
    handler.check_and_flush()
    assert batches == [{source.resolve()}]


def test_watch_missing_source(tmp_path, capsys):
    assert watch_document(tmp_path / "missing.bs", lambda: None) == 1
    assert "Source not found" in capsys.readouterr().err
