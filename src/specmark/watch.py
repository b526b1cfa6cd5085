"""Watch mode: rebuild a document whenever its source or config changes."""

import logging
import signal
import sys
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .errors import SpecmarkError

logger = logging.getLogger(__name__)


class DebounceHandler(FileSystemEventHandler):
    """Collects changes to the watched files and fires once things settle."""

    def __init__(self, paths: set[Path], on_change: Callable[[set[Path]], None], debounce_ms: int = 150):
        super().__init__()
        self.paths = {p.resolve() for p in paths}
        self.on_change = on_change
        self.debounce_ms = debounce_ms

        self.changed: set[Path] = set()
        self.last_event_time = 0.0

    def _watched(self, raw_path: Any) -> Path | None:
        path = Path(str(raw_path)).resolve()
        return path if path in self.paths else None

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in ("created", "modified", "moved"):
            return
        # Editors often save by moving a temp file over the original
        for raw in (event.src_path, getattr(event, "dest_path", None)):
            if not raw:
                continue
            path = self._watched(raw)
            if path is not None:
                self.changed.add(path)
                self.last_event_time = time.time()

    def check_and_flush(self) -> None:
        """Check if debounce period has elapsed and flush if so."""
        if not self.changed:
            return
        elapsed = (time.time() - self.last_event_time) * 1000
        if elapsed >= self.debounce_ms:
            self.flush()

    def flush(self) -> None:
        if not self.changed:
            return
        changed = set(self.changed)
        self.changed.clear()
        self.on_change(changed)


def watch_document(
    source: Path,
    build: Callable[[], Path | None],
    config_path: Path | None = None,
    debounce_ms: int = 150,
) -> int:
    """
    Build `source` once, then again after every change to it or to its
    config file. Build errors are reported and watching continues.

    Args:
        source: Document to watch
        build: Rebuilds the document and returns the output path
        config_path: Config file to watch as well, if any
        debounce_ms: Debounce window in milliseconds

    Returns:
        Exit code
    """
    if not source.exists():
        print(f"Error: Source not found: {source}", file=sys.stderr)
        return 1

    def rebuild(changed: set[Path]) -> None:
        start_time = time.time()
        try:
            out = build()
        except SpecmarkError as e:
            print(f"Error: {e}", file=sys.stderr, flush=True)
            return
        duration_ms = int((time.time() - start_time) * 1000)
        names = ", ".join(sorted(p.name for p in changed)) or source.name
        print(f"Rebuilt {out or source} after changes to {names} ({duration_ms}ms)", flush=True)

    rebuild(set())

    watched = {source}
    if config_path is not None and config_path.exists():
        watched.add(config_path)

    running = True

    def signal_handler(signum: int, frame: Any) -> None:
        nonlocal running
        running = False
        print("\nShutting down...", flush=True)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    handler = DebounceHandler(watched, rebuild, debounce_ms)
    observer = Observer()
    for directory in {p.resolve().parent for p in watched}:
        observer.schedule(handler, str(directory), recursive=False)

    print(f"Watching {source} (debounce: {debounce_ms}ms)", flush=True)
    print("Press Ctrl+C to stop", flush=True)
    logger.debug("Watched files: %s", ", ".join(str(p) for p in sorted(watched)))

    observer.start()
    try:
        while running:
            time.sleep(0.1)
            handler.check_and_flush()
    finally:
        handler.flush()
        observer.stop()
        observer.join()

    print("Watch stopped", flush=True)
    return 0
