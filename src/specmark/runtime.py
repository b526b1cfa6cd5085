"""Runtime wiring helper for the CLI, watch mode and the API."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.anchor_store import AnchorStore
from .adapters.biblio_store import BiblioStore
from .adapters.memory_source import InMemoryBiblioSource
from .config import SpecmarkConfig, load_config
from .links.biblio import BiblioManager
from .links.references import ReferenceManager


@dataclass
class Runtime:
    """Settings plus factories for the per-document lookup state."""
    config: SpecmarkConfig
    data_dir: Path

    def new_anchor_store(self) -> AnchorStore:
        return AnchorStore(self.data_dir)

    def new_biblio_store(self) -> BiblioStore:
        return BiblioStore(self.data_dir)

    def new_reference_manager(self) -> ReferenceManager:
        return ReferenceManager(
            external=self.new_anchor_store(),
            spec=self.config.spec.shortname,
            external_status=self.config.links.status,
            allow_inexact=self.config.links.inexact,
        )

    def new_biblio_manager(self, in_document: InMemoryBiblioSource | None = None) -> BiblioManager:
        sources = [in_document] if in_document is not None else []
        return BiblioManager([*sources, self.new_biblio_store()])


def build_runtime(
    doc_path: Path | None = None,
    config_path: Path | None = None,
    data_dir: Path | None = None,
) -> Runtime:
    """Load configuration and apply command-line overrides."""
    config = load_config(config_path=config_path, doc_path=doc_path)

    # Use config values if CLI args not provided
    if data_dir is None:
        data_dir = config.data.dir

    return Runtime(config=config, data_dir=Path(data_dir))
