"""Configuration loader for specmark.toml."""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .core.toggles import ToggleSet
from .core.vocab import MARKUP_SHORTHANDS
from .errors import SpecmarkError

CONFIG_FILE_NAME = "specmark.toml"


@dataclass
class MarkdownConfig:
    """Block and inline markup settings."""
    indent: int = 4
    shorthands: ToggleSet = field(default_factory=lambda: ToggleSet(dict.fromkeys(MARKUP_SHORTHANDS, True)))


@dataclass
class DataConfig:
    """Location of the on-disk anchor and biblio stores."""
    dir: Path = Path("spec-data")


@dataclass
class LinkConfig:
    """Reference resolution settings."""
    status: str = "current"
    inexact: bool = True


@dataclass
class SpecConfig:
    """The document's own identity."""
    shortname: str | None = None
    title: str | None = None


@dataclass
class ServeConfig:
    """Local API server settings."""
    host: str = "127.0.0.1"
    port: int = 8000
    token: str | None = None


@dataclass
class SpecmarkConfig:
    """Complete specmark configuration."""
    markdown: MarkdownConfig = field(default_factory=MarkdownConfig)
    data: DataConfig = field(default_factory=DataConfig)
    links: LinkConfig = field(default_factory=LinkConfig)
    spec: SpecConfig = field(default_factory=SpecConfig)
    serve: ServeConfig = field(default_factory=ServeConfig)
    path: Path | None = None  # file the settings came from, if any


def find_config(config_path: Path | None = None, doc_path: Path | None = None) -> Path | None:
    """
    First existing config file, in order:
    1. config_path (if provided)
    2. cwd/specmark.toml
    3. the document's directory
    """
    search_paths = []
    if config_path:
        search_paths.append(Path(config_path))
    search_paths.append(Path.cwd() / CONFIG_FILE_NAME)
    if doc_path:
        doc_path = Path(doc_path)
        doc_dir = doc_path if doc_path.is_dir() else doc_path.parent
        search_paths.append(doc_dir / CONFIG_FILE_NAME)

    for path in search_paths:
        if path.exists():
            return path
    return None


def _shorthands(data: Any) -> ToggleSet:
    toggles = ToggleSet(dict.fromkeys(MARKUP_SHORTHANDS, True))
    if not isinstance(data, dict):
        return toggles
    for name, value in data.items():
        if name not in MARKUP_SHORTHANDS:
            raise SpecmarkError(f"Unknown markup shorthand '{name}' in config")
        toggles[name] = bool(value)
    return toggles


def load_config(config_path: Path | None = None, doc_path: Path | None = None) -> SpecmarkConfig:
    """
    Load configuration from specmark.toml.

    Args:
        config_path: Explicit path to config file
        doc_path: Source document (or its directory) for fallback search

    Returns:
        SpecmarkConfig with resolved settings; defaults when no file exists

    Raises:
        SpecmarkError: if the file is not valid TOML or has bad values
    """
    path = find_config(config_path, doc_path)
    toml_data: dict[str, Any] = {}
    if path is not None:
        try:
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise SpecmarkError(f"Invalid config file {path}: {e}") from e

    md_data = toml_data.get("markdown", {})
    indent = md_data.get("indent", 4)
    if not isinstance(indent, int) or indent < 1:
        raise SpecmarkError(f"markdown.indent must be a positive integer, got {indent!r}")
    markdown_config = MarkdownConfig(
        indent=indent,
        shorthands=_shorthands(md_data.get("shorthands")),
    )

    # Relative data dirs are taken from the config file's directory
    data_data = toml_data.get("data", {})
    data_dir = Path(data_data.get("dir", "spec-data"))
    if path is not None and not data_dir.is_absolute():
        data_dir = path.parent / data_dir
    data_config = DataConfig(dir=data_dir)

    links_data = toml_data.get("links", {})
    links_config = LinkConfig(
        status=links_data.get("status", "current"),
        inexact=bool(links_data.get("inexact", True)),
    )

    spec_data = toml_data.get("spec", {})
    spec_config = SpecConfig(
        shortname=spec_data.get("shortname"),
        title=spec_data.get("title"),
    )

    serve_data = toml_data.get("serve", {})
    serve_config = ServeConfig(
        host=serve_data.get("host", "127.0.0.1"),
        port=int(serve_data.get("port", 8000)),
        token=serve_data.get("token"),
    )

    return SpecmarkConfig(
        markdown=markdown_config,
        data=data_config,
        links=links_config,
        spec=spec_config,
        serve=serve_config,
        path=path,
    )
