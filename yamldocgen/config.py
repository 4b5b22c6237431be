"""Configuration loading for yamldocgen (.yamldocgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".yamldocgen.yml"
DEFAULT_NODOC_MARKER = "docgen:nodoc"
SUPPORTED_FORMATS = ("go", "markdown")


@dataclass
class TagConfig:
    """Struct tag keys consulted by the field classifier."""

    serialization: str = "yaml"
    mapping: str = "mapping"


@dataclass
class GeneratorConfig:
    """Represents the settings defined in .yamldocgen.yml."""

    root: Path
    package: Optional[str] = None
    output: Optional[Path] = None
    format: Optional[str] = None
    header: str = ""
    templates_dir: Optional[Path] = None
    exclude_paths: List[str] = field(default_factory=list)
    nodoc_marker: str = DEFAULT_NODOC_MARKER
    tags: TagConfig = field(default_factory=TagConfig)


def load_config(config_path: Path) -> GeneratorConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return GeneratorConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    output_str = _as_str(data.get("output"))
    templates_dir_str = _as_str(data.get("templates_dir"))

    fmt = _as_str(data.get("format"))
    if fmt is not None:
        fmt = fmt.lower()
        if fmt not in SUPPORTED_FORMATS:
            raise ConfigError(
                f"Unsupported format {fmt!r} in {CONFIG_FILENAME}; expected one of {', '.join(SUPPORTED_FORMATS)}"
            )

    tags = TagConfig()
    tag_data = _as_dict(data.get("tags"))
    if tag_data:
        tags.serialization = _as_str(tag_data.get("serialization")) or tags.serialization
        tags.mapping = _as_str(tag_data.get("mapping")) or tags.mapping

    return GeneratorConfig(
        root=root,
        package=_as_str(data.get("package")),
        output=root / output_str if output_str else None,
        format=fmt,
        header=_as_str(data.get("header")) or "",
        templates_dir=root / templates_dir_str if templates_dir_str else None,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        nodoc_marker=_as_str(data.get("nodoc_marker")) or DEFAULT_NODOC_MARKER,
        tags=tags,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_NODOC_MARKER",
    "GeneratorConfig",
    "SUPPORTED_FORMATS",
    "TagConfig",
    "load_config",
]
