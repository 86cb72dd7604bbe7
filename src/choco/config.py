"""Configuration loading.

Settings live in an optional ``choco.yaml`` next to the document being
processed. Environment variables override file values.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path  # noqa: TC003 - used at runtime
from typing import Any

from ruamel.yaml import YAML

from choco.style import StyleFallback

CONFIG_FILENAME = "choco.yaml"

DEFAULT_LABEL_LENGTH = 40
DEFAULT_EXPORT_FORMAT = "json"
DEFAULT_TITLE = "Untitled"


class ConfigError(Exception):
    """Raised when configuration cannot be loaded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load config at {path}: {reason}")


@dataclass
class StyleConfig:
    """Style decoration settings.

    Resolution order for ``fallback``:
    1. Environment variable CHOCO_STYLE_FALLBACK
    2. Config file (style.fallback)
    3. StyleFallback.TRUNCATE
    """

    fallback: StyleFallback = StyleFallback.TRUNCATE

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StyleConfig:
        raw = os.getenv("CHOCO_STYLE_FALLBACK") or data.get("fallback")
        if raw is None:
            return cls()
        try:
            return cls(fallback=StyleFallback(str(raw).lower()))
        except ValueError:
            allowed = ", ".join(f.value for f in StyleFallback)
            raise ValueError(f"style.fallback must be one of {allowed}, got '{raw}'") from None


@dataclass
class VisualizationConfig:
    """Graph rendering settings."""

    labels: bool = True
    label_length: int = DEFAULT_LABEL_LENGTH

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VisualizationConfig:
        label_length = int(data.get("label_length", DEFAULT_LABEL_LENGTH))
        if label_length < 4:
            raise ValueError(f"visualization.label_length must be at least 4, got {label_length}")
        return cls(labels=bool(data.get("labels", True)), label_length=label_length)


@dataclass
class ExportConfig:
    """Export settings. CHOCO_EXPORT_FORMAT overrides ``format``."""

    title: str = DEFAULT_TITLE
    format: str = DEFAULT_EXPORT_FORMAT

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExportConfig:
        export_format = os.getenv("CHOCO_EXPORT_FORMAT") or data.get("format")
        return cls(
            title=str(data.get("title", DEFAULT_TITLE)),
            format=str(export_format or DEFAULT_EXPORT_FORMAT),
        )


@dataclass
class ChocoConfig:
    """Configuration for processing a choco document."""

    style: StyleConfig = field(default_factory=StyleConfig)
    visualization: VisualizationConfig = field(default_factory=VisualizationConfig)
    export: ExportConfig = field(default_factory=ExportConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChocoConfig:
        """Create config from dictionary.

        Args:
            data: Dictionary with optional ``style``, ``visualization`` and
                ``export`` sections.

        Returns:
            ChocoConfig instance.
        """
        return cls(
            style=StyleConfig.from_dict(dict(data.get("style") or {})),
            visualization=VisualizationConfig.from_dict(dict(data.get("visualization") or {})),
            export=ExportConfig.from_dict(dict(data.get("export") or {})),
        )


def load_config(config_path: Path) -> ChocoConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML file.

    Returns:
        ChocoConfig instance.

    Raises:
        ConfigError: If the file is missing, empty or invalid.
    """
    if not config_path.exists():
        raise ConfigError(config_path, "File not found")

    yaml = YAML(typ="safe")
    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.load(f)

        if data is None:
            raise ConfigError(config_path, "Empty file")
        if not isinstance(data, dict):
            raise ConfigError(config_path, "Top level must be a mapping")

        return ChocoConfig.from_dict(dict(data))
    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(config_path, str(e)) from e


def find_config(document: Path) -> Path | None:
    """Return the ``choco.yaml`` beside *document* (or inside it, for a directory)."""
    directory = document if document.is_dir() else document.parent
    candidate = directory / CONFIG_FILENAME
    return candidate if candidate.exists() else None


def resolve_config(document: Path | None, explicit: Path | None = None) -> ChocoConfig:
    """Pick the configuration for a run.

    An explicit path wins; otherwise a ``choco.yaml`` beside the document is
    used; otherwise defaults (still subject to environment overrides).
    """
    if explicit is not None:
        return load_config(explicit)
    if document is not None:
        found = find_config(document)
        if found is not None:
            return load_config(found)
    return ChocoConfig.from_dict({})
