"""
Preset loader - YAML harmony presets from the package and the project.

The package ships a small library of presets. A project directory, when
configured, can hold copies or new presets; a project file wins over a
library file with the same stem.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from chuk_mcp_harmony.models.preset import Preset, PresetMetadata

logger = logging.getLogger(__name__)


class PresetLoader:
    """Reads, caches and writes preset files."""

    def __init__(
        self,
        library_path: Path | None = None,
        project_path: Path | None = None,
    ):
        """
        Args:
            library_path: Built-in presets (defaults to the packaged library)
            project_path: Writable presets directory, or None for read-only use
        """
        self.library_path = library_path or (Path(__file__).parent / "library")
        self.project_path = project_path
        self._cache: dict[str, Preset] = {}

    def _directories(self) -> Iterator[Path]:
        """Search directories, lowest precedence first."""
        if self.library_path.exists():
            yield self.library_path
        if self.project_path and self.project_path.exists():
            yield self.project_path

    def list_presets(self) -> list[PresetMetadata]:
        """Summaries of every loadable preset, sorted by name."""
        found: dict[str, PresetMetadata] = {}
        for directory in self._directories():
            for path in sorted(directory.glob("*.yaml")):
                preset = self._load_preset_file(path)
                if preset:
                    found[preset.name] = PresetMetadata.from_preset(preset)
        return [found[name] for name in sorted(found)]

    def get_preset(self, name: str) -> Preset | None:
        """Look a preset up by name; None when no file loads."""
        cached = self._cache.get(name)
        if cached is not None:
            return cached

        for directory in reversed(list(self._directories())):
            path = directory / f"{name}.yaml"
            preset = self._load_preset_file(path) if path.exists() else None
            if preset:
                self._cache[name] = preset
                return preset
        return None

    def copy_to_project(self, name: str) -> Path | None:
        """
        Place a library preset's file in the project directory.

        Returns None when the library has no such preset. An existing
        project file is never overwritten.
        """
        if not self.project_path:
            raise ValueError("No project path configured")

        source = self.library_path / f"{name}.yaml"
        if not source.exists():
            return None

        target = self.project_path / source.name
        if target.exists():
            raise ValueError(f"Preset already exists in project: {name}")

        self.project_path.mkdir(parents=True, exist_ok=True)
        target.write_text(source.read_text())
        # The copy shadows the library file from now on
        self._cache.pop(name, None)
        return target

    def save_preset(self, preset: Preset) -> Path:
        """Write a preset to the project directory, replacing any file of that name."""
        if not self.project_path:
            raise ValueError("No project path configured")

        self.project_path.mkdir(parents=True, exist_ok=True)
        path = self.project_path / f"{preset.name}.yaml"
        with open(path, "w") as f:
            yaml.safe_dump(preset.to_yaml_dict(), f, default_flow_style=False, sort_keys=False)

        self._cache[preset.name] = preset
        return path

    def _load_preset_file(self, path: Path) -> Preset | None:
        """Load a preset from a YAML file; unreadable files are skipped."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
            return self._parse_preset(data, default_name=path.stem)
        except (OSError, yaml.YAMLError, ValidationError, ValueError) as e:
            logger.warning("Skipping preset file %s: %s", path, e)
            return None

    def _parse_preset(self, data: dict[str, Any] | None, default_name: str) -> Preset:
        if not isinstance(data, dict):
            raise ValueError("Preset file must contain a mapping")
        return Preset(
            name=data.get("name", default_name),
            description=data.get("description", ""),
            params=data.get("params") or {},
        )

    def clear_cache(self) -> None:
        self._cache.clear()
