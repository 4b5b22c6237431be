"""Helper utilities for constructing throwaway Go modules in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping

from yamldocgen.golang.loader import ModuleLoader
from yamldocgen.golang.source import ModuleSet


class GoModuleBuilder:
    """Writes Go sources into a temporary module and loads it."""

    def __init__(self, tmp_path: Path, module_path: str = "example.com/app") -> None:
        self.root = tmp_path / "module"
        self.root.mkdir()
        self.module_path = module_path
        (self.root / "go.mod").write_text(f"module {module_path}\n\ngo 1.21\n", encoding="utf-8")

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the module."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def load(self, relative: str = "") -> ModuleSet:
        """Load the module with the package at `relative` as the root."""
        return ModuleLoader().load(self.path(relative))

    def path(self, relative: str = "") -> Path:
        return self.root / relative if relative else self.root


__all__ = ["GoModuleBuilder"]
