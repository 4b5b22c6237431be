"""Loads every Go package of a module so cross-package types can be resolved."""

from __future__ import annotations

import re
from collections import Counter
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..errors import ModuleLoadError
from ..logging import get_logger
from ..source_scanner import SourceScanner
from .parser import GoSourceParser, default_import_alias
from .source import Module, ModuleSet, SourceFile

_MODULE_DIRECTIVE = re.compile(r"^\s*module\s+(\S+)", re.MULTILINE)


def find_module_root(path: Path) -> Tuple[Path, str]:
    """Return the directory holding ``go.mod`` and the module path it declares.

    Without a ``go.mod`` the directory itself is the module root and its name
    is used as the module path.
    """
    for candidate in (path, *path.parents):
        go_mod = candidate / "go.mod"
        if not go_mod.is_file():
            continue
        try:
            text = go_mod.read_text(encoding="utf-8")
        except OSError as exc:
            raise ModuleLoadError(f"could not read {go_mod}: {exc}") from exc
        match = _MODULE_DIRECTIVE.search(text)
        if match is None:
            raise ModuleLoadError(f"{go_mod} does not declare a module path")
        return candidate, match.group(1).strip('"`')
    return path, path.name


class ModuleLoader:
    """Parses every package under a module root and links their imports."""

    def __init__(
        self,
        scanner: SourceScanner | None = None,
        parser: GoSourceParser | None = None,
    ) -> None:
        self.scanner = scanner or SourceScanner()
        self.parser = parser or GoSourceParser()
        self.logger = get_logger("golang.loader")

    def load(self, root: str | Path) -> ModuleSet:
        root_path = Path(root).expanduser().resolve()
        if not root_path.is_dir():
            raise ModuleLoadError(f"Source path is not a directory: {root}")

        module_root, module_path = find_module_root(root_path)
        self.logger.debug("Module %s rooted at %s", module_path, module_root)
        try:
            packages = self.scanner.scan(module_root)
        except (FileNotFoundError, NotADirectoryError) as exc:
            raise ModuleLoadError(str(exc)) from exc

        vendor_dir = module_root / "vendor"
        modules: List[Module] = []
        for directory in sorted(packages):
            files: List[SourceFile] = []
            for path in packages[directory]:
                try:
                    files.append(self.parser.parse_file(path))
                except OSError as exc:
                    raise ModuleLoadError(f"could not read {path}: {exc}") from exc
            modules.append(
                Module(
                    import_path=_import_path(directory, module_root, module_path, vendor_dir),
                    directory=directory,
                    name=_package_name(files),
                    files=files,
                )
            )

        _link_imports(modules)
        module_set = ModuleSet(root=root_path, module_path=module_path, modules=modules)
        if not module_set.root_modules:
            raise ModuleLoadError(f"no Go package found in {root_path}")
        self.logger.info("Loaded %d Go packages from %s", len(modules), module_root)
        return module_set


def _import_path(directory: Path, module_root: Path, module_path: str, vendor_dir: Path) -> str:
    if vendor_dir in directory.parents:
        return directory.relative_to(vendor_dir).as_posix()
    if directory == module_root:
        return module_path
    return f"{module_path}/{directory.relative_to(module_root).as_posix()}"


def _package_name(files: List[SourceFile]) -> str:
    names = Counter(source.package for source in files if source.package)
    if not names:
        return ""
    return names.most_common(1)[0][0]


def _link_imports(modules: List[Module]) -> None:
    by_path: Dict[str, Module] = {module.import_path: module for module in modules}
    for module in modules:
        for source in module.files:
            for alias, import_path in list(source.imports.items()):
                target: Optional[Module] = by_path.get(import_path)
                if target is None:
                    continue
                module.imports[import_path] = target
                # a guessed alias may differ from the package clause of the target
                if (
                    target.name
                    and target.name != alias
                    and alias == default_import_alias(import_path)
                    and target.name not in source.imports
                ):
                    source.imports[target.name] = import_path


__all__ = ["ModuleLoader", "find_module_root"]
