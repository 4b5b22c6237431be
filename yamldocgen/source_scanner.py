"""Go source discovery for a module tree."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Sequence

_EXCLUDED_DIRS = {"testdata"}

_IGNORE_CONSTRAINT = re.compile(r"^//\s*(go:build|\+build)\s+ignore\b", re.MULTILINE)
_PACKAGE_CLAUSE = re.compile(r"^package\s", re.MULTILINE)


@dataclass
class IgnoreRule:
    """Represents a gitignore-style exclusion from .yamldocgen.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        target = rel_path
        if self.anchored or self.has_slash:
            if fnmatchcase(target, self.pattern):
                return True
            if self.directory_only and target.startswith(f"{self.pattern}/"):
                return True
            return False

        for part in target.split("/"):
            if fnmatchcase(part, self.pattern):
                return True
        return False


def build_ignore_rule(pattern: str) -> IgnoreRule | None:
    pattern = pattern.strip()
    negate = pattern.startswith("!")
    if negate:
        pattern = pattern[1:]
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def _is_ignored_build(path: Path) -> bool:
    """True for files excluded from every build with an ``ignore`` constraint."""
    try:
        text = path.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return False
    clause = _PACKAGE_CLAUSE.search(text)
    header = text[: clause.start()] if clause else text
    return bool(_IGNORE_CONSTRAINT.search(header))


class SourceScanner:
    """Walks a module root and groups buildable Go files by directory."""

    def __init__(self, exclude_paths: Iterable[str] | None = None) -> None:
        self.rules: List[IgnoreRule] = []
        for pattern in exclude_paths or ():
            rule = build_ignore_rule(pattern)
            if rule is not None:
                self.rules.append(rule)

    def scan(self, root: Path) -> Dict[Path, List[Path]]:
        """Return ``directory -> sorted .go files`` for every package directory."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Source path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Source path is not a directory: {root}")

        packages: Dict[Path, List[Path]] = {}
        for path in self._iter_files(root_path):
            packages.setdefault(path.parent, []).append(path)
        for files in packages.values():
            files.sort()
        return packages

    def _iter_files(self, root: Path) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(root):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            filtered_dirs = []
            for name in sorted(dirnames):
                if name in _EXCLUDED_DIRS or name.startswith((".", "_")):
                    continue
                # A nested go.mod starts a separate module.
                if (current_dir / name / "go.mod").is_file():
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if _should_ignore(rel_path, True, self.rules):
                    continue
                filtered_dirs.append(name)
            dirnames[:] = filtered_dirs

            for filename in filenames:
                if not filename.endswith(".go") or filename.endswith("_test.go"):
                    continue
                if filename.startswith((".", "_")):
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if _should_ignore(rel_path, False, self.rules):
                    continue
                path = current_dir / filename
                if _is_ignored_build(path):
                    continue
                yield path


__all__ = ["IgnoreRule", "SourceScanner", "build_ignore_rule"]
