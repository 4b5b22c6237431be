"""Loaded Go packages as seen by the resolver."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from ..models import Example
from .signature import TypeSignature


@dataclass(frozen=True)
class RawField:
    """A struct field exactly as declared in source.

    ``name`` is None for embedded fields.
    """

    name: Optional[str]
    signature: TypeSignature
    tag: Optional[str]
    comment: str

    @property
    def embedded(self) -> bool:
        return self.name is None


@dataclass
class Declaration:
    """A top-level ``type`` declaration; ``fields`` is None unless it is a struct."""

    name: str
    comment: str
    fields: Optional[List[RawField]]
    source: "SourceFile" = field(repr=False, compare=False)

    @property
    def is_struct(self) -> bool:
        return self.fields is not None

    @property
    def exported(self) -> bool:
        return bool(self.name) and self.name[0].isupper()


@dataclass(frozen=True)
class ConstEntry:
    name: str
    label: Optional[str] = None


@dataclass
class ConstGroup:
    """A ``const`` block and the last line of the comment preceding it."""

    marker: str
    constants: List[ConstEntry] = field(default_factory=list)


@dataclass
class SourceFile:
    path: Path
    package: str
    imports: Dict[str, str] = field(default_factory=dict)
    declarations: List[Declaration] = field(default_factory=list)
    const_groups: List[ConstGroup] = field(default_factory=list)
    part_definitions: Dict[str, List[Example]] = field(default_factory=dict)

    def import_path(self, alias: str) -> Optional[str]:
        return self.imports.get(alias)


@dataclass
class Module:
    """A Go package: every file in one directory."""

    import_path: str
    directory: Path
    name: str
    files: List[SourceFile] = field(default_factory=list)
    imports: Dict[str, "Module"] = field(default_factory=dict, repr=False, compare=False)

    @property
    def prefix(self) -> str:
        return posixpath.basename(self.import_path)

    def declarations(self) -> Iterator[Declaration]:
        for source in self.files:
            yield from source.declarations

    def declares(self, name: str) -> bool:
        return any(decl.name == name for decl in self.declarations())

    def find_struct(self, name: str) -> Optional[Declaration]:
        """Return the first exported struct whose name matches ``name`` case-insensitively.

        Declarations are scanned in file order; unexported or non-struct
        candidates are passed over and later matches are ignored.
        """
        folded = name.lower()
        for decl in self.declarations():
            if decl.name.lower() == folded and decl.is_struct and decl.exported:
                return decl
        return None


@dataclass
class ModuleSet:
    """Result of loading a Go module tree."""

    root: Path
    module_path: str
    modules: List[Module] = field(default_factory=list)

    def get(self, import_path: str) -> Optional[Module]:
        for module in self.modules:
            if module.import_path == import_path:
                return module
        return None

    @property
    def root_modules(self) -> List[Module]:
        return [module for module in self.modules if module.directory == self.root]


__all__ = [
    "ConstEntry",
    "ConstGroup",
    "Declaration",
    "Module",
    "ModuleSet",
    "RawField",
    "SourceFile",
]
