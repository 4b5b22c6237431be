"""Core data models shared across yamldocgen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple


def qualify(prefix: str, name: str) -> str:
    """Join a module prefix and a local type name (``prefix.Name``)."""
    if not prefix:
        return name
    return f"{prefix}.{name}"


@dataclass(frozen=True)
class Example:
    """Labelled usage example attached to a type or a field."""

    name: str
    value: str


@dataclass(frozen=True)
class Annotation:
    """Structured view of a leading comment block."""

    summary: str = ""
    description: str = ""
    examples: Tuple[Example, ...] = ()
    values: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Field:
    """One documentable member of a TypeDecl."""

    identifier: str
    name: str
    type: str
    type_ref: str
    text: Annotation
    enum_values: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TypeDecl:
    """A resolved struct declaration and its documentable fields."""

    name: str
    prefix: str
    module_path: str
    text: Annotation
    fields: Tuple[Field, ...]
    is_root: bool = False
    part_definitions: Tuple[Example, ...] = ()

    @property
    def qualified_name(self) -> str:
        return qualify(self.prefix, self.name)

    @property
    def escaped_name(self) -> str:
        """Identifier-safe variant of the qualified name."""
        if not self.prefix:
            return self.name
        return f"{self.prefix.upper()}{self.name}"


@dataclass(frozen=True)
class Appearance:
    """Records that ``parent`` references a type through its field ``field_name``."""

    parent: str
    field_name: str


class ResolvedSet:
    """Ordered collection of TypeDecls, unique by qualified name."""

    def __init__(self, decls: Iterable[TypeDecl], root: TypeDecl) -> None:
        self._decls: List[TypeDecl] = []
        self._by_name: Dict[str, TypeDecl] = {}
        for decl in decls:
            if decl.qualified_name in self._by_name:
                raise ValueError(f"duplicate type in resolved set: {decl.qualified_name}")
            self._decls.append(decl)
            self._by_name[decl.qualified_name] = decl
        if root.qualified_name not in self._by_name:
            raise ValueError(f"root type {root.qualified_name} is not part of the resolved set")
        self.root = root

    def __iter__(self) -> Iterator[TypeDecl]:
        return iter(self._decls)

    def __len__(self) -> int:
        return len(self._decls)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def get(self, name: str) -> Optional[TypeDecl]:
        return self._by_name.get(name)

    def names(self) -> List[str]:
        return [decl.qualified_name for decl in self._decls]


@dataclass
class FieldDoc:
    """Render-ready documentation for a single field."""

    name: str
    identifier: str
    type: str
    type_ref: str
    summary: str
    description: str
    examples: List[Example] = field(default_factory=list)
    values: List[str] = field(default_factory=list)
    enum_values: List[str] = field(default_factory=list)


@dataclass
class StructDoc:
    """Render-ready documentation for a struct type."""

    name: str
    escaped_name: str
    summary: str
    description: str
    is_root: bool = False
    examples: List[Example] = field(default_factory=list)
    values: List[str] = field(default_factory=list)
    part_definitions: List[Example] = field(default_factory=list)
    fields: List[FieldDoc] = field(default_factory=list)
    appears_in: List[Appearance] = field(default_factory=list)


@dataclass
class DocumentSet:
    """Everything the renderer needs for one output file."""

    name: str
    package: str
    file: str = ""
    header: str = ""
    structs: List[StructDoc] = field(default_factory=list)

    def get(self, name: str) -> Optional[StructDoc]:
        for struct in self.structs:
            if struct.name == name:
                return struct
        return None
