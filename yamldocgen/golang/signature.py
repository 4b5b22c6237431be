"""Go type signatures as a closed set of variants.

Only the shapes that can lead to another struct declaration get their own
variant; everything else (interfaces, funcs, channels, inline structs) is
kept as :class:`Opaque` text.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from typing import Callable, Optional, Union

# Predeclared identifiers that never name a user declaration.
BUILTIN_TYPES = frozenset(
    {
        "any",
        "bool",
        "byte",
        "comparable",
        "complex64",
        "complex128",
        "error",
        "float32",
        "float64",
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "rune",
        "string",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
    }
)


@dataclass(frozen=True)
class Named:
    """A type identifier local to the declaring package."""

    name: str

    def __str__(self) -> str:
        return self.name

    @property
    def builtin(self) -> bool:
        return self.name in BUILTIN_TYPES


@dataclass(frozen=True)
class Qualified:
    """A type selected from an imported package (``pkg.Name``)."""

    package: str
    name: str

    def __str__(self) -> str:
        return f"{self.package}.{self.name}"


@dataclass(frozen=True)
class Pointer:
    elem: "TypeSignature"

    def __str__(self) -> str:
        return f"*{self.elem}"


@dataclass(frozen=True)
class Array:
    """Slice (``length`` is None) or fixed-size array."""

    elem: "TypeSignature"
    length: Optional[str] = None

    def __str__(self) -> str:
        return f"[{self.length or ''}]{self.elem}"


@dataclass(frozen=True)
class Map:
    key: "TypeSignature"
    value: "TypeSignature"

    def __str__(self) -> str:
        return f"map[{self.key}]{self.value}"


@dataclass(frozen=True)
class Opaque:
    """Any type shape that cannot reference a struct declaration."""

    text: str
    kind: str = ""

    def __str__(self) -> str:
        return self.text


TypeSignature = Union[Named, Qualified, Pointer, Array, Map, Opaque]


def display(
    signature: TypeSignature,
    *,
    prefix: str = "",
    is_local: Optional[Callable[[str], bool]] = None,
    import_path_for: Optional[Callable[[str], Optional[str]]] = None,
) -> str:
    """Render a signature the way it appears in generated documentation.

    Pointers are dropped, slices and arrays render as ``[]Elem``. Local names
    declared in a prefixed package get that prefix, and qualified names use
    the last element of their import path.
    """

    def _render(sig: TypeSignature) -> str:
        if isinstance(sig, Named):
            if prefix and not sig.builtin and (is_local is None or is_local(sig.name)):
                return f"{prefix}.{sig.name}"
            return sig.name
        if isinstance(sig, Qualified):
            path = import_path_for(sig.package) if import_path_for else None
            package = posixpath.basename(path) if path else sig.package
            return f"{package}.{sig.name}"
        if isinstance(sig, Pointer):
            return _render(sig.elem)
        if isinstance(sig, Array):
            return f"[]{_render(sig.elem)}"
        if isinstance(sig, Map):
            return f"map[{_render(sig.key)}]{_render(sig.value)}"
        if isinstance(sig, Opaque):
            if sig.kind == "struct_type":
                return "struct"
            if sig.kind == "interface_type":
                return "interface{}"
            return sig.text
        raise TypeError(f"unknown type signature: {sig!r}")

    return _render(signature)


def base_name(signature: TypeSignature) -> Optional[str]:
    """Return the identifier a named or qualified signature points at."""
    if isinstance(signature, Pointer):
        return base_name(signature.elem)
    if isinstance(signature, (Named, Qualified)):
        return signature.name
    return None


__all__ = [
    "Array",
    "BUILTIN_TYPES",
    "Map",
    "Named",
    "Opaque",
    "Pointer",
    "Qualified",
    "TypeSignature",
    "base_name",
    "display",
]
