"""Go package loading: source parsing, type signatures and module linking."""

from __future__ import annotations

from .loader import ModuleLoader, find_module_root
from .parser import GoSourceParser
from .signature import Array, Map, Named, Opaque, Pointer, Qualified, TypeSignature, display
from .source import ConstEntry, ConstGroup, Declaration, Module, ModuleSet, RawField, SourceFile

__all__ = [
    "Array",
    "ConstEntry",
    "ConstGroup",
    "Declaration",
    "GoSourceParser",
    "Map",
    "Module",
    "ModuleLoader",
    "ModuleSet",
    "Named",
    "Opaque",
    "Pointer",
    "Qualified",
    "RawField",
    "SourceFile",
    "TypeSignature",
    "display",
    "find_module_root",
]
