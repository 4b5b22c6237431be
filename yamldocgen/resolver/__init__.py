"""Type graph resolution and documentation synthesis."""

from __future__ import annotations

from .classifier import Classification, FieldClassifier, enum_values, parse_struct_tag
from .resolver import ResolutionContext, TypeGraphResolver, discover
from .synthesizer import synthesize

__all__ = [
    "Classification",
    "FieldClassifier",
    "ResolutionContext",
    "TypeGraphResolver",
    "discover",
    "enum_values",
    "parse_struct_tag",
    "synthesize",
]
