"""Decides which struct fields are documented and how."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..config import DEFAULT_NODOC_MARKER, TagConfig
from ..golang.signature import Named, Qualified, base_name
from ..golang.source import RawField, SourceFile
from ..logging import get_logger

_TAG_PAIR = re.compile(r'([^\s:"]+):"((?:[^"\\]|\\.)*)"')

ENUM_MARKER_PREFIX = "name:"
ENUM_SENTINEL = "limit"


def parse_struct_tag(raw: str) -> Dict[str, str]:
    """Split a Go struct tag (``yaml:"name" json:"-"``) into key/value pairs.

    The first occurrence of a key wins.
    """
    pairs: Dict[str, str] = {}
    for key, value in _TAG_PAIR.findall(raw or ""):
        pairs.setdefault(key, value.replace('\\"', '"'))
    return pairs


def enum_values(scope: SourceFile, type_name: str) -> Tuple[str, ...]:
    """Collect the constant names of the group marked ``name:<type_name>``."""
    if "." in type_name:
        type_name = type_name.rsplit(".", 1)[1]
    marker = f"{ENUM_MARKER_PREFIX}{type_name}"
    values: List[str] = []
    for group in scope.const_groups:
        if group.marker != marker:
            continue
        for constant in group.constants:
            if constant.name == ENUM_SENTINEL:
                continue
            values.append(constant.label or constant.name)
    return tuple(values)


@dataclass(frozen=True)
class Classification:
    """Outcome for a field that is not skipped."""

    exposed_name: str
    documentation: str
    inline: bool = False
    enum_values: Tuple[str, ...] = ()


class FieldClassifier:
    """Applies the tag, documentation and visibility inclusion rules."""

    def __init__(
        self,
        tags: TagConfig | None = None,
        nodoc_marker: str = DEFAULT_NODOC_MARKER,
    ) -> None:
        self.tags = tags or TagConfig()
        self.nodoc_marker = nodoc_marker
        self.logger = get_logger("resolver.classifier")

    def classify(self, raw: RawField, scope: SourceFile, owner: str = "") -> Optional[Classification]:
        """Return None when ``raw`` is not documented."""
        tag = parse_struct_tag(raw.tag or "")
        mapping = tag.get(self.tags.mapping, "")
        if raw.tag is None and not mapping:
            return None

        serialization = tag.get(self.tags.serialization, "")
        key, _, options = serialization.partition(",")
        if not mapping and key in ("", "-") and not options:
            return None

        documentation = raw.comment or ""
        if self.nodoc_marker and self.nodoc_marker in documentation:
            return None

        label = raw.name or str(raw.signature)
        if not mapping and not raw.embedded and not documentation.strip():
            self.logger.warning("field %r of %s is missing documentation", label, owner or "struct")
            return None

        identifier = raw.name if raw.name is not None else base_name(raw.signature)
        if not identifier or not identifier[0].isupper():
            return None

        if raw.embedded:
            return Classification(exposed_name="", documentation=documentation, inline=True)

        exposed = key.lower() if key not in ("", "-") else identifier.lower()
        if not mapping:
            return Classification(exposed_name=exposed, documentation=documentation)

        if not isinstance(raw.signature, (Named, Qualified)):
            return None
        return Classification(
            exposed_name=exposed,
            documentation=documentation,
            enum_values=enum_values(scope, raw.signature.name),
        )


__all__ = [
    "Classification",
    "ENUM_SENTINEL",
    "FieldClassifier",
    "enum_values",
    "parse_struct_tag",
]
