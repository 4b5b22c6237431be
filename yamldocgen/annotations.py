"""Parses leading comment blocks into structured annotations.

A comment is either free text or a small YAML document::

    description: |
      BulkSize is the number of items to process per node at once.
    examples:
      - name: BulkSize Example
        value: "10000"
    values:
      - "fast"
      - "slow"

Free text may also be followed by such a block, in which case the first line
is used as the summary.
"""

from __future__ import annotations

import textwrap
from typing import Any, List, Optional, Tuple

import yaml

from .models import Annotation, Example

_KNOWN_KEYS = ("description", "examples", "values")


def parse_annotation(raw: str) -> Annotation:
    """Turn raw comment text into an Annotation."""
    text = textwrap.dedent(raw or "").strip("\n")
    if not text.strip():
        return Annotation()

    structured = _load_structured(text)
    if structured is not None:
        description = _scalar(structured.get("description")).strip()
        return Annotation(
            summary=_first_line(description),
            description=description,
            examples=_examples(structured.get("examples")),
            values=_values(structured.get("values")),
        )

    description = text.strip()
    summary = _first_line(description)
    remainder = "\n".join(text.split("\n")[1:])
    block = _load_structured(textwrap.dedent(remainder)) if remainder.strip() else None
    if block is None:
        return Annotation(summary=summary, description=description)

    block_description = _scalar(block.get("description")).strip()
    return Annotation(
        summary=summary,
        description=block_description or summary,
        examples=_examples(block.get("examples")),
        values=_values(block.get("values")),
    )


def _load_structured(text: str) -> Optional[dict]:
    try:
        loaded = yaml.load(text, Loader=yaml.BaseLoader)
    except yaml.YAMLError:
        return None
    if not isinstance(loaded, dict):
        return None
    if not any(key in loaded for key in _KNOWN_KEYS):
        return None
    return loaded


def _first_line(text: str) -> str:
    return text.split("\n", 1)[0].strip()


def _scalar(value: Any) -> str:
    # BaseLoader keeps every scalar as its source text; nested nodes are not scalars.
    return value if isinstance(value, str) else ""


def _examples(value: Any) -> Tuple[Example, ...]:
    if not isinstance(value, list):
        return ()
    examples: List[Example] = []
    for item in value:
        if not isinstance(item, dict):
            continue
        examples.append(
            Example(
                name=_scalar(item.get("name")).strip(),
                value=_scalar(item.get("value")).strip(),
            )
        )
    return tuple(examples)


def _values(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list):
        value = [value]
    return tuple(item for item in value if isinstance(item, str) and item)


__all__ = ["parse_annotation"]
