"""Builds render-ready documentation objects from a resolved type set."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List

from ..logging import get_logger
from ..models import (
    Appearance,
    DocumentSet,
    Example,
    FieldDoc,
    ResolvedSet,
    StructDoc,
)

logger = get_logger("resolver.synthesizer")


def synthesize(
    resolved: ResolvedSet,
    *,
    name: str = "",
    package: str = "main",
    output: str = "",
    header: str = "",
) -> DocumentSet:
    """Compute propagated examples and back-references for every type.

    Runs only once the whole set is known: a field may point at a type that
    was discovered after its owner.
    """
    referenced_examples: Dict[str, List[Example]] = defaultdict(list)
    appearances: Dict[str, List[Appearance]] = defaultdict(list)

    for decl in resolved:
        for field in decl.fields:
            if not field.type_ref:
                continue
            if field.type_ref not in resolved:
                logger.debug("Type %s referenced by %s is not in the resolved set", field.type_ref, decl.qualified_name)
                continue
            referenced_examples[field.type_ref].extend(field.text.examples)
            appearances[field.type_ref].append(
                Appearance(parent=decl.qualified_name, field_name=field.name)
            )

    structs: List[StructDoc] = []
    for decl in resolved:
        logger.info("generating docs for type: %s", decl.qualified_name)
        fields: List[FieldDoc] = []
        for field in decl.fields:
            target = resolved.get(field.type_ref) if field.type_ref else None
            inherited = target.text.examples if target is not None else ()
            fields.append(
                FieldDoc(
                    name=field.name,
                    identifier=field.identifier,
                    type=field.type,
                    type_ref=field.type_ref,
                    summary=field.text.summary,
                    description=field.text.description,
                    examples=_merge(field.text.examples, inherited),
                    values=list(field.text.values),
                    enum_values=list(field.enum_values),
                )
            )
        structs.append(
            StructDoc(
                name=decl.qualified_name,
                escaped_name=decl.escaped_name,
                summary=decl.text.summary,
                description=decl.text.description,
                is_root=decl.is_root,
                examples=_merge(decl.text.examples, referenced_examples.get(decl.qualified_name, ())),
                values=list(decl.text.values),
                part_definitions=list(decl.part_definitions),
                fields=fields,
                appears_in=list(appearances.get(decl.qualified_name, ())),
            )
        )

    return DocumentSet(
        name=name or resolved.root.name,
        package=package,
        file=output,
        header=header,
        structs=structs,
    )


def _merge(own: Iterable[Example], extra: Iterable[Example]) -> List[Example]:
    merged: List[Example] = []
    seen = set()
    for example in (*own, *extra):
        if example in seen:
            continue
        seen.add(example)
        merged.append(example)
    return merged


__all__ = ["synthesize"]
