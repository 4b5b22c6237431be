"""Type graph resolution: discovers every struct reachable from a root type.

Resolution is depth-first and records types in pre-order, so the root is
always the first entry of the resulting :class:`ResolvedSet`. Every struct is
walked at most once per :class:`ResolutionContext`; fields pointing at an
already discovered type still carry its qualified name so back-references can
be computed afterwards.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence

from ..annotations import parse_annotation
from ..errors import TypeNotFoundError
from ..golang.signature import Array, Map, Named, Opaque, Pointer, Qualified, TypeSignature, display
from ..golang.source import Declaration, Module, RawField, SourceFile
from ..logging import get_logger
from ..models import Annotation, Field, ResolvedSet, TypeDecl, qualify
from .classifier import FieldClassifier


class ResolutionContext:
    """Dedup state and discovery order for one top-level resolution."""

    def __init__(self) -> None:
        self._names: Dict[str, str] = {}
        self._order: List[str] = []
        self._decls: Dict[str, TypeDecl] = {}

    def lookup(self, *keys: str) -> Optional[str]:
        """Return the qualified name registered under any of ``keys``."""
        for key in keys:
            name = self._names.get(key)
            if name is not None:
                return name
        return None

    def begin(self, qualified_name: str, *aliases: str) -> None:
        for key in (qualified_name, *aliases):
            self._names.setdefault(key, qualified_name)
        self._order.append(qualified_name)

    def finish(self, decl: TypeDecl) -> None:
        self._decls[decl.qualified_name] = decl

    def get(self, qualified_name: str) -> Optional[TypeDecl]:
        return self._decls.get(qualified_name)

    def decls(self) -> List[TypeDecl]:
        return [self._decls[name] for name in self._order if name in self._decls]

    def __len__(self) -> int:
        return len(self._decls)


class TypeGraphResolver:
    """Walks struct declarations and their field types across packages."""

    def __init__(
        self,
        classifier: FieldClassifier | None = None,
        annotation_parser: Callable[[str], Annotation] = parse_annotation,
    ) -> None:
        self.classifier = classifier or FieldClassifier()
        self.parse_annotation = annotation_parser
        self.logger = get_logger("resolver")

    def discover(self, modules: Sequence[Module], type_name: str) -> ResolvedSet:
        """Resolve ``type_name`` in ``modules`` and everything it depends on."""
        context = ResolutionContext()
        root: Optional[TypeDecl] = None
        for module in modules:
            decl = self.resolve(context, module, type_name, "", root=root is None)
            if decl is not None and root is None:
                root = decl
        if root is None:
            locations = ", ".join(str(module.directory) for module in modules) or "<no packages>"
            raise TypeNotFoundError(f"failed to find types that could be documented in {locations}")
        return ResolvedSet(context.decls(), root)

    def resolve(
        self,
        context: ResolutionContext,
        module: Module,
        type_name: str,
        prefix: str,
        *,
        root: bool = False,
    ) -> Optional[TypeDecl]:
        """Resolve one struct type, adding it and its dependencies to ``context``.

        Returns None when the type is not a documentable struct, and when it
        is still being resolved further up the stack.
        """
        name = self._visit(context, module, type_name, prefix, root=root)
        return context.get(name) if name else None

    def _visit(
        self,
        context: ResolutionContext,
        module: Module,
        type_name: str,
        prefix: str,
        *,
        root: bool = False,
    ) -> Optional[str]:
        declaration = module.find_struct(type_name)
        if declaration is None:
            return None

        qualified_name = qualify(prefix, declaration.name)
        reference = f"{module.import_path}.{declaration.name}"
        known = context.lookup(qualified_name, reference)
        if known is not None:
            self.logger.debug("Skipping already discovered type %s", known)
            return known

        context.begin(qualified_name, reference)
        fields: List[Field] = []
        for raw in declaration.fields or ():
            fields.extend(self._resolve_field(context, module, declaration, prefix, raw))

        context.finish(
            TypeDecl(
                name=declaration.name,
                prefix=prefix,
                module_path=module.import_path,
                text=self.parse_annotation(declaration.comment),
                fields=tuple(fields),
                is_root=root,
                part_definitions=tuple(declaration.source.part_definitions.get(declaration.name, ())),
            )
        )
        return qualified_name

    def _resolve_field(
        self,
        context: ResolutionContext,
        module: Module,
        declaration: Declaration,
        prefix: str,
        raw: RawField,
    ) -> List[Field]:
        source = declaration.source
        outcome = self.classifier.classify(raw, source, owner=qualify(prefix, declaration.name))
        if outcome is None:
            return []

        if outcome.inline:
            embedded = self._resolve_embedded(context, module, source, prefix, raw.signature)
            if embedded is None:
                self.logger.debug(
                    "Embedded type %s of %s could not be inlined", raw.signature, declaration.name
                )
                return []
            return list(embedded.fields)

        type_ref = self.resolve_signature(context, module, source, prefix, raw.signature) or ""
        return [
            Field(
                identifier=raw.name or "",
                name=outcome.exposed_name,
                type=display(
                    raw.signature,
                    prefix=prefix,
                    is_local=module.declares,
                    import_path_for=source.import_path,
                ),
                type_ref=type_ref,
                text=self.parse_annotation(outcome.documentation),
                enum_values=outcome.enum_values,
            )
        ]

    def _resolve_embedded(
        self,
        context: ResolutionContext,
        module: Module,
        source: SourceFile,
        prefix: str,
        signature: TypeSignature,
    ) -> Optional[TypeDecl]:
        if isinstance(signature, Pointer):
            return self._resolve_embedded(context, module, source, prefix, signature.elem)
        if isinstance(signature, Named):
            name = self._visit(context, module, signature.name, prefix)
        elif isinstance(signature, Qualified):
            target = self._imported_module(module, source, signature.package)
            if target is None:
                return None
            name = self._visit(context, target, signature.name, target.prefix)
        else:
            return None
        return context.get(name) if name else None

    def resolve_signature(
        self,
        context: ResolutionContext,
        module: Module,
        source: SourceFile,
        prefix: str,
        signature: TypeSignature,
    ) -> Optional[str]:
        """Resolve the struct a field type points at and return its qualified name.

        Pointers, slices/arrays and map values are unwrapped; map keys are
        never followed.
        """
        if isinstance(signature, (Pointer, Array)):
            return self.resolve_signature(context, module, source, prefix, signature.elem)
        if isinstance(signature, Map):
            return self.resolve_signature(context, module, source, prefix, signature.value)
        if isinstance(signature, Named):
            if signature.builtin:
                return None
            return self._visit(context, module, signature.name, prefix)
        if isinstance(signature, Qualified):
            target = self._imported_module(module, source, signature.package)
            if target is None:
                return None
            return self._visit(context, target, signature.name, target.prefix)
        if isinstance(signature, Opaque):
            return None
        raise TypeError(f"unknown type signature: {signature!r}")

    def _imported_module(self, module: Module, source: SourceFile, alias: str) -> Optional[Module]:
        import_path = source.import_path(alias)
        if import_path is None:
            self.logger.debug("[ref] no import named %s in %s", alias, source.path)
            return None
        target = module.imports.get(import_path)
        if target is None:
            self.logger.debug("[ref] no package found for %s: %s", module.import_path, import_path)
        return target


def discover(modules: Sequence[Module], type_name: str, resolver: TypeGraphResolver | None = None) -> ResolvedSet:
    """Convenience wrapper running one discovery pass with a fresh context."""
    return (resolver or TypeGraphResolver()).discover(modules, type_name)


__all__ = ["ResolutionContext", "TypeGraphResolver", "discover"]
