"""Tree-sitter powered Go source parser."""

from __future__ import annotations

import re
import textwrap
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

import tree_sitter_go
from tree_sitter import Language, Node, Parser

from ..logging import get_logger
from ..models import Example
from .signature import Array, Map, Named, Opaque, Pointer, Qualified, TypeSignature
from .source import ConstEntry, ConstGroup, Declaration, RawField, SourceFile

PART_DEFINITIONS_SUFFIX = "PartDefinitions"

_VERSION_SUFFIX = re.compile(r"^v\d+$")
_STRING_LITERALS = ("interpreted_string_literal", "raw_string_literal")


def default_import_alias(import_path: str) -> str:
    """Guess the package name of an import the way ``go`` tooling usually names it."""
    parts = [part for part in import_path.split("/") if part]
    if not parts:
        return import_path
    name = parts[-1]
    if _VERSION_SUFFIX.match(name) and len(parts) > 1:
        name = parts[-2]
    if name.startswith("go-"):
        name = name[3:]
    return name.split(".", 1)[0].replace("-", "_")


class GoSourceParser:
    """Extracts type declarations, imports and const groups from Go files."""

    def __init__(self) -> None:
        self._parser: Optional[Parser] = None
        self.logger = get_logger("golang.parser")

    def parse_file(self, path: Path) -> SourceFile:
        return self.parse_bytes(path.read_bytes(), path)

    def parse_bytes(self, source: bytes, path: Path) -> SourceFile:
        tree = self._get_parser().parse(source)
        root = tree.root_node
        if root.has_error:
            self.logger.warning("Syntax errors in %s; documentation may be incomplete", path)

        parsed = SourceFile(path=path, package="")
        for child in root.named_children:
            if child.type == "package_clause":
                name_node = _first_named(child)
                parsed.package = _node_text(name_node, source) if name_node else ""
            elif child.type == "import_declaration":
                self._collect_imports(child, source, parsed)
            elif child.type == "type_declaration":
                self._collect_types(child, source, parsed)
            elif child.type == "const_declaration":
                self._collect_consts(child, source, parsed)
            elif child.type == "var_declaration":
                self._collect_part_definitions(child, source, parsed)
        return parsed

    def _get_parser(self) -> Parser:
        if self._parser is None:
            self._parser = Parser(Language(tree_sitter_go.language()))
        return self._parser

    def _collect_imports(self, node: Node, source: bytes, parsed: SourceFile) -> None:
        for spec in _iter_descendants(node, ("import_spec",)):
            path_node = spec.child_by_field_name("path")
            if path_node is None:
                continue
            import_path = _unquote(_node_text(path_node, source))
            name_node = spec.child_by_field_name("name")
            alias = _node_text(name_node, source) if name_node else default_import_alias(import_path)
            if alias in ("_", "."):
                continue
            parsed.imports[alias] = import_path

    def _collect_types(self, node: Node, source: bytes, parsed: SourceFile) -> None:
        for spec in _iter_descendants(node, ("type_spec", "type_alias")):
            name_node = spec.child_by_field_name("name")
            type_node = spec.child_by_field_name("type")
            if name_node is None or type_node is None:
                continue
            comment = leading_comment(spec, source) or leading_comment(node, source)
            fields = None
            if spec.type == "type_spec" and type_node.type == "struct_type":
                fields = self._collect_fields(type_node, source)
            parsed.declarations.append(
                Declaration(
                    name=_node_text(name_node, source),
                    comment=comment,
                    fields=fields,
                    source=parsed,
                )
            )

    def _collect_fields(self, struct_node: Node, source: bytes) -> List[RawField]:
        fields: List[RawField] = []
        field_list = next(
            (child for child in struct_node.named_children if child.type == "field_declaration_list"),
            None,
        )
        if field_list is None:
            return fields
        for decl in field_list.named_children:
            if decl.type != "field_declaration":
                continue
            type_node = decl.child_by_field_name("type")
            if type_node is None:
                continue
            signature = self.signature(type_node, source)
            tag_node = decl.child_by_field_name("tag")
            tag = _unquote(_node_text(tag_node, source)) if tag_node else None
            comment = leading_comment(decl, source)
            names = decl.children_by_field_name("name")
            if not names:
                if any(child.type == "*" for child in decl.children):
                    signature = Pointer(signature)
                fields.append(RawField(name=None, signature=signature, tag=tag, comment=comment))
                continue
            for name_node in names:
                fields.append(
                    RawField(
                        name=_node_text(name_node, source),
                        signature=signature,
                        tag=tag,
                        comment=comment,
                    )
                )
        return fields

    def signature(self, node: Node, source: bytes) -> TypeSignature:
        kind = node.type
        if kind == "type_identifier":
            return Named(_node_text(node, source))
        if kind == "qualified_type":
            package_node = node.child_by_field_name("package")
            name_node = node.child_by_field_name("name")
            if package_node is None or name_node is None:
                return Opaque(_node_text(node, source), kind)
            return Qualified(_node_text(package_node, source), _node_text(name_node, source))
        if kind == "pointer_type":
            inner = _first_named(node)
            return Pointer(self.signature(inner, source)) if inner else Opaque(_node_text(node, source), kind)
        if kind in ("slice_type", "array_type"):
            element = node.child_by_field_name("element")
            if element is None:
                return Opaque(_node_text(node, source), kind)
            length_node = node.child_by_field_name("length")
            length = _node_text(length_node, source) if length_node else None
            return Array(self.signature(element, source), length)
        if kind == "map_type":
            key = node.child_by_field_name("key")
            value = node.child_by_field_name("value")
            if key is None or value is None:
                return Opaque(_node_text(node, source), kind)
            return Map(self.signature(key, source), self.signature(value, source))
        if kind == "parenthesized_type":
            inner = _first_named(node)
            return self.signature(inner, source) if inner else Opaque(_node_text(node, source), kind)
        if kind == "generic_type":
            base = node.child_by_field_name("type")
            return self.signature(base, source) if base else Opaque(_node_text(node, source), kind)
        return Opaque(_node_text(node, source), kind)

    def _collect_consts(self, node: Node, source: bytes, parsed: SourceFile) -> None:
        lines = _uncomment(leading_comment_lines(node, source))
        marker = lines[-1].strip() if lines else ""
        group = ConstGroup(marker=marker)
        for spec in _iter_descendants(node, ("const_spec",)):
            names = spec.children_by_field_name("name")
            if not names:
                continue
            own = _uncomment(leading_comment_lines(spec, source))
            label = None
            if own and own[-1].strip().startswith("name:"):
                label = own[-1].strip()[len("name:"):].strip() or None
            group.constants.append(ConstEntry(name=_node_text(names[0], source), label=label))
        parsed.const_groups.append(group)

    def _collect_part_definitions(self, node: Node, source: bytes, parsed: SourceFile) -> None:
        for spec in _iter_descendants(node, ("var_spec",)):
            names = spec.children_by_field_name("name")
            value = spec.child_by_field_name("value")
            if not names or value is None:
                continue
            name = _node_text(names[0], source)
            if not name.endswith(PART_DEFINITIONS_SUFFIX):
                continue
            entries: List[Example] = []
            for element in _iter_descendants(value, ("keyed_element",)):
                literals = list(_iter_descendants(element, _STRING_LITERALS))
                if len(literals) < 2:
                    continue
                entries.append(
                    Example(
                        name=_unquote(_node_text(literals[0], source)),
                        value=_unquote(_node_text(literals[1], source)),
                    )
                )
            parsed.part_definitions[name[: -len(PART_DEFINITIONS_SUFFIX)]] = entries


def leading_comment_lines(node: Node, source: bytes) -> List[str]:
    """Return the raw comment lines directly above ``node``.

    The block must be contiguous with the node and must not trail code on the
    same line.
    """
    lines: List[str] = []
    expected_row = node.start_point[0]
    previous = node.prev_named_sibling
    while previous is not None and previous.type == "comment":
        if previous.end_point[0] < expected_row - 1:
            break
        before = previous.prev_named_sibling
        if before is not None and before.type != "comment" and before.end_point[0] == previous.start_point[0]:
            break
        lines[:0] = _node_text(previous, source).splitlines()
        expected_row = previous.start_point[0]
        previous = before
    return lines


def leading_comment(node: Node, source: bytes) -> str:
    """Return the uncommented, dedented doc block above ``node``."""
    return textwrap.dedent("\n".join(_uncomment(leading_comment_lines(node, source))))


def _uncomment(lines: Sequence[str]) -> List[str]:
    result: List[str] = []
    for line in lines:
        stripped = line.strip()
        if stripped.startswith("//"):
            content = stripped[2:]
        else:
            content = stripped
            if content.startswith("/*"):
                content = content[2:]
            if content.endswith("*/"):
                content = content[:-2]
            if content.startswith("*") and not content.startswith("*/"):
                content = content[1:]
        if "nolint:" in content or content.startswith("go:"):
            continue
        result.append(content.rstrip())
    while result and not result[-1].strip():
        result.pop()
    while result and not result[0].strip():
        result.pop(0)
    return result


def _iter_descendants(node: Node, types: Iterable[str]) -> Iterator[Node]:
    """Yield descendants of the given types without descending into matches."""
    wanted = tuple(types)
    for child in node.named_children:
        if child.type in wanted:
            yield child
        else:
            yield from _iter_descendants(child, wanted)


def _first_named(node: Node) -> Optional[Node]:
    for child in node.named_children:
        if child.type != "comment":
            return child
    return None


def _node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "`"):
        inner = value[1:-1]
        if value[0] == '"':
            inner = inner.replace('\\"', '"').replace("\\\\", "\\")
        return inner
    return value


__all__ = [
    "GoSourceParser",
    "PART_DEFINITIONS_SUFFIX",
    "default_import_alias",
    "leading_comment",
    "leading_comment_lines",
]
