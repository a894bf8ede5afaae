"""Build declarations for the reset pipeline out of Python source.

The pipeline itself knows nothing about Python syntax; this module is the
adapter that turns ``ast`` nodes into :class:`TypeDeclaration` values.
Initializers are copied with :func:`ast.get_source_segment`, so every
fragment reaches the generated method exactly as written.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass, replace
from typing import Iterator

from autoreset.core.config import ExpandConfig
from autoreset.core.errors import FrontendError
from autoreset.core.models import (
    AttachmentMarker,
    DeclKind,
    FunctionMember,
    Member,
    Mutability,
    NestedTypeMember,
    OtherMember,
    TypeAnnotation,
    TypeDeclaration,
    TypeTag,
    VariableBinding,
)

DecoratedNode = (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)

# Calls that declare a record field rather than its value.
FIELD_SPECIFIERS = ("field", "attrib", "ib")


def dotted_tail(expr: ast.expr) -> str | None:
    """Return the last name of a (possibly called) dotted expression."""
    if isinstance(expr, ast.Call):
        expr = expr.func
    if isinstance(expr, ast.Name):
        return expr.id
    if isinstance(expr, ast.Attribute):
        return expr.attr
    return None


@dataclass
class MarkedNode:
    """A decorated definition carrying the marker, with its nesting depth."""

    node: ast.ClassDef | ast.FunctionDef | ast.AsyncFunctionDef
    depth: int


class DeclarationBuilder:
    """Translates decorated ``ast`` definitions into declarations."""

    def __init__(self, source: str, config: ExpandConfig | None = None):
        self.source = source
        self.lines = source.splitlines()
        self.config = config or ExpandConfig()

    # -- marker discovery -------------------------------------------------

    def markers(self, node: ast.AST) -> list[ast.expr]:
        decorators = getattr(node, "decorator_list", [])
        return [d for d in decorators if dotted_tail(d) in self.config.markers]

    def find_marked(self, tree: ast.AST) -> list[MarkedNode]:
        """All marked definitions in source order, nested ones included."""
        return list(self._walk(tree, 0))

    def _walk(self, node: ast.AST, depth: int) -> Iterator[MarkedNode]:
        for child in ast.iter_child_nodes(node):
            if isinstance(child, DecoratedNode) and self.markers(child):
                yield MarkedNode(node=child, depth=depth)
            yield from self._walk(child, depth + 1)

    def anchor(self, decorator: ast.expr) -> AttachmentMarker:
        """Span of a decorator, starting at its ``@``."""
        line_text = self.lines[decorator.lineno - 1] if decorator.lineno <= len(self.lines) else ""
        column = line_text.rfind("@", 0, decorator.col_offset)
        if column < 0:
            column = decorator.col_offset
        segment = ast.get_source_segment(self.source, decorator) or dotted_tail(decorator) or ""
        return AttachmentMarker(
            text=f"@{segment}",
            line=decorator.lineno,
            column=column,
            end_line=decorator.end_lineno or decorator.lineno,
            end_column=decorator.end_col_offset or decorator.col_offset,
        )

    # -- declaration building ---------------------------------------------

    def build(self, node: ast.ClassDef | ast.FunctionDef | ast.AsyncFunctionDef) -> TypeDeclaration:
        markers = self.markers(node)
        if not markers:
            raise FrontendError(f"'{node.name}' does not carry a reset marker")
        kind, label = self._kind(node)
        members: tuple[Member, ...] = ()
        if isinstance(node, ast.ClassDef):
            members = tuple(self._members(node, record=kind == DeclKind.STRUCT))
            if self._frozen(node):
                members = tuple(
                    replace(m, mutability=Mutability.IMMUTABLE)
                    if isinstance(m, VariableBinding) else m
                    for m in members
                )
        return TypeDeclaration(
            name=node.name,
            kind=kind,
            attachment=self.anchor(markers[0]),
            members=members,
            kind_label=label,
            line=node.lineno,
        )

    def _kind(self, node: ast.AST) -> tuple[DeclKind, str]:
        if isinstance(node, ast.AsyncFunctionDef):
            return DeclKind.OTHER, "async function"
        if isinstance(node, ast.FunctionDef):
            return DeclKind.OTHER, "function"
        bases = {dotted_tail(b) for b in node.bases}
        if bases & set(self.config.enum_bases):
            return DeclKind.OTHER, "enum"
        for decorator in node.decorator_list:
            tail = dotted_tail(decorator)
            if tail in self.config.struct_decorators:
                return DeclKind.STRUCT, tail
        return DeclKind.CLASS, "class"

    def _frozen(self, node: ast.ClassDef) -> bool:
        """Whether instances of ``node`` reject attribute assignment."""
        if {dotted_tail(b) for b in node.bases} & set(self.config.frozen_bases):
            return True
        for decorator in node.decorator_list:
            tail = dotted_tail(decorator)
            if tail in self.config.frozen_decorators:
                return True
            if tail in self.config.struct_decorators and isinstance(decorator, ast.Call):
                for kw in decorator.keywords:
                    if kw.arg == "frozen" and isinstance(kw.value, ast.Constant) and kw.value.value is True:
                        return True
        return False

    def _members(self, node: ast.ClassDef, record: bool = False) -> Iterator[Member]:
        for stmt in node.body:
            if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
                yield FunctionMember(name=stmt.name, line=stmt.lineno)
            elif isinstance(stmt, ast.ClassDef):
                yield NestedTypeMember(name=stmt.name, line=stmt.lineno)
            elif isinstance(stmt, ast.Assign):
                members = [
                    member
                    for target in stmt.targets
                    for member in self._split(target, stmt.value)
                ]
                if members:
                    yield from members
                else:
                    yield OtherMember(description="assignment", line=stmt.lineno)
            elif isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
                yield self._annotated(stmt, record)
            else:
                yield OtherMember(description=type(stmt).__name__, line=stmt.lineno)

    def _split(self, target: ast.expr, value: ast.expr | None) -> Iterator[Member]:
        """One binding per name in ``target``, left to right.

        Dunder names such as ``__slots__`` are class protocol attributes and
        come back as :class:`OtherMember`.

        Tuple targets only get per-name initializers when the value is a
        literal of the same arity without starred items.
        """
        if isinstance(target, ast.Name) and _is_dunder(target.id):
            yield OtherMember(description=target.id, line=target.lineno)
            return
        if isinstance(target, ast.Name):
            yield VariableBinding(
                name=target.id,
                initializer=self._segment(value) if value is not None else None,
                line=target.lineno,
            )
            return
        if isinstance(target, (ast.Tuple, ast.List)):
            if (
                isinstance(value, (ast.Tuple, ast.List))
                and len(value.elts) == len(target.elts)
                and not any(isinstance(e, ast.Starred) for e in value.elts)
            ):
                for sub_target, sub_value in zip(target.elts, value.elts):
                    yield from self._split(sub_target, sub_value)
            else:
                for sub_target in target.elts:
                    if isinstance(sub_target, ast.Starred):
                        sub_target = sub_target.value
                    yield from self._split(sub_target, None)

    def _annotated(self, stmt: ast.AnnAssign, record: bool = False) -> Member:
        if _is_dunder(stmt.target.id):
            return OtherMember(description=stmt.target.id, line=stmt.lineno)
        annotation = stmt.annotation
        if _is_string(annotation):
            parsed = _parse_string_annotation(annotation)
            if parsed is not None:
                annotation = parsed
        head = _subscript_head(annotation)
        if head in ("ClassVar", "KW_ONLY", "InitVar"):
            return OtherMember(description=head, line=stmt.lineno)

        mutability = Mutability.MUTABLE
        declared = annotation
        if head == "Final":
            mutability = Mutability.IMMUTABLE
            declared = annotation.slice if isinstance(annotation, ast.Subscript) else None

        text = self._segment(stmt.annotation) or ""
        tag = classify_annotation(declared) if declared is not None else TypeTag.PLAIN
        return VariableBinding(
            name=stmt.target.id,
            mutability=mutability,
            annotation=TypeAnnotation(text=text, tag=tag),
            initializer=self._initializer(stmt.value, record),
            line=stmt.lineno,
        )

    def _initializer(self, value: ast.expr | None, record: bool) -> str | None:
        """Source of the default value; record field specifiers are unwrapped."""
        if value is None:
            return None
        if record and isinstance(value, ast.Call) and dotted_tail(value) in FIELD_SPECIFIERS:
            keywords = {kw.arg: kw.value for kw in value.keywords if kw.arg}
            if "default" in keywords:
                return self._segment(keywords["default"])
            for name in ("default_factory", "factory"):
                if name in keywords:
                    return f"{self._segment(keywords[name])}()"
            return None
        return self._segment(value)

    def _segment(self, node: ast.AST) -> str | None:
        segment = ast.get_source_segment(self.source, node)
        if segment is None:
            return ast.unparse(node)
        return segment


def _is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


def _is_string(expr: ast.expr) -> bool:
    return isinstance(expr, ast.Constant) and isinstance(expr.value, str)


def _parse_string_annotation(expr: ast.Constant) -> ast.expr | None:
    try:
        return ast.parse(expr.value.strip(), mode="eval").body
    except SyntaxError:
        return None


def _subscript_head(expr: ast.expr) -> str | None:
    if isinstance(expr, ast.Subscript):
        return dotted_tail(expr.value)
    return dotted_tail(expr)


def _is_none(expr: ast.expr) -> bool:
    return isinstance(expr, ast.Constant) and expr.value is None


def classify_annotation(expr: ast.expr) -> TypeTag:
    """Tag an annotation by whether (and how) it admits ``None``."""
    if _is_string(expr):
        parsed = _parse_string_annotation(expr)
        return classify_annotation(parsed) if parsed is not None else TypeTag.PLAIN
    if _is_none(expr):
        return TypeTag.OPTIONAL
    if isinstance(expr, ast.BinOp) and isinstance(expr.op, ast.BitOr):
        left = classify_annotation(expr.left)
        right = classify_annotation(expr.right)
        if TypeTag.OPTIONAL in (left, right):
            return TypeTag.OPTIONAL
        if TypeTag.IMPLICITLY_UNWRAPPED_OPTIONAL in (left, right):
            return TypeTag.IMPLICITLY_UNWRAPPED_OPTIONAL
        return TypeTag.PLAIN
    if isinstance(expr, ast.Subscript):
        head = dotted_tail(expr.value)
        if head == "Optional":
            return TypeTag.OPTIONAL
        if head == "Union":
            members = expr.slice.elts if isinstance(expr.slice, ast.Tuple) else [expr.slice]
            tags = [classify_annotation(m) for m in members]
            if TypeTag.OPTIONAL in tags:
                return TypeTag.OPTIONAL
            if TypeTag.IMPLICITLY_UNWRAPPED_OPTIONAL in tags:
                return TypeTag.IMPLICITLY_UNWRAPPED_OPTIONAL
            return TypeTag.PLAIN
        if head == "Annotated":
            first = expr.slice.elts[0] if isinstance(expr.slice, ast.Tuple) else expr.slice
            return classify_annotation(first)
        return TypeTag.PLAIN
    if dotted_tail(expr) == "Any":
        return TypeTag.IMPLICITLY_UNWRAPPED_OPTIONAL
    return TypeTag.PLAIN


def declaration_from_source(
    source: str,
    name: str | None = None,
    config: ExpandConfig | None = None,
) -> TypeDeclaration:
    """Build the declaration for the first top-level marked definition.

    With ``name`` given, the top-level definition of that name is used.
    Raises :class:`FrontendError` when no such marked definition exists.
    """
    try:
        tree = ast.parse(source)
    except SyntaxError as exc:
        raise FrontendError(f"Cannot parse declaration source: {exc}") from exc

    builder = DeclarationBuilder(source, config)
    for node in tree.body:
        if not isinstance(node, DecoratedNode):
            continue
        if name is not None and node.name != name:
            continue
        if builder.markers(node):
            return builder.build(node)
    target = f"'{name}'" if name else "any definition"
    raise FrontendError(f"No reset marker found on {target}")
