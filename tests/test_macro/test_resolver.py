"""Tests for scanning and default-value resolution."""

from __future__ import annotations

from autoreset.core.models import (
    AttachmentMarker,
    DeclKind,
    FunctionMember,
    Mutability,
    TypeAnnotation,
    TypeDeclaration,
    TypeTag,
    VariableBinding,
)
from autoreset.macro.resolver import (
    ABSENT_SENTINEL,
    build_plan,
    normalize_name,
    resolve_reset_expression,
)
from autoreset.macro.scanner import scan_bindings


class TestScanBindings:
    def test_keeps_only_mutable_bindings_in_order(self):
        a = VariableBinding("a", initializer="1")
        b = VariableBinding("b", mutability=Mutability.IMMUTABLE, initializer="2")
        c = VariableBinding("c")
        declaration = TypeDeclaration(
            name="T",
            kind=DeclKind.CLASS,
            attachment=AttachmentMarker("@auto_resettable", 1, 0, 1, 16),
            members=(a, FunctionMember("f"), b, c),
        )
        assert scan_bindings(declaration) == [a, c]


class TestResolve:
    def test_initializer_is_returned_verbatim(self):
        fragment = "{\n        'k': 1,\n    }"
        assert resolve_reset_expression(VariableBinding("m", initializer=fragment)) == fragment

    def test_optional_tags_resolve_to_sentinel(self):
        for tag in (TypeTag.OPTIONAL, TypeTag.IMPLICITLY_UNWRAPPED_OPTIONAL):
            binding = VariableBinding("x", annotation=TypeAnnotation("T", tag))
            assert resolve_reset_expression(binding) == ABSENT_SENTINEL == "None"

    def test_no_annotation_no_initializer_is_skipped(self):
        assert resolve_reset_expression(VariableBinding("x")) is None

    def test_normalize_name(self):
        assert normalize_name("value  ") == "value"
        assert normalize_name("value") == "value"

    def test_build_plan_skips_unresolvable(self):
        plan = build_plan([
            VariableBinding("a", initializer="1"),
            VariableBinding("b", annotation=TypeAnnotation("int")),
            VariableBinding("c ", annotation=TypeAnnotation("int | None", TypeTag.OPTIONAL)),
        ])
        assert plan.names == ["a", "c"]
        assert [e.expression for e in plan] == ["1", "None"]
