"""Declaration scanner: pick the mutable stored fields out of a member list."""

from __future__ import annotations

from autoreset.core.models import Mutability, TypeDeclaration, VariableBinding


def scan_bindings(declaration: TypeDeclaration) -> list[VariableBinding]:
    """Return the mutable bindings of ``declaration`` in declaration order.

    Nested types are not entered; each one is expanded by its own run.
    Jointly declared bindings already arrive as separate members, left to
    right, so a flat filter keeps their order.
    """
    return [
        member
        for member in declaration.members
        if isinstance(member, VariableBinding)
        and member.mutability == Mutability.MUTABLE
    ]
