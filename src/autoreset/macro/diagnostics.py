"""Attachment-target validation and the diagnostics it produces."""

from __future__ import annotations

import enum

from autoreset.core.models import (
    AttachmentMarker,
    DeclKind,
    Diagnostic,
    FixIt,
    Severity,
    TypeDeclaration,
)

DIAGNOSTIC_DOMAIN = "autoreset"

ALLOWED_KINDS = (DeclKind.CLASS, DeclKind.STRUCT)


class DiagnosticMessage(enum.Enum):
    NOT_A_CLASS_NOR_A_STRUCT = "not_a_class_nor_a_struct"
    DUPLICATE_ATTACHMENT = "duplicate_attachment"

    @property
    def id(self) -> str:
        return f"{DIAGNOSTIC_DOMAIN}.{self.value}"

    @property
    def message(self) -> str:
        return _MESSAGES[self]

    @property
    def fix_it_message(self) -> str:
        return _FIX_IT_MESSAGES[self]


_MESSAGES = {
    DiagnosticMessage.NOT_A_CLASS_NOR_A_STRUCT: (
        "@auto_resettable can only be attached to classes and structures"
    ),
    DiagnosticMessage.DUPLICATE_ATTACHMENT: (
        "@auto_resettable is attached more than once to the same declaration"
    ),
}

_FIX_IT_MESSAGES = {
    DiagnosticMessage.NOT_A_CLASS_NOR_A_STRUCT: "Remove '@auto_resettable'",
    DiagnosticMessage.DUPLICATE_ATTACHMENT: "Remove the extra '@auto_resettable'",
}


def make_diagnostic(
    kind: DiagnosticMessage,
    anchor: AttachmentMarker,
    declaration: str = "",
) -> Diagnostic:
    """Build an error diagnostic whose fix-it removes ``anchor``."""
    return Diagnostic(
        id=kind.id,
        message=kind.message,
        anchor=anchor,
        severity=Severity.ERROR,
        fix_it=FixIt(message=kind.fix_it_message, replacement=""),
        declaration=declaration,
    )


def validate_target(declaration: TypeDeclaration) -> Diagnostic | None:
    """Return a diagnostic when the marker sits on anything but a class or struct."""
    if declaration.kind in ALLOWED_KINDS:
        return None
    return make_diagnostic(
        DiagnosticMessage.NOT_A_CLASS_NOR_A_STRUCT,
        declaration.attachment,
        declaration=declaration.name,
    )
