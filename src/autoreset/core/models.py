"""Shared data models used across autoreset modules."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union


class DeclKind(enum.Enum):
    CLASS = "class"
    STRUCT = "struct"
    OTHER = "other"


class Mutability(enum.Enum):
    MUTABLE = "mutable"
    IMMUTABLE = "immutable"


class TypeTag(enum.Enum):
    PLAIN = "plain"
    OPTIONAL = "optional"
    IMPLICITLY_UNWRAPPED_OPTIONAL = "implicitly_unwrapped_optional"


class Severity(enum.Enum):
    ERROR = "error"


@dataclass(frozen=True)
class AttachmentMarker:
    """The decorator node that requested the transformation."""

    text: str
    line: int
    column: int
    end_line: int
    end_column: int


@dataclass(frozen=True)
class TypeAnnotation:
    """A declared type, kept as source text plus its optionality tag."""

    text: str
    tag: TypeTag = TypeTag.PLAIN

    @property
    def admits_absence(self) -> bool:
        return self.tag in (TypeTag.OPTIONAL, TypeTag.IMPLICITLY_UNWRAPPED_OPTIONAL)


@dataclass(frozen=True)
class VariableBinding:
    """One stored field. ``initializer`` is opaque source text, never evaluated."""

    name: str
    mutability: Mutability = Mutability.MUTABLE
    annotation: TypeAnnotation | None = None
    initializer: str | None = None
    line: int | None = None


@dataclass(frozen=True)
class FunctionMember:
    name: str
    line: int | None = None


@dataclass(frozen=True)
class NestedTypeMember:
    name: str
    line: int | None = None


@dataclass(frozen=True)
class OtherMember:
    description: str = ""
    line: int | None = None


Member = Union[VariableBinding, FunctionMember, NestedTypeMember, OtherMember]


@dataclass(frozen=True)
class TypeDeclaration:
    """A single declaration the marker was attached to."""

    name: str
    kind: DeclKind
    attachment: AttachmentMarker
    members: tuple[Member, ...] = ()
    kind_label: str = ""
    line: int | None = None


@dataclass(frozen=True)
class ResetEntry:
    name: str
    expression: str


@dataclass(frozen=True)
class ResetPlan:
    """Ordered (name, reset expression) pairs, in declaration order."""

    entries: tuple[ResetEntry, ...] = ()

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def names(self) -> list[str]:
        return [e.name for e in self.entries]


@dataclass(frozen=True)
class FixIt:
    message: str
    replacement: str = ""


@dataclass(frozen=True)
class Diagnostic:
    """A structured problem report anchored at the attachment node."""

    id: str
    message: str
    anchor: AttachmentMarker
    severity: Severity = Severity.ERROR
    fix_it: FixIt | None = None
    file: Path | None = None
    declaration: str = ""

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "message": self.message,
            "severity": self.severity.value,
            "anchor": {
                "text": self.anchor.text,
                "line": self.anchor.line,
                "column": self.anchor.column,
                "end_line": self.anchor.end_line,
                "end_column": self.anchor.end_column,
            },
        }
        if self.fix_it is not None:
            data["fixIt"] = {
                "message": self.fix_it.message,
                "replacement": self.fix_it.replacement,
            }
        return data


@dataclass(frozen=True)
class SynthesizedMember:
    """The generated no-argument reset method."""

    name: str
    plan: ResetPlan
    receiver: str = "self"

    @property
    def assignments(self) -> list[str]:
        return [f"{self.receiver}.{e.name} = {e.expression}" for e in self.plan]

    def render(self, indent: str = "    ", step: str = "    ") -> str:
        """Render the method as source text indented by ``indent``.

        Continuation lines of multi-line expressions are kept verbatim; they
        always sit inside brackets or string literals, where indentation is
        not significant or must not change.
        """
        lines = [f"{indent}def {self.name}({self.receiver}) -> None:"]
        body = self.assignments
        if not body:
            lines.append(f"{indent}{step}pass")
        for statement in body:
            lines.append(f"{indent}{step}{statement}")
        return "\n".join(lines) + "\n"


@dataclass(frozen=True)
class ExpansionResult:
    """Outcome of one pipeline run: members or a diagnostic, never both."""

    declaration: str
    members: tuple[SynthesizedMember, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def aborted(self) -> bool:
        return not self.members

    @property
    def method(self) -> SynthesizedMember | None:
        return self.members[0] if self.members else None


@dataclass
class DeclarationOutcome:
    """Host-side record of one marked declaration inside a file."""

    name: str
    line: int
    result: ExpansionResult


@dataclass
class ExpansionReport:
    """Everything the host learned while expanding one source file."""

    file: Path | None
    original: str
    expanded: str
    outcomes: list[DeclarationOutcome] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.expanded != self.original

    @property
    def error_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.is_error)

    @property
    def expanded_count(self) -> int:
        return sum(1 for o in self.outcomes if not o.result.aborted)


@dataclass
class WriteResult:
    """Result of writing an expansion or fix-it to disk."""

    success: bool
    message: str
    file: Path | None = None
    backup: Path | None = None
