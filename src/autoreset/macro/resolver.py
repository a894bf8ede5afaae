"""Default-value resolution for a single binding."""

from __future__ import annotations

from autoreset.core.models import ResetEntry, ResetPlan, VariableBinding

ABSENT_SENTINEL = "None"


def normalize_name(name: str) -> str:
    """Strip the trailing padding some tokenizers leave on identifiers."""
    return name.rstrip()


def resolve_reset_expression(binding: VariableBinding) -> str | None:
    """Decide what ``binding`` resets to, or ``None`` to leave it alone.

    The initializer always wins, even over an optional annotation, and is
    copied as-is so that side effects re-run on every reset. Without one,
    a type that admits absence resets to ``None``. Anything else is left
    for the caller to reset by hand.
    """
    if binding.initializer is not None:
        return binding.initializer
    if binding.annotation is not None and binding.annotation.admits_absence:
        return ABSENT_SENTINEL
    return None


def build_plan(bindings: list[VariableBinding]) -> ResetPlan:
    entries = []
    for binding in bindings:
        expression = resolve_reset_expression(binding)
        if expression is None:
            continue
        entries.append(ResetEntry(name=normalize_name(binding.name), expression=expression))
    return ResetPlan(entries=tuple(entries))
