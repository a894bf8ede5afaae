"""Pipeline driver: Validating, then either Aborted or Generating."""

from __future__ import annotations

import logging

from autoreset.core.models import ExpansionResult, TypeDeclaration
from autoreset.macro.diagnostics import validate_target
from autoreset.macro.emitter import emit_reset_method
from autoreset.macro.resolver import build_plan
from autoreset.macro.scanner import scan_bindings

logger = logging.getLogger(__name__)


def expand(declaration: TypeDeclaration) -> ExpansionResult:
    """Run the reset-method transformation over one declaration.

    Returns exactly one synthesized member, or no member and exactly one
    diagnostic. Pure and synchronous; ``declaration`` is not modified.
    """
    logger.debug("Validating %s (%s)", declaration.name, declaration.kind.value)
    diagnostic = validate_target(declaration)
    if diagnostic is not None:
        logger.debug("Aborted %s: %s", declaration.name, diagnostic.id)
        return ExpansionResult(declaration=declaration.name, diagnostics=(diagnostic,))

    bindings = scan_bindings(declaration)
    plan = build_plan(bindings)
    logger.debug(
        "Generating %s: %d of %d mutable bindings reset",
        declaration.name,
        len(plan),
        len(bindings),
    )
    return ExpansionResult(
        declaration=declaration.name,
        members=(emit_reset_method(plan),),
    )
