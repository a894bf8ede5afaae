"""Assembly of the synthesized reset method."""

from __future__ import annotations

from autoreset.core.models import ResetPlan, SynthesizedMember

RESET_METHOD_NAME = "auto_reset"


def emit_reset_method(plan: ResetPlan) -> SynthesizedMember:
    # An empty plan still yields a method so call sites always resolve.
    return SynthesizedMember(name=RESET_METHOD_NAME, plan=plan)
