"""Exceptions raised by the autoreset host layers."""

from __future__ import annotations

from autoreset.core.models import Diagnostic


class AutoResetError(Exception):
    """Base error for autoreset.

    When the error stems from a pipeline diagnostic, the diagnostic is kept
    on ``self.diagnostic`` so callers can surface the fix-it.
    """

    def __init__(self, message: str, diagnostic: Diagnostic | None = None):
        super().__init__(message)
        self.diagnostic = diagnostic


class FrontendError(AutoResetError):
    """The frontend could not build a declaration from the given source."""
