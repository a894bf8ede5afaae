"""The reset-method transformation: validate, scan, resolve, emit."""

from autoreset.macro.engine import expand

__all__ = ["expand"]
