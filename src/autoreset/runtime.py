"""The ``@auto_resettable`` decorator.

Applied to a class, it reads the class source, runs the reset pipeline on
it and attaches the generated ``auto_reset`` method::

    from autoreset import auto_resettable

    @auto_resettable
    class Fixture:
        name = "default"
        retries: Final = 3
        session: Session | None
        count: int

        def reset(self):
            self.auto_reset()
            self.count = 0

``count`` has neither a default nor an optional type, so ``reset`` handles
it by hand. Initializers are evaluated again on every ``auto_reset`` call,
in the globals of the module that defines the class.

Applied to anything else it raises :class:`AutoResetError` carrying the
diagnostic and its fix-it. ``python -m autoreset expand`` performs the same
transformation ahead of time, on source files.
"""

from __future__ import annotations

import inspect
import logging
import sys
import textwrap
import types
from typing import Any, TypeVar

from autoreset.core.errors import AutoResetError, FrontendError
from autoreset.core.models import SynthesizedMember
from autoreset.host.frontend import declaration_from_source
from autoreset.macro.engine import expand

logger = logging.getLogger(__name__)

T = TypeVar("T")


def auto_resettable(target: T | None = None) -> Any:
    """Attach ``auto_reset`` to a class. Usable bare or called with no arguments."""
    if target is None:
        return auto_resettable
    return _attach(target)


def _attach(target: T) -> T:
    name = getattr(target, "__name__", repr(target))
    try:
        source = textwrap.dedent(inspect.getsource(target))
    except (OSError, TypeError) as exc:
        raise AutoResetError(f"Cannot read the source of {name}: {exc}") from exc

    try:
        declaration = declaration_from_source(source, name=name)
    except FrontendError as exc:
        raise AutoResetError(str(exc)) from exc

    result = expand(declaration)
    if result.method is None:
        diagnostic = result.diagnostics[0]
        fix = f" ({diagnostic.fix_it.message})" if diagnostic.fix_it else ""
        raise AutoResetError(f"{diagnostic.message}{fix}", diagnostic=diagnostic)

    setattr(target, result.method.name, _compile_method(target, result.method))
    logger.debug("Attached %s to %s", result.method.name, name)
    return target


def _compile_method(cls: type, member: SynthesizedMember) -> types.FunctionType:
    # The method is compiled inside a class of the same name so private
    # ``__name`` fields get mangled, then bound to the live module globals
    # so names defined after the class still resolve.
    module = sys.modules.get(cls.__module__)
    module_globals = vars(module) if module is not None else {}
    source = f"class {cls.__name__}:\n{member.render()}"
    module_code = compile(source, f"<auto_reset of {cls.__qualname__}>", "exec")
    body = _nested_code(module_code, cls.__name__)
    method = types.FunctionType(_nested_code(body, member.name), module_globals, member.name)
    method.__qualname__ = f"{cls.__qualname__}.{member.name}"
    method.__module__ = cls.__module__
    method.__annotations__ = {"return": None}
    return method


def _nested_code(code: types.CodeType, name: str) -> types.CodeType:
    for const in code.co_consts:
        if isinstance(const, types.CodeType) and const.co_name == name:
            return const
    raise AutoResetError(f"No code object named {name!r} in {code.co_name!r}")
