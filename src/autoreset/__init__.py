"""autoreset — generated reset methods for Python classes."""

from autoreset._version import __version__
from autoreset.core.errors import AutoResetError
from autoreset.macro.engine import expand
from autoreset.runtime import auto_resettable

__all__ = [
    "__version__",
    "AutoResetError",
    "auto_resettable",
    "expand",
]
