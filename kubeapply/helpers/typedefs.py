"""
Rudimentary type [re-]definitions for cross-versioned Python & mypy.

The old Python runtime does not support the generic syntax for some StdLib
classes (e.g. `logging.LoggerAdapter`), while mypy's type-sheds define them
as generics. This module defines them in a most suitable and reusable way.
"""
import logging
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    LoggerAdapter = logging.LoggerAdapter[Any]
else:
    LoggerAdapter = logging.LoggerAdapter

# As publicly exposed: we only promise that it is based on one of the built-in loggable classes.
Logger = Union[logging.Logger, LoggerAdapter]
