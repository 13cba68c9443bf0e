"""Exception normalization and inspection."""

from damnit.exception.error_exception import (
    ErrorException,
    ErrorLevel,
    level_for_category,
    normalize,
)
from damnit.exception.inspector import Inspector

__all__ = [
    "ErrorException",
    "ErrorLevel",
    "Inspector",
    "level_for_category",
    "normalize",
]
