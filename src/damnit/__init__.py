"""Process-wide interception of uncaught exceptions, warnings and fatal errors."""

from damnit.config import Settings, load_settings
from damnit.errors import DamnitError, InvalidHandlerError
from damnit.exception import ErrorException, ErrorLevel, Inspector, level_for_category, normalize
from damnit.handler import (
    CallbackHandler,
    Disposition,
    Handler,
    HandlerInterface,
    HandlerStack,
    LogHandler,
)
from damnit.hooks import ErrorRecord, HostHooks, SysHostHooks
from damnit.run import Run

__all__ = [
    "CallbackHandler",
    "DamnitError",
    "Disposition",
    "ErrorException",
    "ErrorLevel",
    "ErrorRecord",
    "Handler",
    "HandlerInterface",
    "HandlerStack",
    "HostHooks",
    "Inspector",
    "InvalidHandlerError",
    "LogHandler",
    "Run",
    "Settings",
    "SysHostHooks",
    "level_for_category",
    "load_settings",
    "normalize",
]
