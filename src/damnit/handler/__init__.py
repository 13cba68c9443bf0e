"""Handler contract, adapters and the handler stack.

- Handler: base class keeping run/inspector/exception context
- CallbackHandler: adapts plain callables to the handler contract
- HandlerStack: ordered collection walked newest-first during dispatch
- LogHandler: reports exceptions through the logging module
"""

from damnit.handler.base import Disposition, Handler, HandlerInterface
from damnit.handler.callback import CallbackHandler, HandlerCallback
from damnit.handler.log import LogHandler
from damnit.handler.stack import HandlerStack, as_handler

__all__ = [
    "CallbackHandler",
    "Disposition",
    "Handler",
    "HandlerCallback",
    "HandlerInterface",
    "HandlerStack",
    "LogHandler",
    "as_handler",
]
