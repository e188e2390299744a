__version__ = "0.1.0"

from .body import EMPTY, Binary, Body, Empty, Text
from .http import (
    StructuredError,
    bad_request,
    endpoint_not_found,
    found_false,
    internal_server_error,
    not_found,
    ok,
    success,
    unauthorized,
)
from .request import EventError, Request
from .response import ConversionError, EventResponse, Response, to_event
from .runtime import HandlerError, into_response, invoke, lambda_handler, load_handler
