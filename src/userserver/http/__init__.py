"""
=============================================================================
HTTP MODULE
=============================================================================

The request/response layer of the server. It is deliberately thin:

    dispatcher   ordered prefix matching of the raw request string
    extractors   id segment and JSON body, the only request parsing done
    response     the three status lines and the (status_line, body) pair

=============================================================================
"""

from .dispatcher import Dispatcher, Handler, Route
from .extractors import extract_body, extract_id, parse_user_id, parse_user_payload
from .response import (
    ERROR_BODY,
    INTERNAL_SERVER_ERROR,
    NOT_FOUND,
    NOT_FOUND_BODY,
    OK_RESPONSE,
    Response,
    internal_error,
    not_found,
    ok,
)

__all__ = [
    # Dispatcher
    "Dispatcher",
    "Handler",
    "Route",
    # Extractors
    "extract_id",
    "extract_body",
    "parse_user_id",
    "parse_user_payload",
    # Response
    "Response",
    "OK_RESPONSE",
    "NOT_FOUND",
    "INTERNAL_SERVER_ERROR",
    "NOT_FOUND_BODY",
    "ERROR_BODY",
    "ok",
    "not_found",
    "internal_error",
]
