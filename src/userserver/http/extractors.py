"""
=============================================================================
FIELD EXTRACTORS
=============================================================================

Pure functions that pull the two things handlers need out of the raw
request string. No full HTTP parsing happens anywhere in the server;
these are the only places that look inside a request.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     WHAT GETS EXTRACTED                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    PUT /users/42 HTTP/1.1\r\n                                        │
    │             ──┬                                                      │
    │               └── extract_id()      → "42"                           │
    │    Host: localhost\r\n                                               │
    │    Content-Type: application/json\r\n                                │
    │    \r\n                      ← blank-line separator                  │
    │    {"name": "Ada", "email": "ada@x.com"}                             │
    │    ─────────────────┬───────────────────                             │
    │                     └── extract_body()  → the JSON text              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

extract_* return text and never fail. parse_* turn that text into typed
values and raise MalformedRequest when they cannot.

=============================================================================
"""

import re

from pydantic import ValidationError

from ..errors import MalformedRequest
from ..models import UserPayload


# Ids are store INTEGER columns: signed 32-bit.
_ID_PATTERN = re.compile(r"[+-]?[0-9]+")
_ID_MIN = -(2 ** 31)
_ID_MAX = 2 ** 31 - 1

_SEPARATORS = ("\r\n\r\n", "\n\n")


def extract_id(request: str) -> str:
    """
    Return the last path segment of the request target.

        "GET /users/42 HTTP/1.1\\r\\n..."  → "42"
        "GET /users/ HTTP/1.1\\r\\n..."    → ""
        "GET"                             → ""

    The request target is the token after the method on the request line,
    i.e. the one before the protocol token.
    """
    request_line = request.splitlines()[0] if request else ""
    parts = request_line.split()
    if len(parts) < 2:
        return ""
    return parts[1].rsplit("/", 1)[-1]


def parse_user_id(request: str) -> int:
    """
    Extract the id segment and parse it as an integer.

    Raises:
        MalformedRequest: If the segment is not a base-10 integer in range.
    """
    segment = extract_id(request)
    if not _ID_PATTERN.fullmatch(segment):
        raise MalformedRequest(f"Invalid user id: {segment!r}")

    user_id = int(segment)
    if not _ID_MIN <= user_id <= _ID_MAX:
        raise MalformedRequest(f"User id out of range: {segment!r}")
    return user_id


def extract_body(request: str) -> str:
    """
    Return everything after the first blank line.

    Raises:
        MalformedRequest: If the request has no blank-line separator.
    """
    for separator in _SEPARATORS:
        _, found, body = request.partition(separator)
        if found:
            return body
    raise MalformedRequest("Request has no body")


def parse_user_payload(request: str) -> UserPayload:
    """
    Deserialize the request body into a UserPayload.

    Raises:
        MalformedRequest: If the body is absent, not JSON, not an object,
                          or lacks a string "name" or "email".
    """
    body = extract_body(request)
    try:
        return UserPayload.model_validate_json(body)
    except ValidationError as e:
        raise MalformedRequest(f"Invalid user payload: {e.error_count()} error(s)") from e
