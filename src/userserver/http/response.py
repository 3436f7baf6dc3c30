"""
=============================================================================
RESPONSE COMPOSITION
=============================================================================

A response is a (status_line, body) pair. The status line already carries
the blank line that ends the header block, so serializing is plain
concatenation:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     RESPONSE ON THE WIRE                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ┌─ STATUS LINE (+ headers) ──────────────────────────────────────┐ │
    │  │    HTTP/1.1 200 OK\r\n                                          │ │
    │  │    Content-Type: application/json\r\n                           │ │
    │  │    \r\n                                                         │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │  ┌─ BODY ─────────────────────────────────────────────────────────┐ │
    │  │    {"id":1,"name":"Ada","email":"ada@x.com"}                    │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

There is no Content-Length. The client reads until the server closes the
connection, which it always does after one response.

Only three status lines exist:

    200 OK                      success (JSON or plain confirmation body)
    404 NOT FOUND               unknown route, or missing user
    500 INTERNAL SERVER ERROR   anything else

=============================================================================
"""

from typing import NamedTuple


OK_RESPONSE = "HTTP/1.1 200 OK\r\nContent-Type: application/json\r\n\r\n"
NOT_FOUND = "HTTP/1.1 404 NOT FOUND\r\n\r\n"
INTERNAL_SERVER_ERROR = "HTTP/1.1 500 INTERNAL SERVER ERROR\r\n\r\n"

NOT_FOUND_BODY = "404 Not Found"
ERROR_BODY = "Error"


class Response(NamedTuple):
    """
    What a handler returns.

    A NamedTuple so handlers and tests can unpack it directly:

        status_line, body = handler(request)
    """

    status_line: str
    body: str

    @property
    def status(self) -> int:
        """Numeric status code parsed from the status line (200, 404, 500)."""
        return int(self.status_line.split(" ", 2)[1])

    def to_bytes(self) -> bytes:
        """Serialize for the socket: status line immediately followed by body."""
        return f"{self.status_line}{self.body}".encode("utf-8")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def ok(body: str) -> Response:
    """200 with the JSON content type."""
    return Response(OK_RESPONSE, body)


def not_found(body: str = NOT_FOUND_BODY) -> Response:
    """404. The default body is the one used for unmatched routes."""
    return Response(NOT_FOUND, body)


def internal_error(body: str = ERROR_BODY) -> Response:
    """500. Callers keep the generic body so no error detail leaks out."""
    return Response(INTERNAL_SERVER_ERROR, body)
