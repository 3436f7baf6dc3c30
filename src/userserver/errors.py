"""
=============================================================================
ERROR TYPES
=============================================================================

Every failure inside the server is expressed as one of these exceptions.
Each carries the HTTP status it maps to, so the handler boundary can turn
any of them into a response without a lookup table.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        ERROR → STATUS                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   RouteNotFound          404   no route, or id not in the store     │
    │     └── RowNotFound      404   query_one() found nothing            │
    │   MalformedRequest       500   bad id segment, bad JSON body        │
    │   StoreError             500                                         │
    │     ├── StoreUnavailable       could not connect                    │
    │     └── StoreOperationFailed   statement failed                     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

A malformed request is deliberately reported as 500, not 400: the wire
format only knows three status lines (200, 404, 500).

=============================================================================
"""


class UserServerError(Exception):
    """
    Base class for all server errors.

    Attributes:
        status_code: HTTP status the error maps to at the handler boundary.
    """

    status_code: int = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class RouteNotFound(UserServerError):
    """No route matched, or the addressed resource does not exist."""

    status_code = 404


class RowNotFound(RouteNotFound):
    """Raised by StoreClient.query_one() when no row matches."""


class MalformedRequest(UserServerError):
    """The request's id segment or body could not be parsed."""


class StoreError(UserServerError):
    """Base class for store failures."""


class StoreUnavailable(StoreError):
    """Opening a connection to the store failed."""


class StoreOperationFailed(StoreError):
    """A statement sent to the store failed."""
