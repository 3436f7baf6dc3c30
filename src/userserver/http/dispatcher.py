"""
=============================================================================
ROUTE DISPATCHER
=============================================================================

Maps a raw request string to the handler that should answer it.

=============================================================================
PREFIX ROUTING
=============================================================================

There is no request parsing before routing. Each route is a literal
prefix of the request ("METHOD /path") and routes are tried in the order
they were registered:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        ROUTING FLOW                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   "GET /users/7 HTTP/1.1\r\n..."                                     │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌─────────────────────────────────────────────────────────────┐   │
    │   │  1. POST /users     → create        no                       │   │
    │   │  2. GET /users/     → fetch_one     MATCH, stop here         │   │
    │   │  3. GET /users      → fetch_all                              │   │
    │   │  4. PUT /users/     → update                                 │   │
    │   │  5. DELETE /users/  → delete                                 │   │
    │   │  6. GET /health     → liveness                               │   │
    │   └─────────────────────────────────────────────────────────────┘   │
    │        │                                                             │
    │        ▼                                                             │
    │   fetch_one(request)     (gets the full, unmodified request string) │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

First match wins, so a more specific prefix must be registered before a
broader one: "GET /users/" before "GET /users", or every single-user fetch
would be answered with the whole list.

Anything that matches no prefix (unknown path, lowercase method, garbage,
an empty read) gets the fixed 404 response without touching a handler.

=============================================================================
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from .response import Response, internal_error, not_found


logger = logging.getLogger(__name__)


# Handler: takes the raw request string, returns a (status_line, body) pair
Handler = Callable[[str], Response]


@dataclass(frozen=True)
class Route:
    """
    A request prefix bound to a handler.

        Route(prefix="GET /users/", handler=users.fetch_one, name="fetch_one")
    """

    prefix: str                      # "METHOD /path" the request must start with
    handler: Handler                 # Called with the full request string
    name: Optional[str] = None       # For logs and route listings

    def matches(self, request: str) -> bool:
        return request.startswith(self.prefix)


class Dispatcher:
    """
    Ordered prefix router.

    Routes are registered either directly or with the decorator:

        dispatcher = Dispatcher()
        dispatcher.add_route("GET /users/", fetch_one)

        @dispatcher.route("GET /health")
        def liveness(request):
            return ok("Server is up and running")

        response = dispatcher.dispatch("GET /health HTTP/1.1\\r\\n\\r\\n")
    """

    def __init__(self):
        self._routes: List[Route] = []

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(self, prefix: str, handler: Handler, name: Optional[str] = None) -> Route:
        """
        Append a route. It will be tried after every route added before it.

        Args:
            prefix: Literal request prefix, e.g. "DELETE /users/".
            handler: Function producing the response.
            name: Optional name (defaults to the handler's __name__).

        Returns:
            The registered Route.
        """
        route = Route(
            prefix=prefix,
            handler=handler,
            name=name or getattr(handler, "__name__", None),
        )
        self._routes.append(route)
        return route

    def route(self, prefix: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Decorator form of add_route(). Returns the handler unchanged."""
        def decorator(handler: Handler) -> Handler:
            self.add_route(prefix, handler, name)
            return handler
        return decorator

    # =========================================================================
    # MATCHING AND DISPATCH
    # =========================================================================

    def match(self, request: str) -> Optional[Route]:
        """Return the first route whose prefix starts the request, if any."""
        for route in self._routes:
            if route.matches(request):
                return route
        return None

    def dispatch(self, request: str) -> Response:
        """
        Route a request and return the handler's response.

        Returns the fixed 404 response when nothing matches. Handlers are
        expected to absorb their own errors; if one raises anyway the error
        is logged and answered with 500 so it never reaches the socket code.
        """
        route = self.match(request)

        if route is None:
            first_line = request.splitlines()[0] if request else ""
            logger.debug(f"No route for {first_line[:80]!r}")
            return not_found()

        logger.info(f"{route.prefix} request received")

        try:
            return route.handler(request)
        except Exception as e:
            logger.exception(f"Handler {route.name} failed: {e}")
            return internal_error()

    def routes(self) -> List[Route]:
        """Registered routes in priority order."""
        return list(self._routes)
