"""
=============================================================================
HEALTH CHECK HANDLER
=============================================================================

Liveness endpoint for load balancers and container orchestration.

=============================================================================
LIVENESS ONLY
=============================================================================

    ┌─────────────────────┬───────────────────────────────────────────────┐
    │ Probe Type          │ Purpose                                       │
    ├─────────────────────┼───────────────────────────────────────────────┤
    │ LIVENESS PROBE      │ "Is the process alive?"                       │
    │ GET /health         │ If fails → orchestrator RESTARTS the process  │
    └─────────────────────┴───────────────────────────────────────────────┘

The store is NOT consulted. A database outage makes the user endpoints
answer 500, but restarting this process would not fix it, so liveness
keeps answering 200.

Routing is by prefix, so GET /health/anything also lands here.

=============================================================================
"""

from ..http.response import Response, ok


LIVENESS_BODY = "Server is up and running"


class HealthHandler:
    """
    Health check endpoint handler.

    Usage:
        health = HealthHandler()
        dispatcher.add_route("GET /health", health.liveness)
    """

    def liveness(self, request: str) -> Response:
        """Always 200 with the fixed liveness body."""
        return ok(LIVENESS_BODY)
