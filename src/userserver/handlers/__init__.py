"""
=============================================================================
HANDLERS MODULE
=============================================================================

Request handlers: the business logic of the server.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    REQUEST → HANDLER → RESPONSE                     │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    raw request         Handler              (status_line, body)     │
    │   ┌───────────┐     ┌───────────┐          ┌──────────────┐         │
    │   │ GET       │     │ extract   │          │ 200 OK       │         │
    │   │ /users/7  │ ──▶ │ connect   │ ───────▶ │              │         │
    │   │ ...       │     │ query     │          │ {"id":7,...} │         │
    │   └───────────┘     └───────────┘          └──────────────┘         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    UserHandlers    create / fetch_one / fetch_all / update / delete
    HealthHandler   liveness

=============================================================================
"""

from .health import LIVENESS_BODY, HealthHandler
from .users import USER_NOT_FOUND, UserHandlers

__all__ = [
    "UserHandlers",
    "HealthHandler",
    "USER_NOT_FOUND",
    "LIVENESS_BODY",
]
