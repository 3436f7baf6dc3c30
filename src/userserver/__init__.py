"""
=============================================================================
USERSERVER
=============================================================================

A minimal user CRUD service over a hand-rolled TCP request/response
exchange, backed by a relational store.

    POST   /users        {"name": ..., "email": ...}  → User created
    GET    /users/<id>                                → {"id":..,"name":..,"email":..}
    GET    /users                                     → [ ... ]
    PUT    /users/<id>   {"name": ..., "email": ...}  → User updated
    DELETE /users/<id>                                → User deleted
    GET    /health                                    → Server is up and running

Every connection gets one read and at most one write. Requests are routed
by prefix, not parsed; responses are one of three fixed status lines
followed directly by the body.

=============================================================================
QUICK START
=============================================================================

    from userserver import UserServer, ServerConfig

    config = ServerConfig(port=8080, database_url="sqlite:///users.db")
    UserServer(config).run()

or from the shell:

    python -m userserver --port 8080 -d sqlite:///users.db

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .server import UserServer, create_app, create_dispatcher

__all__ = ["UserServer", "ServerConfig", "create_app", "create_dispatcher", "__version__"]
