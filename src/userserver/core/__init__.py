"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The networking plumbing: accepting connections, handing them to worker
threads, and the one read / one write each connection gets.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                                │
    │  • Creates the listening socket, binds, listens                     │
    │  • Runs the accept() loop in the calling thread                     │
    │  • SIGTERM/SIGINT trigger shutdown (main thread only)               │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ Hands off new connections
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          THREAD POOL                                 │
    │  • Fixed number of workers on a bounded queue                       │
    │  • Full queue → the connection is dropped unanswered                │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ Worker processes connection
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                  │
    │  • One bounded read, decoded to text                                │
    │  • One write of the response                                        │
    │  • Graceful close                                                   │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState, decode_request
from .thread_pool import ThreadPool

__all__ = [
    "SocketServer",     # Main TCP server - accepts connections
    "Connection",       # Wrapper for client socket - handles I/O
    "ConnectionState",  # Enum for connection lifecycle states
    "ThreadPool",       # Manages worker threads for concurrency
    "decode_request",   # Bytes read → request text
]
