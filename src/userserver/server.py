"""
=============================================================================
USER SERVER
=============================================================================

The orchestrator that ties the components together.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    USER SERVER ARCHITECTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │                        ┌─────────────────┐                          │
    │                        │   UserServer    │                          │
    │                        │ (Orchestrator)  │                          │
    │                        └────────┬────────┘                          │
    │                                 │                                    │
    │       ┌──────────────┬──────────┴─────────┬──────────────┐          │
    │       ▼              ▼                    ▼              ▼          │
    │ ┌────────────┐ ┌────────────┐     ┌────────────┐  ┌────────────┐   │
    │ │SocketServer│ │ ThreadPool │     │ Dispatcher │  │   Store    │   │
    │ │(Networking)│ │(Concurrency│     │ (Routing)  │  │ (Database) │   │
    │ └─────┬──────┘ └─────┬──────┘     └─────┬──────┘  └─────┬──────┘   │
    │       ▼              ▼                  ▼               │          │
    │ ┌────────────┐ ┌────────────┐     ┌────────────┐        │          │
    │ │ Connection │ │  Workers   │     │  Handlers  │ ◄──────┘          │
    │ └────────────┘ └────────────┘     └────────────┘                    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
REQUEST FLOW
=============================================================================

    1. SocketServer.accept()          new client socket → Connection
    2. ThreadPool.submit()            queue full → close, no response
    3. Connection.read_request()      one bounded read, UTF-8 prefix
                                      read failure → close, no response
    4. Dispatcher.dispatch()          prefix match → handler
    5. Handler                        extractors + one store connection
    6. Connection.send_response()     status_line + body
    7. Connection.close()

Exactly one response per successfully read request, never more.

=============================================================================
"""

import logging
from typing import Optional, Tuple

from .config import ServerConfig
from .core import SocketServer, ThreadPool, Connection
from .http import Dispatcher
from .handlers import UserHandlers, HealthHandler
from .store import Store
from .errors import StoreError


logger = logging.getLogger(__name__)


def create_dispatcher(store: Store) -> Dispatcher:
    """
    Build the dispatcher with the fixed route table.

    Order matters: "GET /users/" must be tested before "GET /users",
    otherwise every fetch-one would be answered by fetch-all.
    """
    users = UserHandlers(store)
    health = HealthHandler()

    dispatcher = Dispatcher()
    dispatcher.add_route("POST /users", users.create)
    dispatcher.add_route("GET /users/", users.fetch_one)
    dispatcher.add_route("GET /users", users.fetch_all)
    dispatcher.add_route("PUT /users/", users.update)
    dispatcher.add_route("DELETE /users/", users.delete)
    dispatcher.add_route("GET /health", health.liveness)
    return dispatcher


class UserServer:
    """
    User CRUD server.

    Example:
        server = UserServer(ServerConfig(port=8080))
        server.run()  # Blocks until SIGINT/SIGTERM or shutdown()
    """

    def __init__(self, config: Optional[ServerConfig] = None, store: Optional[Store] = None):
        """
        Args:
            config: Server configuration. Defaults if not provided.
            store: Store to use. Built from config.database_url if omitted.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # Fail-fast on invalid config

        self._store = store or Store(self.config.database_url)
        self._dispatcher = create_dispatcher(self._store)

        self._socket_server = SocketServer(self.config)
        self._thread_pool = ThreadPool(
            workers=self.config.workers,
            queue_size=self.config.queue_size,
        )

        self._running = False

    @property
    def store(self) -> Store:
        return self._store

    @property
    def address(self) -> Tuple[str, int]:
        """The bound (host, port); the real port once listening."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._running

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self, host: Optional[str] = None, port: Optional[int] = None):
        """
        Start the server (blocking).

        Args:
            host: Override config host.
            port: Override config port.
        """
        if host:
            self.config.host = host
        if port is not None:
            self.config.port = port

        self._running = True
        self._setup_logging()

        if self.config.init_schema:
            try:
                self._store.init_schema()
            except StoreError as e:
                # Keep serving: user routes answer 500 until the store is back
                logger.error(f"Could not prepare store at {self._store.url}: {e.message}")

        self._thread_pool.start()

        logger.info(f"Starting user server on {self.config.host}:{self.config.port}")

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def shutdown(self):
        """Request shutdown from another thread; run() returns once drained."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server is accepting connections."""
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("userserver").setLevel(level)

    def _shutdown(self):
        """
        Graceful shutdown.

        1. Stop accepting (the accept loop has already exited)
        2. Let queued and in-flight connections finish
        3. Release store resources
        """
        logger.info("Shutting down server...")
        self._running = False

        self._thread_pool.shutdown(wait=True, timeout=30.0)
        self._store.dispose()

        logger.info("Server stopped")

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Queue a connection for a worker thread.

        Called by SocketServer for each new connection.
        """
        submitted = self._thread_pool.submit(self._process_connection, args=(conn,))

        if not submitted:
            logger.warning(f"[{conn.id}] Thread pool full, dropping connection from {conn.client_ip}")
            conn.close(drain=False)

    def _process_connection(self, conn: Connection):
        """
        Process one connection (runs in a worker thread).

        Read once, dispatch, write once, close. A failed read closes the
        connection without writing anything.
        """
        with conn:
            try:
                request = conn.read_request()
            except OSError as e:
                logger.error(f"[{conn.id}] Failed to read request from {conn.client_ip}: {e}")
                return

            response = self._dispatcher.dispatch(request)
            conn.send_response(response.to_bytes())

            logger.debug(f"[{conn.id}] {response.status} ({len(response.body)} bytes body)")


def create_app(config: Optional[ServerConfig] = None, store: Optional[Store] = None) -> UserServer:
    """
    Create a user server.

    Example:
        app = create_app(ServerConfig(port=3000))
        app.run()
    """
    return UserServer(config, store)


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# 1. Component wiring: config, store, dispatcher, sockets, threads
# 2. Request flow: Accept → Read → Dispatch → Handle → Write → Close
# 3. Lifecycle: startup, schema creation, graceful shutdown
# =============================================================================
