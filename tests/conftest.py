"""
pytest configuration and fixtures.
"""

import socket
import threading
from typing import Callable, Generator, List, Optional

import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from userserver import ServerConfig, UserServer, create_dispatcher
from userserver.handlers import UserHandlers
from userserver.http import Dispatcher
from userserver.store import Store


def build_request(method: str, path: str, body: Optional[str] = None) -> str:
    """Raw request text as a client would send it."""
    lines = [f"{method} {path} HTTP/1.1", "Host: localhost:8080"]
    if body is not None:
        lines.append("Content-Type: application/json")
        lines.append(f"Content-Length: {len(body.encode('utf-8'))}")
    return "\r\n".join(lines) + "\r\n\r\n" + (body or "")


@pytest.fixture
def make_request():
    """The build_request helper, for tests that build many requests."""
    return build_request


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """SQLite file in a per-test directory."""
    return f"sqlite:///{tmp_path / 'users.db'}"


@pytest.fixture
def store(database_url: str) -> Generator[Store, None, None]:
    """Store with the users table created."""
    store = Store(database_url)
    store.init_schema()
    yield store
    store.dispose()


@pytest.fixture
def unavailable_store(tmp_path: Path) -> Generator[Store, None, None]:
    """Store whose every connection attempt fails (parent directory missing)."""
    store = Store(f"sqlite:///{tmp_path / 'missing' / 'users.db'}")
    yield store
    store.dispose()


@pytest.fixture
def users(store: Store) -> UserHandlers:
    return UserHandlers(store)


@pytest.fixture
def dispatcher(store: Store) -> Dispatcher:
    return create_dispatcher(store)


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


class TestServer:
    """Test server helper that runs in a background thread."""

    def __init__(self, server: UserServer):
        self.server = server
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=10.0)

    def send(self, data: bytes) -> str:
        """Send raw bytes, then read until the server closes the connection."""
        with socket.create_connection(('127.0.0.1', self.port), timeout=5.0) as s:
            s.sendall(data)
            chunks = []
            while True:
                chunk = s.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks).decode("utf-8")

    def request(self, method: str, path: str, body: Optional[str] = None) -> str:
        return self.send(build_request(method, path, body).encode("utf-8"))


@pytest.fixture
def server_factory(database_url: str) -> Generator[Callable[..., TestServer], None, None]:
    """
    Start servers on OS-assigned ports, backed by a SQLite file.

    Keyword arguments override the ServerConfig defaults used here.
    Every server started is stopped at teardown.
    """
    started: List[TestServer] = []

    def start(**overrides) -> TestServer:
        settings = dict(
            host="127.0.0.1",
            port=0,  # Let OS pick a free port
            workers=2,
            timeout=5.0,
            database_url=database_url,
            log_level="WARNING",
        )
        settings.update(overrides)

        test_srv = TestServer(UserServer(ServerConfig(**settings)))
        test_srv.start()
        started.append(test_srv)
        return test_srv

    yield start

    for test_srv in started:
        test_srv.stop()


@pytest.fixture
def test_server(server_factory) -> TestServer:
    """A running server with the default test settings."""
    return server_factory()
