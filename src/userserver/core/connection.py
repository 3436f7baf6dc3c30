"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket for the single exchange the server
performs on it: one read, at most one write, then close.

=============================================================================
ONE READ, NOT A FRAMED READ
=============================================================================

TCP is a byte stream. A request may arrive in several chunks:

    Client sends:   "GET /users HTTP/1.1\r\nHost: ...\r\n\r\n"
    recv() #1  →    "GET /use"
    recv() #2  →    "rs HTTP/1.1\r\nHost: ...\r\n\r\n"

This server does NOT reassemble. It calls recv() exactly once with a fixed
buffer (1024 bytes by default) and routes whatever came back. Requests are
small and clients send them in one write, so in practice the first chunk
holds the whole request; a request that does not fit is simply cut off.

=============================================================================
BYTES TO TEXT
=============================================================================

The read may end in the middle of a multi-byte UTF-8 character (or the
client may send junk). Only the valid UTF-8 prefix is kept:

    b"GET /users HTTP/1.1\r\n\r\n\xe2\x82"    (truncated "€")
                                  ────────
                                  dropped, not an error

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSED
               │                                     ▲
               └──────── read failed ────────────────┘
                         (nothing written)

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional
import uuid


logger = logging.getLogger(__name__)


# Upper bound on the whole post-response drain, in seconds
DRAIN_TIMEOUT = 0.5


class ConnectionState(Enum):
    """Connection lifecycle states (for logging and debugging)."""
    NEW = "new"                # Just accepted, nothing read yet
    READING = "reading"        # Waiting on the single recv()
    PROCESSING = "processing"  # Request handed to the dispatcher
    WRITING = "writing"        # Sending the response
    CLOSED = "closed"          # Socket released


def decode_request(data: bytes) -> str:
    """
    Decode the valid UTF-8 prefix of the bytes read.

    Everything from the first invalid byte on is dropped.

        decode_request(b"GET /health")       → "GET /health"
        decode_request(b"GET /h\\xffealth")   → "GET /h"
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        return data[:e.start].decode("utf-8")


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Unique connection identifier (for logging).
        state: Current connection state.
        created_at: Timestamp when connection was accepted.
        buffer_size: Size of the single read.
        timeout: Socket timeout in seconds, None for blocking.
    """

    # Required parameters
    socket: socket.socket
    address: tuple[str, int]

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    # Configuration (passed from ServerConfig)
    buffer_size: int = 1024
    timeout: Optional[float] = None

    def __post_init__(self):
        # Blocking mode; an explicit timeout only if one is configured
        self.socket.setblocking(True)
        if self.timeout:
            self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0] if self.address else ""

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> str:
        """
        Perform the single bounded read and decode it.

        Returns:
            The request text. Empty if the client closed without sending.

        Raises:
            OSError: If the read fails (reset, timeout, ...). The caller
                     abandons the connection without answering.
        """
        self.state = ConnectionState.READING
        data = self.socket.recv(self.buffer_size)
        logger.debug(f"[{self.id}] Read {len(data)} bytes from {self.client_ip}")
        self.state = ConnectionState.PROCESSING
        return decode_request(data)

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send the whole response.

        sendall() blocks until every byte is handed to the kernel; plain
        send() may stop halfway.

        Returns:
            True if send succeeded, False if the client went away.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self, drain: bool = True):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR): send FIN, the client sees end-of-response
        2. drain whatever the client still sends (e.g. the part of a large
           body beyond the single read), so close() does not turn into RST.
           The drain stops after DRAIN_TIMEOUT seconds in total, however
           slowly the client keeps sending.
        3. close(): release the file descriptor

        Args:
            drain: Skip step 2 when False (nothing was read or written).
        """
        if self.state == ConnectionState.CLOSED:
            return  # Already closed

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        if drain:
            self._drain(time.monotonic() + DRAIN_TIMEOUT)

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def _drain(self, deadline: float):
        """Discard incoming bytes until EOF, an error, or the deadline."""
        try:
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    logger.debug(f"[{self.id}] Drain deadline reached, closing anyway")
                    return
                self.socket.settimeout(remaining)
                if not self.socket.recv(1024):
                    return
        except OSError:
            pass  # Includes socket.timeout: nothing more is coming

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        """
        Allows:

            with conn:
                request = conn.read_request()
                conn.send_response(response)
            # Connection closed here, whatever happened
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
