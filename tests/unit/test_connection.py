"""
Unit tests for the per-connection wrapper.
"""

import socket
import threading
import time

import pytest

from userserver.core.connection import DRAIN_TIMEOUT, Connection, ConnectionState, decode_request


@pytest.fixture
def socket_pair():
    """Connected (server side, client side) sockets."""
    server_side, client_side = socket.socketpair()
    yield server_side, client_side
    server_side.close()
    client_side.close()


def make_connection(sock, **kwargs) -> Connection:
    return Connection(socket=sock, address=("127.0.0.1", 50000), **kwargs)


class TestDecodeRequest:

    def test_valid_utf8(self):
        assert decode_request("GET /users/1 ☃".encode("utf-8")) == "GET /users/1 ☃"

    def test_invalid_suffix_dropped(self):
        assert decode_request(b"GET /health\xff\xfe") == "GET /health"

    def test_truncated_multibyte_dropped(self):
        assert decode_request("ab€".encode("utf-8")[:-1]) == "ab"

    def test_empty(self):
        assert decode_request(b"") == ""


class TestConnection:

    def test_read_request(self, socket_pair):
        server_side, client_side = socket_pair
        conn = make_connection(server_side)

        client_side.sendall(b"GET /health HTTP/1.1\r\n\r\n")
        assert conn.read_request() == "GET /health HTTP/1.1\r\n\r\n"
        assert conn.state == ConnectionState.PROCESSING

    def test_single_bounded_read(self, socket_pair):
        server_side, client_side = socket_pair
        conn = make_connection(server_side, buffer_size=8)

        client_side.sendall(b"GET /users HTTP/1.1\r\n\r\n")
        assert conn.read_request() == "GET /use"

    def test_zero_byte_read(self, socket_pair):
        server_side, client_side = socket_pair
        conn = make_connection(server_side)

        client_side.shutdown(socket.SHUT_WR)
        assert conn.read_request() == ""

    def test_read_timeout_raises(self, socket_pair):
        server_side, _ = socket_pair
        conn = make_connection(server_side, timeout=0.05)

        with pytest.raises(OSError):
            conn.read_request()

    def test_send_response(self, socket_pair):
        server_side, client_side = socket_pair
        conn = make_connection(server_side)

        assert conn.send_response(b"HTTP/1.1 200 OK\r\n\r\nhi")
        assert client_side.recv(1024) == b"HTTP/1.1 200 OK\r\n\r\nhi"

    def test_send_after_peer_closed(self, socket_pair):
        server_side, client_side = socket_pair
        conn = make_connection(server_side)
        client_side.close()

        # First write may still be buffered; keep writing until the error shows
        results = [conn.send_response(b"x" * 65536) for _ in range(20)]
        assert results[-1] is False

    def test_context_manager_closes(self, socket_pair):
        server_side, client_side = socket_pair

        with make_connection(server_side) as conn:
            conn.send_response(b"done")

        assert conn.state == ConnectionState.CLOSED
        assert client_side.recv(1024) == b"done"
        assert client_side.recv(1024) == b""  # FIN after the response

    def test_close_twice(self, socket_pair):
        server_side, _ = socket_pair
        conn = make_connection(server_side)
        conn.close()
        conn.close()
        assert conn.state == ConnectionState.CLOSED

    def test_client_ip(self, socket_pair):
        server_side, _ = socket_pair
        assert make_connection(server_side).client_ip == "127.0.0.1"

    def test_close_without_drain_is_immediate(self, socket_pair):
        server_side, client_side = socket_pair
        conn = make_connection(server_side)

        start = time.monotonic()
        conn.close(drain=False)

        assert time.monotonic() - start < 0.2
        assert client_side.recv(1024) == b""

    def test_drain_is_bounded_for_trickling_client(self, socket_pair):
        server_side, client_side = socket_pair
        conn = make_connection(server_side)
        stop = threading.Event()

        def trickle():
            # One byte every 0.1s for up to 3s
            for _ in range(30):
                if stop.is_set():
                    return
                try:
                    client_side.send(b"x")
                except OSError:
                    return
                time.sleep(0.1)

        sender = threading.Thread(target=trickle, daemon=True)
        sender.start()
        try:
            start = time.monotonic()
            conn.close()
            elapsed = time.monotonic() - start
        finally:
            stop.set()
            sender.join(timeout=5.0)

        assert elapsed < DRAIN_TIMEOUT + 0.5
        assert conn.state == ConnectionState.CLOSED
