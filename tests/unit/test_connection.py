"""
Unit tests for Connection message framing.

Each test uses a socketpair: one end wrapped in a Connection, the other
driven by the test as the peer.
"""

import socket
import threading
import time

import pytest

from greethttp.core.connection import Connection, ConnectionState


HEAD = b"GET / HTTP/1.1\r\nHost: localhost:7481\r\n\r\n"


@pytest.fixture
def pair():
    left, right = socket.socketpair()
    conn = Connection(socket=left, address=("127.0.0.1", 12345), timeout=2.0)
    yield conn, right
    conn.close()
    right.close()


def send_in_chunks(sock: socket.socket, data: bytes, size: int, close: bool = True):
    """Send `data` in small pieces from a background thread."""
    def _run():
        for i in range(0, len(data), size):
            sock.sendall(data[i:i + size])
            time.sleep(0.01)
        if close:
            sock.shutdown(socket.SHUT_WR)

    thread = threading.Thread(target=_run, daemon=True)
    thread.start()
    return thread


class TestReadMessage:
    """Tests for Connection.read_message()."""

    def test_head_only(self, pair):
        conn, peer = pair
        peer.sendall(HEAD)

        assert conn.read_message() == HEAD

    def test_head_split_across_chunks(self, pair):
        conn, peer = pair
        thread = send_in_chunks(peer, HEAD, 5, close=False)

        assert conn.read_message() == HEAD
        thread.join()

    def test_body_read_by_content_length(self, pair):
        conn, peer = pair
        body = b"x" * 5000
        message = b"HTTP/1.1 200\r\nContent-Length: 5000\r\n\r\n" + body
        thread = send_in_chunks(peer, message, 700, close=False)

        assert conn.read_message() == message
        thread.join()

    def test_content_length_header_is_case_insensitive(self, pair):
        conn, peer = pair
        message = b"HTTP/1.1 200\r\ncontent-length: 3\r\n\r\nabc"
        peer.sendall(message)

        assert conn.read_message() == message

    def test_invalid_content_length_reads_no_body(self, pair):
        conn, peer = pair
        peer.sendall(b"HTTP/1.1 200\r\nContent-Length: abc\r\n\r\n")

        assert conn.read_message() == b"HTTP/1.1 200\r\nContent-Length: abc\r\n\r\n"

    def test_short_body_returned_on_eof(self, pair):
        conn, peer = pair
        peer.sendall(b"HTTP/1.1 200\r\nContent-Length: 10\r\n\r\nabc")
        peer.shutdown(socket.SHUT_WR)

        assert conn.read_message() == b"HTTP/1.1 200\r\nContent-Length: 10\r\n\r\nabc"

    def test_partial_head_returned_on_eof(self, pair):
        conn, peer = pair
        peer.sendall(b"GET / HTTP/1.1\r\nHost: x")
        peer.shutdown(socket.SHUT_WR)

        assert conn.read_message() == b"GET / HTTP/1.1\r\nHost: x"

    def test_nothing_sent_returns_none(self, pair):
        conn, peer = pair
        peer.shutdown(socket.SHUT_WR)

        assert conn.read_message() is None

    def test_timeout(self):
        left, right = socket.socketpair()
        conn = Connection(socket=left, address=("127.0.0.1", 1), timeout=0.2)
        try:
            right.sendall(b"GET / HTTP/1.1\r\n")
            with pytest.raises(TimeoutError):
                conn.read_message()
        finally:
            conn.close()
            right.close()

    def test_too_large(self):
        left, right = socket.socketpair()
        conn = Connection(
            socket=left,
            address=("127.0.0.1", 1),
            buffer_size=1024,
            timeout=2.0,
            max_message_size=2048,
        )
        try:
            right.sendall(b"GET / HTTP/1.1\r\n" + b"X" * 4096)
            with pytest.raises(ValueError):
                conn.read_message()
        finally:
            conn.close()
            right.close()

    def test_state_is_reading(self, pair):
        conn, peer = pair
        peer.sendall(HEAD)
        conn.read_message()

        assert conn.state == ConnectionState.READING


class TestSendAndClose:
    """Tests for send_message() and close()."""

    def test_send_message(self, pair):
        conn, peer = pair

        assert conn.send_message(b"HTTP/1.1 404\r\n\r\n") is True
        assert peer.recv(1024) == b"HTTP/1.1 404\r\n\r\n"

    def test_close_signals_eof(self, pair):
        conn, peer = pair
        conn.close()

        assert conn.state == ConnectionState.CLOSED
        assert peer.recv(1024) == b""

    def test_close_is_idempotent(self, pair):
        conn, _ = pair
        conn.close()
        conn.close()

        assert conn.state == ConnectionState.CLOSED

    def test_send_after_close_fails(self, pair):
        conn, _ = pair
        conn.close()

        assert conn.send_message(b"data") is False

    def test_context_manager_closes(self):
        left, right = socket.socketpair()
        with Connection(socket=left, address=("127.0.0.1", 1), timeout=1.0) as conn:
            pass

        assert conn.state == ConnectionState.CLOSED
        right.close()
