"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps a connected socket with message framing. Both sides use it: the
server reads a request from an accepted socket, the client reads a
response from the socket it dialed.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

TCP does NOT preserve message boundaries. One send() on the peer can
arrive as several recv() results, or several sends as one:

    Peer sends:
        "HTTP/1.1 200\r\nContent-Length: 83\r\n\r\n<83 bytes>"

    We might receive:
        recv() → "HTTP/1.1 200\r\nCont"
        recv() → "ent-Length: 83\r\n\r\n<40 bytes>"
        recv() → "<43 bytes>"

A single fixed-size recv() is therefore not enough to get a whole
message. read_message() keeps reading until the framing rules say the
message is complete:

    1. Read until the header terminator \r\n\r\n has arrived
    2. Read exactly Content-Length more bytes (0 if the header is absent)

=============================================================================
CONNECTION LIFECYCLE
=============================================================================

    NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSING ──► CLOSED

One message is read and one is written per connection; there is no
keep-alive.

=============================================================================
"""

import logging
import socket
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..http.headers import HEADER_TERMINATOR


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle states, used for logging and debugging."""
    NEW = "new"                # Just accepted or dialed
    READING = "reading"        # Reading a message
    PROCESSING = "processing"  # Message read, handler running
    WRITING = "writing"        # Sending a message
    CLOSING = "closing"        # Shutdown sequence in progress
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    A connected socket plus framing state.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    Connection Responsibilities                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  1. BUFFERED READING                                                 │
    │     └── Accumulate recv() chunks until a full message has arrived   │
    │                                                                      │
    │  2. SIZE LIMIT                                                       │
    │     └── Refuse to buffer more than max_message_size bytes           │
    │                                                                      │
    │  3. TIMEOUTS                                                         │
    │     └── A silent peer cannot hold the connection forever            │
    │                                                                      │
    │  4. GRACEFUL CLOSE                                                   │
    │     └── shutdown(SHUT_WR), drain, close                              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    Attributes:
        socket: The connected socket.
        address: Peer's (ip, port) tuple.
        id: Short identifier for log lines.
        state: Current connection state.
        created_at: Timestamp when the connection was accepted or dialed.
    """

    socket: socket.socket
    address: tuple

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    buffer_size: int = 2048
    timeout: Optional[float] = 30.0
    max_message_size: int = 10 * 1024 * 1024

    _buffer: bytes = field(default=b"", repr=False)

    def __post_init__(self):
        self.socket.setblocking(True)
        if self.timeout:
            self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0] if self.address else ""

    @property
    def age(self) -> float:
        """Connection age in seconds."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_message(self) -> Optional[bytes]:
        """
        Read one complete HTTP message from the socket.

        ┌─────────────────────────────────────────────────────────────────┐
        │   while no \r\n\r\n in buffer:                                  │
        │       recv() → buffer          (EOF: return what we have)      │
        │                                                                  │
        │   content_length = Content-Length header or 0                   │
        │                                                                  │
        │   while body shorter than content_length:                        │
        │       recv() → buffer          (EOF: stop early)               │
        │                                                                  │
        │   return head + exactly content_length body bytes               │
        └─────────────────────────────────────────────────────────────────┘

        If the peer closes before the header terminator arrives, the
        partial data is returned as-is; the parsers are lenient and will
        make what they can of it.

        Returns:
            The message bytes, or None if the peer closed without sending
            anything.

        Raises:
            TimeoutError: If the peer stops sending before the message is
                          complete.
            ValueError: If the message exceeds max_message_size.
        """
        self.state = ConnectionState.READING

        try:
            # ─────────────────────────────────────────────────────────────
            # STEP 1: Read until we have the complete head
            # ─────────────────────────────────────────────────────────────
            while HEADER_TERMINATOR not in self._buffer:
                chunk = self._recv()
                if not chunk:
                    return self._take(len(self._buffer)) or None
                self._append(chunk)

            header_end = self._buffer.find(HEADER_TERMINATOR)
            body_start = header_end + len(HEADER_TERMINATOR)

            # ─────────────────────────────────────────────────────────────
            # STEP 2: Read the body announced by Content-Length
            # ─────────────────────────────────────────────────────────────
            content_length = self._parse_content_length(self._buffer[:header_end])

            while len(self._buffer) - body_start < content_length:
                chunk = self._recv()
                if not chunk:
                    logger.debug(
                        f"[{self.id}] Peer closed after "
                        f"{len(self._buffer) - body_start}/{content_length} body bytes"
                    )
                    break
                self._append(chunk)

            return self._take(body_start + content_length)

        except socket.timeout:
            raise TimeoutError("Message read timeout")

    def _recv(self) -> bytes:
        try:
            return self.socket.recv(self.buffer_size)
        except (ConnectionResetError, BrokenPipeError):
            return b""  # Peer disconnected abruptly

    def _append(self, chunk: bytes) -> None:
        self._buffer += chunk
        if len(self._buffer) > self.max_message_size:
            raise ValueError(f"Message too large: {len(self._buffer)} bytes")

    def _take(self, size: int) -> bytes:
        data, self._buffer = self._buffer[:size], self._buffer[size:]
        return data

    def _parse_content_length(self, head: bytes) -> int:
        """
        Find Content-Length in a raw head.

        This only decides how many bytes to read; the parsers apply their
        own (case-sensitive) header rules afterwards.
        """
        for line in head.split(b"\r\n")[1:]:
            name, sep, value = line.partition(b":")
            if sep and name.strip().lower() == b"content-length":
                try:
                    return max(int(value.strip()), 0)
                except ValueError:
                    return 0
        return 0

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_message(self, data: bytes) -> bool:
        """
        Send a complete message.

        sendall() keeps writing until every byte is out; send() might stop
        halfway when the kernel buffer is full.

        Returns:
            True if the data was sent, False if the connection failed.
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

    def close(self):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR): send FIN, the peer sees end-of-stream
        2. Drain anything the peer still sent
        3. close(): release the file descriptor
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            pass  # socket.timeout is an OSError too

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
