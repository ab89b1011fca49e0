"""
pytest configuration and fixtures.
"""

import socket
import threading
from typing import Generator
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from greethttp import HTTPServer, ServerConfig
from greethttp.http import HTTPRequest


NPM = "2306217481"
NAME = "Firaz"


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample request as sent by the client."""
    return (
        b"GET /greet/2306217481?name=Budi HTTP/1.1\r\n"
        b"Host: localhost:7481\r\n"
        b"Accept: application/json\r\n"
        b"Accept-Encoding: gzip\r\n"
        b"\r\n"
    )


@pytest.fixture
def config() -> ServerConfig:
    """Default test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        student_name=NAME,
        student_npm=NPM,
        timeout=5.0,
        log_level="WARNING",
    )


@pytest.fixture
def make_request():
    """Build an HTTPRequest with test defaults."""
    def _make(uri: str = "/", accept: str = "", accept_encoding: str = "none") -> HTTPRequest:
        return HTTPRequest(
            method="GET",
            uri=uri,
            version="HTTP/1.1",
            host="localhost:7481",
            accept=accept,
            accept_encoding=accept_encoding,
        )
    return _make


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False  # Not a test class, despite the name

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    @property
    def base_url(self) -> str:
        return f"http://127.0.0.1:{self.port}"

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"setup_logging": False},
            daemon=True,
        )
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def send_raw(self, data: bytes) -> bytes:
        """Send raw bytes and read until the server closes the connection."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=5.0) as s:
            s.sendall(data)
            chunks = []
            while True:
                chunk = s.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)


@pytest.fixture
def test_server(config: ServerConfig) -> Generator[TestServer, None, None]:
    """Create and start a test server on a free port."""
    test_srv = TestServer(HTTPServer(config))
    test_srv.start()

    yield test_srv

    test_srv.stop()


@pytest.fixture
def server_factory() -> Generator:
    """Start extra servers with custom settings; all are stopped afterwards."""
    started = []

    def _start(config: ServerConfig, handler=None) -> TestServer:
        test_srv = TestServer(HTTPServer(config, handler=handler))
        test_srv.start()
        started.append(test_srv)
        return test_srv

    yield _start

    for test_srv in started:
        test_srv.stop()
