"""
=============================================================================
HTTP CLIENT
=============================================================================

Issues a single GET request and returns the decoded response.

    build_request(url, accept, accept_encoding)
            │
            ▼
       HTTPRequest ──encode_request()──► socket ──► server
                                                       │
       HTTPResponse ◄──parse_response()◄── socket ◄────┘
       (body already decompressed)

=============================================================================
FAILURES
=============================================================================

There is no retry. A connect, write or read failure is logged and the
exchange returns an empty HTTPResponse(); callers check
`response.is_empty`. A body that fails to decompress is not a failure:
the response comes back with the undecoded bytes (see decode_content).

=============================================================================
"""

import logging
import socket
from typing import Optional
from urllib.parse import urlsplit

from .config import ClientConfig
from .core.connection import Connection
from .http import headers as h
from .http.request import HTTPRequest, encode_request
from .http.response import HTTPResponse, parse_response


logger = logging.getLogger(__name__)


def build_request(url: str, accept: str = "", accept_encoding: str = h.ENCODING_NONE) -> HTTPRequest:
    """
    Build a GET request for a URL.

    The request target is the URL's path (or "/") plus its query string;
    the Host header is the URL's host[:port] exactly as written.

    Example:
        build_request("http://localhost:7481/greet/2306217481?name=Budi",
                      "application/json", "gzip")
        → HTTPRequest(method="GET", uri="/greet/2306217481?name=Budi",
                      version="HTTP/1.1", host="localhost:7481",
                      accept="application/json", accept_encoding="gzip")
    """
    parts = urlsplit(url)
    uri = parts.path or "/"
    if parts.query:
        uri += "?" + parts.query

    return HTTPRequest(
        method=h.METHOD_GET,
        uri=uri,
        version=h.HTTP_VERSION,
        host=parts.netloc,
        accept=accept,
        accept_encoding=accept_encoding,
    )


def exchange(request: HTTPRequest, conn: Connection) -> HTTPResponse:
    """
    Send a request on an open connection and read the response.

    Args:
        request: The request to send.
        conn: A connected Connection. It is not closed here.

    Returns:
        The decoded response, or an empty HTTPResponse on transport failure.
    """
    if not conn.send_message(encode_request(request)):
        logger.error(f"Error sending request to {request.host}")
        return HTTPResponse()

    try:
        raw_response = conn.read_message()
    except (OSError, ValueError) as e:
        logger.error(f"Error reading response: {e}")
        return HTTPResponse()

    if raw_response is None:
        logger.error("Error reading response: connection closed by server")
        return HTTPResponse()

    return parse_response(raw_response)


class HTTPClient:
    """
    Dials the server named in the request and performs one exchange.

    Usage:
        client = HTTPClient()
        response = client.get("http://localhost:7481/", accept="text/html")
        if not response.is_empty:
            print(response.status_code, response.data)
    """

    def __init__(self, config: Optional[ClientConfig] = None):
        self.config = config or ClientConfig()
        self.config.validate()

    def get(self, url: str, accept: str = "", accept_encoding: str = h.ENCODING_NONE) -> HTTPResponse:
        """Build a request for `url` and fetch it."""
        return self.fetch(build_request(url, accept, accept_encoding))

    def fetch(self, request: HTTPRequest) -> HTTPResponse:
        """
        Connect to request.host, exchange one message, close.

        Returns:
            The decoded response, or an empty HTTPResponse on failure.
        """
        address = self._resolve_address(request.host)
        if address is None:
            logger.error(f"Error connecting to server: invalid host {request.host!r}")
            return HTTPResponse()

        try:
            sock = socket.create_connection(address, timeout=self.config.timeout)
        except OSError as e:
            logger.error(f"Error connecting to server: {e}")
            return HTTPResponse()

        conn = Connection(
            socket=sock,
            address=address,
            buffer_size=self.config.buffer_size,
            timeout=self.config.timeout,
            max_message_size=self.config.max_message_size,
        )
        with conn:
            return exchange(request, conn)

    def _resolve_address(self, host: str) -> Optional[tuple]:
        # Reuse urlsplit's host/port handling (IPv6 brackets included).
        parts = urlsplit(f"//{host}")
        try:
            port = parts.port or self.config.default_port
        except ValueError:
            return None
        if not parts.hostname:
            return None
        return (parts.hostname, port)
