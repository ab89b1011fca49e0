"""
=============================================================================
HTTP RESPONSE MODEL, ENCODER AND PARSER
=============================================================================

The server serializes an HTTPResponse into bytes; the client parses those
bytes back and undoes any content coding.

=============================================================================
RESPONSE WIRE FORMAT
=============================================================================

    HTTP/1.1 200\r\n                         ← Status line (no reason phrase)
    Content-Type: application/json\r\n       ← Only if non-empty
    Content-Encoding: gzip\r\n               ← Only if non-empty and not "none"
    Content-Length: 83\r\n                   ← Only if > 0
    \r\n                                     ← Empty line
    <83 bytes of (compressed) body>          ← Appended verbatim

A 404 is therefore just:

    HTTP/1.1 404\r\n
    \r\n

=============================================================================
BINARY BODIES
=============================================================================

A gzip or deflate body is arbitrary binary data, and it can easily
contain the bytes 0x0D 0x0A (CRLF). The parser splits the head on CRLF
but treats everything after the first empty line as opaque bytes:

    b"HTTP/1.1 200\r\nContent-Length: 5\r\n\r\n\x1f\r\n\x8b\x00"
                                          ▲   └──────┬───────┘
                                          │     body, kept byte-for-byte
                                   first empty line

Working on bytes (never on a decoded str) is what keeps the body intact.

=============================================================================
"""

from dataclasses import dataclass

from . import headers as h
from .encoding import decode_content


@dataclass
class HTTPResponse:
    """
    An HTTP response.

    Created by the route handler, mutated by content negotiation (body
    replaced with compressed bytes, encoding and length updated), then
    serialized. On the client it is rebuilt by ResponseParser.

    Attributes:
        version: Protocol version, "HTTP/1.1".
        status_code: "200", "404", ... May carry a reason phrase when
                     parsed from a peer that sends one ("200 OK").
        content_type: Media type of the body.
        content_encoding: "gzip", "deflate", "" (identity, header omitted)
                          or "none" (header was absent when parsed).
        content_length: Byte count of the body as sent (after encoding).
        data: The body.
    """

    version: str = ""
    status_code: str = ""
    content_type: str = ""
    content_encoding: str = ""
    content_length: int = 0
    data: bytes = b""

    @property
    def is_empty(self) -> bool:
        """True for the zero-valued response returned by a failed exchange."""
        return not self.version and not self.status_code


def encode_response(response: HTTPResponse) -> bytes:
    """
    Serialize a response to wire bytes.

    Headers are emitted conditionally; a response with nothing but a
    version and status produces a status line and an empty line.

    Args:
        response: The (already negotiated) response.

    Returns:
        Status line, headers, empty line and the body bytes.
    """
    lines = [f"{response.version} {response.status_code}"]

    if response.content_type:
        lines.append(f"{h.CONTENT_TYPE} {response.content_type}")
    if response.content_encoding and response.content_encoding != h.ENCODING_NONE:
        lines.append(f"{h.CONTENT_ENCODING} {response.content_encoding}")
    if response.content_length > 0:
        lines.append(f"{h.CONTENT_LENGTH} {response.content_length}")

    head = (h.CRLF.join(lines) + h.CRLF + h.CRLF).encode("utf-8")
    return head + response.data


class ResponseParser:
    """
    Parses raw response bytes into HTTPResponse objects.

    Like RequestParser, this never raises: missing or malformed fields are
    left at their defaults.
    """

    def __init__(self, decode: bool = True):
        """
        Args:
            decode: Undo the declared Content-Encoding on the body.
                    Pass False to keep the body exactly as received.
        """
        self.decode = decode

    def parse(self, data: bytes) -> HTTPResponse:
        """
        Parse a response.

        Args:
            data: Raw response bytes.

        Returns:
            The parsed response, body decoded unless disabled.
        """
        lines = data.split(h.CRLF_BYTES)
        response = HTTPResponse(content_encoding=h.ENCODING_NONE)

        self._parse_status_line(lines[0].decode("utf-8", errors="replace"), response)

        # ─────────────────────────────────────────────────────────────────
        # HEADER BLOCK: scan until the first empty line
        # ─────────────────────────────────────────────────────────────────
        body_index = None
        for i, raw_line in enumerate(lines[1:], start=1):
            if not raw_line:
                body_index = i + 1
                break
            self._parse_header(raw_line.decode("utf-8", errors="replace"), response)

        # ─────────────────────────────────────────────────────────────────
        # BODY: rejoin the remaining pieces with the separator they were
        # split on, which restores the original bytes exactly
        # ─────────────────────────────────────────────────────────────────
        if body_index is not None and body_index < len(lines):
            body = h.CRLF_BYTES.join(lines[body_index:])
            if self.decode:
                body = decode_content(body, response.content_encoding)
            response.data = body

        return response

    def _parse_status_line(self, line: str, response: HTTPResponse) -> None:
        parts = line.split(" ", 2)
        if len(parts) < 2:
            return

        response.version = parts[0]
        response.status_code = parts[1]
        if len(parts) == 3:
            response.status_code += " " + parts[2]

    def _parse_header(self, line: str, response: HTTPResponse) -> None:
        if line.startswith(h.CONTENT_TYPE):
            response.content_type = h.strip_prefix(line, h.CONTENT_TYPE)
        elif line.startswith(h.CONTENT_ENCODING):
            response.content_encoding = h.strip_prefix(line, h.CONTENT_ENCODING)
        elif line.startswith(h.CONTENT_LENGTH):
            try:
                response.content_length = int(h.strip_prefix(line, h.CONTENT_LENGTH))
            except ValueError:
                pass  # Leave at 0


def parse_response(data: bytes, decode: bool = True) -> HTTPResponse:
    """Convenience function to parse a response in one call."""
    return ResponseParser(decode=decode).parse(data)
