"""
=============================================================================
HTTP REQUEST MODEL, ENCODER AND PARSER
=============================================================================

The client serializes an HTTPRequest into bytes; the server parses those
bytes back into an HTTPRequest. Both directions live in this module so the
wire format is defined in exactly one place.

=============================================================================
REQUEST WIRE FORMAT
=============================================================================

    GET /greet/2306217481?name=Budi HTTP/1.1\r\n     ← Request line
    Host: localhost:7481\r\n
    Accept: application/json\r\n
    Accept-Encoding: gzip\r\n                        ← Only if not "none"
    \r\n                                             ← Empty line
                                                     ← No body (GET only)

=============================================================================
LENIENT PARSING
=============================================================================

This parser never rejects a request. A malformed request line or a
missing header simply leaves the corresponding field at its default:

    ┌──────────────────────────────────┬──────────────────────────────────┐
    │ Input                            │ Result                           │
    ├──────────────────────────────────┼──────────────────────────────────┤
    │ "GET /\r\n"  (2 tokens)          │ method = uri = version = ""      │
    │ no Host: line                    │ host = ""                        │
    │ no Accept-Encoding: line         │ accept_encoding = "none"         │
    │ "accept: text/html" (lowercase)  │ ignored (prefix is case-sensitive)│
    └──────────────────────────────────┴──────────────────────────────────┘

The route handler turns a request with an empty URI into a 404, so the
leniency never produces a bogus success.

=============================================================================
"""

from dataclasses import dataclass

from . import headers as h


@dataclass(frozen=True)
class HTTPRequest:
    """
    A parsed (or about to be sent) HTTP request.

    Frozen: once a request has been built or parsed it is never modified.

    Attributes:
        method: HTTP method, "GET" in practice.
        uri: Request target, path plus optional "?query".
        version: Protocol version, "HTTP/1.1".
        host: Value of the Host header.
        accept: Desired content type (selects JSON or XML on /greet).
        accept_encoding: "gzip", "deflate", "none", or anything else.
    """

    method: str = ""
    uri: str = ""
    version: str = ""
    host: str = ""
    accept: str = ""
    accept_encoding: str = h.ENCODING_NONE

    @property
    def path(self) -> str:
        """URI without the query string."""
        return self.uri.split("?", 1)[0]

    @property
    def query(self) -> str:
        """Raw query string (without the leading "?"), or ""."""
        parts = self.uri.split("?", 1)
        return parts[1] if len(parts) == 2 else ""


def encode_request(request: HTTPRequest) -> bytes:
    """
    Serialize a request to wire bytes.

    No validation is performed: empty fields serialize as empty strings.
    The Accept-Encoding line is left out when the client asked for "none".

    Args:
        request: The request to serialize.

    Returns:
        Request line, headers and the terminating empty line.
    """
    lines = [
        f"{request.method} {request.uri} {request.version}",
        f"{h.HOST} {request.host}",
        f"{h.ACCEPT} {request.accept}",
    ]
    if request.accept_encoding != h.ENCODING_NONE:
        lines.append(f"{h.ACCEPT_ENCODING} {request.accept_encoding}")

    return (h.CRLF.join(lines) + h.CRLF + h.CRLF).encode("utf-8")


class RequestParser:
    """
    Parses raw request bytes into HTTPRequest objects.

        Raw bytes
            │
            ▼
        split on CRLF
            │
            ├──► line 0: "METHOD URI VERSION" (exactly 3 tokens)
            │
            └──► lines 1..n: header lines until the first empty line
                    Host:            → host
                    Accept:          → accept
                    Accept-Encoding: → accept_encoding
                    anything else    → ignored
    """

    def parse(self, data: bytes) -> HTTPRequest:
        """
        Parse a request.

        Args:
            data: Raw bytes holding at least the request head.

        Returns:
            The parsed request. Never raises on malformed input.
        """
        text = data.decode("utf-8", errors="replace")
        lines = text.split(h.CRLF)

        method, uri, version = self._parse_request_line(lines[0])
        fields = self._parse_headers(lines[1:])

        return HTTPRequest(
            method=method,
            uri=uri,
            version=version,
            **fields,
        )

    def _parse_request_line(self, line: str) -> tuple[str, str, str]:
        parts = line.split(" ")
        if len(parts) != 3:
            return "", "", ""
        return parts[0], parts[1], parts[2]

    def _parse_headers(self, lines: list[str]) -> dict[str, str]:
        fields = {
            "host": "",
            "accept": "",
            "accept_encoding": h.ENCODING_NONE,
        }

        for line in lines:
            if not line:
                break  # End of header block

            # "Accept-Encoding:" does not start with "Accept:", so the
            # order of these checks does not matter.
            if line.startswith(h.HOST):
                fields["host"] = h.strip_prefix(line, h.HOST)
            elif line.startswith(h.ACCEPT):
                fields["accept"] = h.strip_prefix(line, h.ACCEPT)
            elif line.startswith(h.ACCEPT_ENCODING):
                fields["accept_encoding"] = h.strip_prefix(line, h.ACCEPT_ENCODING)

        return fields


def parse_request(data: bytes) -> HTTPRequest:
    """Convenience function to parse a request in one call."""
    return RequestParser().parse(data)
