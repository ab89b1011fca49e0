"""
=============================================================================
HTTP MESSAGE FRAMING AND CONTENT CODING
=============================================================================

This package turns HTTP messages into bytes and back, for both sides of
the exchange:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   CLIENT                                         SERVER              │
    │                                                                      │
    │   HTTPRequest                                                        │
    │      │ encode_request()                                              │
    │      ▼                                                               │
    │   b"GET / HTTP/1.1\r\n..."  ─────────────────►  RequestParser        │
    │                                                     │                │
    │                                                     ▼                │
    │                                                 HTTPRequest          │
    │                                                     │ handler        │
    │                                                     ▼                │
    │                                                 HTTPResponse         │
    │                                                     │ ContentEncoder │
    │                                                     │ encode_response│
    │   ResponseParser  ◄─────────────────────────  b"HTTP/1.1 200\r\n..." │
    │      │ decode_content()                                              │
    │      ▼                                                               │
    │   HTTPResponse (body decompressed)                                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    headers.py       Wire constants and the "none" sentinel
    request.py       HTTPRequest, encode_request, RequestParser
    response.py      HTTPResponse, encode_response, ResponseParser
    encoding.py      gzip / raw deflate codecs, decode_content
    negotiation.py   ContentEncoder (server-side Accept-Encoding handling)

=============================================================================
"""

from .request import HTTPRequest, RequestParser, encode_request, parse_request
from .response import HTTPResponse, ResponseParser, encode_response, parse_response
from .encoding import decode_content
from .negotiation import ContentEncoder

__all__ = [
    # Requests
    "HTTPRequest",
    "RequestParser",
    "encode_request",
    "parse_request",

    # Responses
    "HTTPResponse",
    "ResponseParser",
    "encode_response",
    "parse_response",

    # Content coding
    "ContentEncoder",
    "decode_content",
]
