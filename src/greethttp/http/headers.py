"""
=============================================================================
WIRE CONSTANTS
=============================================================================

Every literal that appears on the wire lives here, so the encoders and
decoders on both sides of the connection agree on a single spelling.

=============================================================================
THE TWO "NO ENCODING" SENTINELS
=============================================================================

There are two different ways to say "the body is not compressed", and
they are NOT interchangeable:

    ┌────────────────────────────────────────────────────────────────────┐
    │  Value     │ Where it appears          │ Effect on the wire        │
    ├────────────┼───────────────────────────┼───────────────────────────┤
    │  "none"    │ request.accept_encoding   │ Accept-Encoding omitted   │
    │            │ decoded response          │ (header was absent)       │
    ├────────────┼───────────────────────────┼───────────────────────────┤
    │  ""        │ response.content_encoding │ Content-Encoding omitted  │
    │            │ after negotiation         │ (server chose identity)   │
    └────────────┴───────────────────────────┴───────────────────────────┘

The response encoder treats both as "omit the header", but the request
encoder only knows about "none": an empty accept-encoding still produces
an (empty) Accept-Encoding line, which the server answers with gzip.

=============================================================================
"""

CRLF = "\r\n"
CRLF_BYTES = b"\r\n"
HEADER_TERMINATOR = b"\r\n\r\n"

HTTP_VERSION = "HTTP/1.1"
METHOD_GET = "GET"

# Request headers (matched by literal, case-sensitive prefix)
HOST = "Host:"
ACCEPT = "Accept:"
ACCEPT_ENCODING = "Accept-Encoding:"

# Response headers
CONTENT_TYPE = "Content-Type:"
CONTENT_ENCODING = "Content-Encoding:"
CONTENT_LENGTH = "Content-Length:"

# Content codings
ENCODING_NONE = "none"
ENCODING_IDENTITY = ""
GZIP = "gzip"
DEFLATE = "deflate"

# Media types
TEXT_HTML = "text/html"
APPLICATION_JSON = "application/json"
APPLICATION_XML = "application/xml"

# Status codes (sent without a reason phrase)
STATUS_OK = "200"
STATUS_NOT_FOUND = "404"
STATUS_INTERNAL_ERROR = "500"


def strip_prefix(line: str, prefix: str) -> str:
    """Remove a header prefix and surrounding whitespace from a line."""
    return line[len(prefix):].strip()
