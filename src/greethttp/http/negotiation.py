"""
=============================================================================
CONTENT-ENCODING NEGOTIATION
=============================================================================

Decides how the server compresses a response body, based on the single
Accept-Encoding value the client sent.

=============================================================================
DECISION TABLE
=============================================================================

    ┌──────────────────────────┬──────────────────┬───────────────────────┐
    │ Accept-Encoding          │ Body             │ Content-Encoding      │
    ├──────────────────────────┼──────────────────┼───────────────────────┤
    │ "gzip"                   │ gzip-compressed  │ "gzip"                │
    │ "deflate"                │ raw DEFLATE      │ "deflate"             │
    │ "none" (or header absent)│ unchanged        │ "" (header omitted)   │
    │ anything else            │ gzip-compressed  │ "gzip"                │
    └──────────────────────────┴──────────────────┴───────────────────────┘

Unknown values fall back to gzip rather than to identity. "br", "*",
"gzip, deflate" and even an empty value all get gzip.

In every case Content-Length is recomputed from the final body, so the
length on the wire always matches the bytes on the wire.

=============================================================================
WHEN IT RUNS
=============================================================================

Only successful responses go through negotiation. A 404 carries no body,
and compressing an empty body would produce a non-empty gzip stream, so
the route handler calls apply() on its 200 responses only.

=============================================================================
"""

import logging

from . import headers as h
from .encoding import DEFAULT_LEVEL, deflate_compress, gzip_compress
from .request import HTTPRequest
from .response import HTTPResponse


logger = logging.getLogger(__name__)


class ContentEncoder:
    """
    Server-side content-encoding negotiator.

    Usage:
        encoder = ContentEncoder(deflate_level=6)
        response = encoder.apply(request, response)
    """

    def __init__(self, gzip_level: int = DEFAULT_LEVEL, deflate_level: int = DEFAULT_LEVEL):
        """
        Args:
            gzip_level: Compression level (0-9) for gzip bodies.
            deflate_level: Compression level (0-9) for deflate bodies.
        """
        self.gzip_level = gzip_level
        self.deflate_level = deflate_level

    def select(self, accept_encoding: str) -> str:
        """
        Pick the content coding for a request's Accept-Encoding value.

        Returns:
            "gzip", "deflate", or "" for identity.
        """
        if accept_encoding == h.DEFLATE:
            return h.DEFLATE
        if accept_encoding == h.ENCODING_NONE:
            return h.ENCODING_IDENTITY
        return h.GZIP

    def apply(self, request: HTTPRequest, response: HTTPResponse) -> HTTPResponse:
        """
        Compress the response body as negotiated.

        The response is modified in place and also returned, so calls can
        be written either way.

        Args:
            request: The request whose Accept-Encoding is honored.
            response: A response with an uncompressed body.

        Returns:
            The same response, with body, encoding and length updated.
        """
        encoding = self.select(request.accept_encoding)
        original_size = len(response.data)

        if encoding == h.GZIP:
            response.data = gzip_compress(response.data, self.gzip_level)
        elif encoding == h.DEFLATE:
            response.data = deflate_compress(response.data, self.deflate_level)

        response.content_encoding = encoding
        response.content_length = len(response.data)

        logger.debug(
            f"Negotiated {encoding or 'identity'} for "
            f"Accept-Encoding={request.accept_encoding!r}: "
            f"{original_size} -> {response.content_length} bytes"
        )
        return response
