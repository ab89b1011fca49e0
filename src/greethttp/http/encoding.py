"""
=============================================================================
CONTENT CODINGS
=============================================================================

Compression and decompression primitives for the two content codings the
server can produce, plus the client-side resolver that undoes them.

=============================================================================
GZIP VS DEFLATE
=============================================================================

Both codings use the same DEFLATE compression algorithm. They differ only
in the framing around the compressed stream:

    ┌────────────────────────────────────────────────────────────────────┐
    │  gzip                                                              │
    │  ┌──────────┬──────────────────────────────┬──────────────────┐    │
    │  │ 10-byte  │   raw DEFLATE stream         │ CRC32 + size     │    │
    │  │ header   │                              │ (8-byte trailer) │    │
    │  └──────────┴──────────────────────────────┴──────────────────┘    │
    │                                                                    │
    │  deflate (as sent by this server)                                  │
    │  ┌──────────────────────────────┐                                  │
    │  │   raw DEFLATE stream         │   ← no zlib header, no checksum  │
    │  └──────────────────────────────┘                                  │
    └────────────────────────────────────────────────────────────────────┘

zlib selects the framing through the `wbits` argument:

    wbits = 16 + 15  → gzip container
    wbits = 15       → zlib container (RFC 1950)
    wbits = -15      → raw DEFLATE, no container   ← what we use

=============================================================================
COMPRESSION LEVEL
=============================================================================

    1 = fastest, least compression
    6 = balanced (zlib's own default, and ours)
    9 = slowest, best compression

=============================================================================
"""

import gzip
import logging
import zlib

from .headers import DEFLATE, GZIP


logger = logging.getLogger(__name__)

DEFAULT_LEVEL = 6
RAW_DEFLATE_WBITS = -zlib.MAX_WBITS


def gzip_compress(data: bytes, level: int = DEFAULT_LEVEL) -> bytes:
    """Compress data into a gzip container."""
    return gzip.compress(data, compresslevel=level)


def deflate_compress(data: bytes, level: int = DEFAULT_LEVEL) -> bytes:
    """Compress data into a raw DEFLATE stream (no zlib header)."""
    compressor = zlib.compressobj(level, zlib.DEFLATED, RAW_DEFLATE_WBITS)
    return compressor.compress(data) + compressor.flush()


def gzip_decompress(data: bytes) -> bytes:
    return gzip.decompress(data)


def deflate_decompress(data: bytes) -> bytes:
    """
    Decompress a raw DEFLATE stream.

    A stream that ends before its final block is treated as corrupt:
    zlib.decompress() on its own would silently return the partial output.
    """
    decompressor = zlib.decompressobj(RAW_DEFLATE_WBITS)
    result = decompressor.decompress(data) + decompressor.flush()
    if not decompressor.eof:
        raise zlib.error("incomplete deflate stream")
    return result


def decode_content(data: bytes, encoding: str) -> bytes:
    """
    Undo a content coding.

        "gzip"      → gzip-decompress
        "deflate"   → raw-deflate decompress
        anything    → returned unchanged (including "none")

    Decompression failures are NOT fatal. A corrupt or truncated stream is
    logged and the original (still compressed) bytes are returned, so the
    caller still gets a response to show.

    Args:
        data: The body as received.
        encoding: Content-Encoding value from the response.

    Returns:
        The decoded body, or `data` itself on failure.
    """
    if encoding == GZIP:
        decoder = gzip_decompress
    elif encoding == DEFLATE:
        decoder = deflate_decompress
    else:
        return data

    try:
        return decoder(data)
    except (OSError, EOFError, zlib.error) as e:
        # gzip raises BadGzipFile (an OSError) for a bad header and
        # EOFError for a truncated stream; zlib raises zlib.error.
        logger.warning(f"Error decompressing {encoding} data: {e}")
        return data
