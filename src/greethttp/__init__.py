"""
=============================================================================
GREETHTTP - A Minimal HTTP/1.1 Exchange Over Raw TCP Sockets
=============================================================================

A client that issues one GET request and a server that answers two fixed
routes, with gzip/deflate content-encoding negotiation. HTTP framing is
done by hand on top of the socket module.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    greethttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (serve / fetch)
    ├── server.py            # HTTPServer: accept, thread per connection
    ├── client.py            # HTTPClient, build_request, exchange
    ├── config.py            # ServerConfig / ClientConfig dataclasses
    ├── models.py            # Student / GreetResponse payloads
    ├── core/
    │   ├── socket_server.py # Listening socket and accept loop
    │   └── connection.py    # Framed reads and writes
    ├── http/
    │   ├── headers.py       # Wire constants
    │   ├── request.py       # Request model, encoder, parser
    │   ├── response.py      # Response model, encoder, parser
    │   ├── encoding.py      # gzip / deflate codecs
    │   └── negotiation.py   # Server-side Accept-Encoding handling
    └── handlers/
        └── greet.py         # "/" and "/greet/{id}"

=============================================================================
QUICK START
=============================================================================

    # Server
    from greethttp import HTTPServer, ServerConfig
    HTTPServer(ServerConfig(port=7481)).run()

    # Client
    from greethttp import HTTPClient
    response = HTTPClient().get(
        "http://localhost:7481/greet/2306217481?name=Budi",
        accept="application/xml",
        accept_encoding="gzip",
    )
    print(response.status_code, response.data.decode())

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .client import HTTPClient
from .config import ServerConfig, ClientConfig

__all__ = ["HTTPServer", "HTTPClient", "ServerConfig", "ClientConfig", "__version__"]
