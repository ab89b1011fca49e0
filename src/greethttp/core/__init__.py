"""
=============================================================================
CORE NETWORKING
=============================================================================

Transport-level building blocks, independent of HTTP semantics:

    socket_server.py   Listening socket and accept loop (server side)
    connection.py      Framed reads and writes on a connected socket
                       (used by both the server and the client)

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",
    "Connection",
    "ConnectionState",
]
