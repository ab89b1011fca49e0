"""
=============================================================================
CONFIGURATION
=============================================================================

Centralized configuration for the server and the client.

The values that used to be compiled into the programs (listen address,
the student identity served by /greet, the deflate level) are ordinary
dataclass fields here, so tests and deployments can change them without
touching the handler code.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    Priority (highest to lowest):

    1. Command-line arguments
       └── python -m greethttp serve --port 9000

    2. Environment variables
       └── GREET_PORT=9000 python -m greethttp serve

    3. Dataclass defaults (below)

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


MAX_MESSAGE_SIZE = 10 * 1024 * 1024  # 10 MB


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, timeout, max_message_size

    CONCURRENCY
    - max_connections

    APPLICATION
    - student_name, student_npm, gzip_level, deflate_level

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """The IP address to bind to. "0.0.0.0" listens on all interfaces."""

    port: int = 7481
    """The port number to listen on. 0 lets the OS pick a free port."""

    backlog: int = 128
    """Maximum number of queued connections before new ones are refused."""

    buffer_size: int = 2048
    """Size of each recv() call in bytes."""

    timeout: Optional[float] = 30.0
    """
    Socket timeout in seconds for reading a request and writing a response.
    None = block forever.
    """

    max_message_size: int = MAX_MESSAGE_SIZE
    """Largest request (head plus body) accepted before dropping the connection."""

    # ─────────────────────────────────────────────────────────────────────
    # CONCURRENCY
    # ─────────────────────────────────────────────────────────────────────

    max_connections: Optional[int] = None
    """
    Maximum number of connections handled at the same time.
    None = unbounded, one thread per accepted connection.
    When the limit is reached, the accept loop waits for a slot.
    """

    # ─────────────────────────────────────────────────────────────────────
    # APPLICATION
    # ─────────────────────────────────────────────────────────────────────

    student_name: str = "Firaz"
    """Name served in the greeting; also the default greeter."""

    student_npm: str = "2306217481"
    """The only identifier /greet/{id} answers for."""

    gzip_level: int = 6
    """Compression level (0-9) for gzip bodies."""

    deflate_level: int = 6
    """Compression level (0-9) for deflate bodies."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR)."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        GREET_HOST              Server host (default: 0.0.0.0)
        GREET_PORT              Server port (default: 7481)
        GREET_NPM               Identifier served by /greet (default: 2306217481)
        GREET_NAME              Student name (default: Firaz)
        GREET_MAX_CONNECTIONS   Concurrent connection cap (default: unbounded)
        GREET_LOG_LEVEL         Logging level (default: INFO)
        """
        max_connections = os.getenv("GREET_MAX_CONNECTIONS")
        return cls(
            host=os.getenv("GREET_HOST", "0.0.0.0"),
            port=int(os.getenv("GREET_PORT", "7481")),
            student_npm=os.getenv("GREET_NPM", "2306217481"),
            student_name=os.getenv("GREET_NAME", "Firaz"),
            max_connections=int(max_connections) if max_connections else None,
            log_level=os.getenv("GREET_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called at startup so a bad value fails immediately instead of on
        the first request.

        Raises:
            ValueError: On the first invalid value found.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.max_message_size < self.buffer_size:
            raise ValueError("max_message_size must be >= buffer_size")

        if self.max_connections is not None and self.max_connections < 1:
            raise ValueError("max_connections must be >= 1")

        if not self.student_name or not self.student_npm:
            raise ValueError("student_name and student_npm must not be empty")

        for name in ("gzip_level", "deflate_level"):
            level = getattr(self, name)
            if not 0 <= level <= 9:
                raise ValueError(f"{name} must be 0-9, got {level}")


@dataclass
class ClientConfig:
    """Configuration for the HTTP client."""

    buffer_size: int = 2048
    timeout: Optional[float] = 30.0
    max_message_size: int = MAX_MESSAGE_SIZE
    default_port: int = 80
    """Port used when the URL does not name one."""

    def validate(self) -> None:
        if self.buffer_size < 1:
            raise ValueError("buffer_size must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if not 0 < self.default_port < 65536:
            raise ValueError(f"Invalid default_port: {self.default_port}")
