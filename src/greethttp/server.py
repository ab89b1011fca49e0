"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the pieces together:

    SocketServer ──accept──► Connection ──thread──► _process_connection()
                                                       │
        read_message() ◄──────────────────────────────┤
        parse_request()                                │
        GreetHandler.handle()  (negotiates encoding)   │
        encode_response()                              │
        send_message() ────────────────────────────────┤
        close() ◄──────────────────────────────────────┘

=============================================================================
CONCURRENCY MODEL
=============================================================================

Every accepted connection gets its own thread. A connection is owned by
exactly one thread for its whole life (one read, one write, close), and
handlers keep no per-request state, so no locking is needed.

By default the number of threads is unbounded. Setting
ServerConfig.max_connections puts a semaphore in front of the thread
spawn: once the limit is reached, the accept loop waits for a running
connection to finish before accepting more, and new clients queue in the
listen backlog.

=============================================================================
"""

import logging
import threading
import time
from typing import Optional

from .config import ServerConfig
from .core import Connection, ConnectionState, SocketServer
from .handlers import GreetHandler
from .http import headers as h
from .http.request import HTTPRequest, parse_request
from .http.response import HTTPResponse, encode_response


logger = logging.getLogger(__name__)
access_logger = logging.getLogger("greethttp.access")

SLOT_POLL_INTERVAL = 0.5  # seconds


class HTTPServer:
    """
    The greeting server.

    Usage:
        server = HTTPServer(ServerConfig(port=7481))
        server.run()  # Blocks until Ctrl+C / SIGTERM / shutdown()
    """

    def __init__(self, config: Optional[ServerConfig] = None, handler: Optional[GreetHandler] = None):
        """
        Args:
            config: Server configuration. Defaults are used if not given.
            handler: Route handler. Built from config if not given.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._handler = handler or GreetHandler(self.config)

        self._slots: Optional[threading.BoundedSemaphore] = None
        if self.config.max_connections is not None:
            self._slots = threading.BoundedSemaphore(self.config.max_connections)


    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    @property
    def address(self) -> tuple:
        return self._socket_server.address

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self, setup_logging: bool = True):
        """
        Start the server (blocking).

        Args:
            setup_logging: Configure the root logger from config.log_level.
                           Embedding applications and tests pass False.
        """
        if setup_logging:
            self._setup_logging()

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting connections. In-flight connections finish on their own."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("greethttp").setLevel(level)

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """Called from the accept loop: start a thread for the connection."""
        if not self._acquire_slot():
            logger.debug(f"[{conn.id}] Server stopping, dropping queued connection")
            conn.close()
            return

        thread = threading.Thread(
            target=self._run_connection,
            args=(conn,),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        try:
            thread.start()
        except RuntimeError as e:
            logger.error(f"[{conn.id}] Could not start connection thread: {e}")
            conn.close()
            self._release_slot()

    def _run_connection(self, conn: Connection):
        try:
            self._process_connection(conn)
        finally:
            self._release_slot()

    def _acquire_slot(self) -> bool:
        """
        Wait for a free connection slot.

        Polls so that shutdown() is noticed even while every slot is held.

        Returns:
            True once a slot is taken, False if the server stopped first.
        """
        if self._slots is None:
            return True
        while self._socket_server.is_running:
            if self._slots.acquire(timeout=SLOT_POLL_INTERVAL):
                return True
        return False

    def _release_slot(self):
        if self._slots is not None:
            self._slots.release()

    def _process_connection(self, conn: Connection):
        """
        Serve exactly one request on a connection (runs in its own thread).

        Transport failures abandon this exchange only; they are logged and
        the connection is closed.
        """
        with conn:
            start_time = time.time()

            try:
                raw_request = conn.read_message()
            except TimeoutError:
                logger.warning(f"[{conn.id}] Timed out reading request from {conn.client_ip}")
                return
            except ValueError as e:
                logger.warning(f"[{conn.id}] Dropping request: {e}")
                return
            except OSError as e:
                logger.error(f"[{conn.id}] Error reading data: {e}")
                return

            if raw_request is None:
                logger.debug(f"[{conn.id}] Client closed without sending a request")
                return

            request = parse_request(raw_request)

            conn.state = ConnectionState.PROCESSING
            response = self._dispatch(conn, request)

            if not conn.send_message(encode_response(response)):
                logger.error(f"[{conn.id}] Error sending response to {conn.client_ip}")
                return

            duration_ms = (time.time() - start_time) * 1000
            access_logger.info(
                f'{conn.client_ip} "{request.method} {request.uri}" '
                f"{response.status_code} {response.content_length} {duration_ms:.2f}ms"
            )

    def _dispatch(self, conn: Connection, request: HTTPRequest) -> HTTPResponse:
        try:
            return self._handler.handle(request)
        except Exception as e:
            logger.exception(f"[{conn.id}] Handler error: {e}")
            return HTTPResponse(version=h.HTTP_VERSION, status_code=h.STATUS_INTERNAL_ERROR)
