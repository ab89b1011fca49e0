"""
=============================================================================
GREETHTTP CLI ENTRY POINT
=============================================================================

    # Run the server with defaults (0.0.0.0:7481)
    python -m greethttp serve

    # Custom port and identity
    python -m greethttp serve --port 9000 --npm 1234567890 --name Budi

    # Fetch a URL (prompts for anything not given)
    python -m greethttp fetch http://localhost:7481/greet/2306217481 \
        --accept application/xml --accept-encoding gzip

    # Fully interactive
    python -m greethttp fetch

=============================================================================
"""

import argparse
import logging
import sys
from typing import Callable, Optional

from . import __version__
from .client import HTTPClient
from .config import ServerConfig
from .http import headers as h
from .http.response import HTTPResponse
from .models import GreetResponse
from .server import HTTPServer


LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def build_parser() -> argparse.ArgumentParser:
    defaults = ServerConfig.from_env()

    parser = argparse.ArgumentParser(
        prog="greethttp",
        description="Minimal HTTP/1.1 greeting server and client over raw sockets",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"greethttp {__version__}",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    # ─────────────────────────────────────────────────────────────────────
    # serve
    # ─────────────────────────────────────────────────────────────────────
    serve = commands.add_parser("serve", help="Run the greeting server")
    serve.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})",
    )
    serve.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})",
    )
    serve.add_argument(
        "--npm",
        default=defaults.student_npm,
        help="Identifier answered by /greet/{id}",
    )
    serve.add_argument(
        "--name",
        default=defaults.student_name,
        help="Student name served in greetings",
    )
    serve.add_argument(
        "--max-connections",
        type=int,
        default=defaults.max_connections,
        help="Cap on concurrent connections (default: unbounded)",
    )
    serve.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default=defaults.log_level.upper(),
        help="Logging level",
    )

    # ─────────────────────────────────────────────────────────────────────
    # fetch
    # ─────────────────────────────────────────────────────────────────────
    fetch = commands.add_parser("fetch", help="Send one GET request and print the response")
    fetch.add_argument("url", nargs="?", help="URL to fetch (prompted if omitted)")
    fetch.add_argument("--accept", "-a", help="Accept header value (prompted if omitted)")
    fetch.add_argument(
        "--accept-encoding", "-e",
        help='Accept-Encoding value, "none" for no encoding (prompted if omitted)',
    )
    fetch.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default="WARNING",
        help="Logging level (default: WARNING)",
    )

    return parser


def serve(args: argparse.Namespace) -> int:
    config = ServerConfig(
        host=args.host,
        port=args.port,
        student_npm=args.npm,
        student_name=args.name,
        max_connections=args.max_connections,
        log_level=args.log_level,
    )

    try:
        server = HTTPServer(config)
        server.run()
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def fetch(args: argparse.Namespace, prompt: Callable[[str], str] = input) -> int:
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    url = args.url or prompt("Input URL: ").strip()
    accept = args.accept if args.accept is not None else prompt("Input Content Type: ").strip()
    accept_encoding = args.accept_encoding
    if accept_encoding is None:
        accept_encoding = prompt(
            'Input Accept Encoding (write "none" if no special encoding can be accepted): '
        ).strip()

    response = HTTPClient().get(url, accept=accept, accept_encoding=accept_encoding)
    if response.is_empty:
        return 1

    print_response(response)

    # A 404 has no body and nothing to parse
    if response.data and response.content_type != h.TEXT_HTML:
        greeting = parse_greeting(response)
        if greeting is None:
            return 1
        print()
        print(f"Parsed: {greeting}")

    return 0


def print_response(response: HTTPResponse) -> None:
    print(f"Status Code: {response.status_code}")
    if response.content_encoding != h.ENCODING_NONE:
        print(f"Encoded: {response.content_encoding}")
    print(f"Body: {response.data.decode('utf-8', errors='replace')}")


def parse_greeting(response: HTTPResponse) -> Optional[GreetResponse]:
    """Parse a greeting body as XML or JSON according to its Content-Type."""
    text = response.data.decode("utf-8", errors="replace")
    try:
        if response.content_type == h.APPLICATION_XML:
            return GreetResponse.from_xml(text)
        return GreetResponse.from_json(text)
    except ValueError as e:
        print(f"Error: could not parse response body: {e}", file=sys.stderr)
        return None


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "serve":
        return serve(args)
    return fetch(args)


if __name__ == "__main__":
    sys.exit(main())
