"""
=============================================================================
GREETING ROUTES
=============================================================================

The server answers exactly two URI shapes. This is not a general router:
the dispatch is a fixed decision over the shape of the URI.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   uri == "/"                                                         │
    │       └──► 200 text/html "Halo, dunia! ..."          → negotiate    │
    │                                                                      │
    │   uri starts with "/greet/"                                          │
    │       │                                                              │
    │       ├── /greet/{id}[?name=X], id == configured npm                 │
    │       │       └──► 200 JSON (default) or XML         → negotiate    │
    │       │                                                              │
    │       └── id missing or different                                    │
    │               └──► 404, no body                                      │
    │                                                                      │
    │   anything else                                                      │
    │       └──► 404, no body                                              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Only the two 200 branches go through content negotiation; a 404 carries
nothing but a status line.

=============================================================================
"""

import logging
from typing import Optional

from ..config import ServerConfig
from ..http import headers as h
from ..http.negotiation import ContentEncoder
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse
from ..models import GreetResponse, Student


logger = logging.getLogger(__name__)

GREET_PREFIX = "/greet/"
NAME_PARAM = "name="
INDEX_TEMPLATE = (
    "<html><body><h1>Halo, dunia! Aku {name} sedang mengerjakan A03</h1></body></html>"
)


class GreetHandler:
    """
    Route handler for "/" and "/greet/{id}".

    Usage:
        handler = GreetHandler(ServerConfig())
        response = handler.handle(request)
    """

    def __init__(self, config: ServerConfig, encoder: Optional[ContentEncoder] = None):
        """
        Args:
            config: Supplies the student identity and compression levels.
            encoder: Content negotiator. Built from config if not given.
        """
        self.config = config
        self.encoder = encoder or ContentEncoder(
            gzip_level=config.gzip_level,
            deflate_level=config.deflate_level,
        )

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Produce the response for a request.

        Args:
            request: The parsed request.

        Returns:
            A response ready for encode_response().
        """
        if request.uri == "/":
            return self.index(request)

        if request.uri.startswith(GREET_PREFIX):
            return self.greet(request)

        return self.not_found()

    def index(self, request: HTTPRequest) -> HTTPResponse:
        response = HTTPResponse(
            version=h.HTTP_VERSION,
            status_code=h.STATUS_OK,
            content_type=h.TEXT_HTML,
            data=INDEX_TEMPLATE.format(name=self.config.student_name).encode("utf-8"),
        )
        return self.encoder.apply(request, response)

    def greet(self, request: HTTPRequest) -> HTTPResponse:
        """
        Answer /greet/{id}[?name=X].

        The identifier is the third "/"-separated segment of the path,
        so "/greet/{id}/anything" still addresses {id}.
        """
        segments = request.path.split("/")
        if len(segments) < 3 or segments[2] != self.config.student_npm:
            logger.debug(f"Unknown identifier in {request.uri!r}")
            return self.not_found()

        greeting = GreetResponse(
            student=Student(nama=self.config.student_name, npm=self.config.student_npm),
            greeter=self._greeter(request.query),
        )

        if request.accept == h.APPLICATION_XML:
            content_type, body = h.APPLICATION_XML, greeting.to_xml()
        else:
            content_type, body = h.APPLICATION_JSON, greeting.to_json()

        response = HTTPResponse(
            version=h.HTTP_VERSION,
            status_code=h.STATUS_OK,
            content_type=content_type,
            data=body.encode("utf-8"),
        )
        return self.encoder.apply(request, response)

    def not_found(self) -> HTTPResponse:
        return HTTPResponse(version=h.HTTP_VERSION, status_code=h.STATUS_NOT_FOUND)

    def _greeter(self, query: str) -> str:
        # Only a query that begins with "name=" overrides the greeter, and
        # the rest of the query is taken verbatim (no splitting on "&",
        # no percent-decoding).
        if query.startswith(NAME_PARAM):
            name = query[len(NAME_PARAM):]
            if name:
                return name
        return self.config.student_name
