"""
Unit tests for the greeting route handler.
"""

import gzip
import json

import pytest

from greethttp.config import ServerConfig
from greethttp.handlers import GreetHandler
from greethttp.http.encoding import decode_content
from greethttp.http.negotiation import ContentEncoder


@pytest.fixture
def handler(config: ServerConfig) -> GreetHandler:
    return GreetHandler(config)


class TestIndexRoute:
    """Tests for GET /."""

    def test_index(self, handler, make_request):
        response = handler.handle(make_request("/", "text/html", "none"))

        assert response.version == "HTTP/1.1"
        assert response.status_code == "200"
        assert response.content_type == "text/html"
        assert b"Halo, dunia!" in response.data
        assert b"Firaz" in response.data
        assert response.content_length == len(response.data)

    def test_index_is_negotiated(self, handler, make_request):
        response = handler.handle(make_request("/", "text/html", "br"))

        assert response.content_encoding == "gzip"
        assert b"Halo, dunia!" in gzip.decompress(response.data)

    def test_index_with_query_is_not_found(self, handler, make_request):
        assert handler.handle(make_request("/?x=1")).status_code == "404"


class TestGreetRoute:
    """Tests for GET /greet/{id}."""

    def test_json_with_name_override(self, handler, make_request):
        response = handler.handle(make_request("/greet/2306217481?name=Budi", "", "none"))

        assert response.status_code == "200"
        assert response.content_type == "application/json"
        assert response.data == b'{"Student":{"Nama":"Firaz","Npm":"2306217481"},"Greeter":"Budi"}'

    def test_json_is_default_for_other_accept(self, handler, make_request):
        response = handler.handle(make_request("/greet/2306217481", "text/plain", "none"))

        assert response.content_type == "application/json"
        assert json.loads(response.data)["Greeter"] == "Firaz"

    def test_xml(self, handler, make_request):
        response = handler.handle(make_request("/greet/2306217481", "application/xml", "none"))

        assert response.status_code == "200"
        assert response.content_type == "application/xml"
        assert b"<Nama>Firaz</Nama>" in response.data
        assert b"<Npm>2306217481</Npm>" in response.data
        assert b"<Greeter>Firaz</Greeter>" in response.data

    def test_xml_accept_must_match_exactly(self, handler, make_request):
        response = handler.handle(make_request("/greet/2306217481", "application/xml; q=1", "none"))

        assert response.content_type == "application/json"

    def test_name_override_keeps_student_identity(self, handler, make_request):
        response = handler.handle(make_request("/greet/2306217481?name=Budi", "application/xml", "none"))

        assert b"<Nama>Firaz</Nama>" in response.data
        assert b"<Greeter>Budi</Greeter>" in response.data

    def test_empty_name_uses_default(self, handler, make_request):
        response = handler.handle(make_request("/greet/2306217481?name=", "", "none"))

        assert json.loads(response.data)["Greeter"] == "Firaz"

    @pytest.mark.parametrize("query,expected", [
        ("name=Budi+Santoso", "Budi+Santoso"),
        ("name=Budi%20Santoso", "Budi%20Santoso"),
        ("name=Budi&x=1", "Budi&x=1"),
        ("x=1&name=Budi", "Firaz"),
        ("nama=Budi", "Firaz"),
        ("Name=Budi", "Firaz"),
        ("", "Firaz"),
    ])
    def test_name_is_the_verbatim_query_tail(self, handler, make_request, query: str, expected: str):
        response = handler.handle(make_request(f"/greet/2306217481?{query}", "", "none"))

        assert json.loads(response.data)["Greeter"] == expected

    def test_xml_escapes_name(self, handler, make_request):
        response = handler.handle(make_request("/greet/2306217481?name=<b>", "application/xml", "none"))

        assert b"<Greeter>&lt;b&gt;</Greeter>" in response.data

    @pytest.mark.parametrize("accept_encoding", ["gzip", "deflate"])
    def test_greet_is_negotiated(self, handler, make_request, accept_encoding: str):
        response = handler.handle(make_request("/greet/2306217481", "", accept_encoding))

        assert response.content_encoding == accept_encoding
        assert response.content_length == len(response.data)
        assert json.loads(decode_content(response.data, accept_encoding))["Student"]["Npm"] == "2306217481"

    def test_trailing_segments_still_match(self, handler, make_request):
        assert handler.handle(make_request("/greet/2306217481/extra")).status_code == "200"


class TestNotFound:
    """Tests for 404 responses."""

    @pytest.mark.parametrize("uri", [
        "/greet/0000000000",
        "/greet/",
        "/greet/?name=Budi",
        "/unknown",
        "/greet",
        "",
    ])
    def test_not_found(self, handler, make_request, uri: str):
        response = handler.handle(make_request(uri, "application/json", "gzip"))

        assert response.version == "HTTP/1.1"
        assert response.status_code == "404"
        assert response.content_type == ""
        assert response.content_encoding == ""
        assert response.content_length == 0
        assert response.data == b""


class TestConfiguration:
    """The identity served comes from configuration."""

    def test_custom_identity(self, make_request):
        handler = GreetHandler(ServerConfig(student_name="Budi", student_npm="1234567890"))

        assert handler.handle(make_request("/greet/2306217481")).status_code == "404"

        response = handler.handle(make_request("/greet/1234567890"))
        assert response.data == b'{"Student":{"Nama":"Budi","Npm":"1234567890"},"Greeter":"Budi"}'

    def test_custom_encoder(self, config, make_request):
        handler = GreetHandler(config, encoder=ContentEncoder(deflate_level=1))

        assert handler.encoder.deflate_level == 1

    def test_levels_from_config(self):
        handler = GreetHandler(ServerConfig(gzip_level=9, deflate_level=3))

        assert handler.encoder.gzip_level == 9
        assert handler.encoder.deflate_level == 3
