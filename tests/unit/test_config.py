"""
Unit tests for configuration.
"""

import pytest

from greethttp.config import ClientConfig, ServerConfig


class TestServerConfig:

    def test_defaults(self):
        config = ServerConfig()

        assert config.host == "0.0.0.0"
        assert config.port == 7481
        assert config.student_name == "Firaz"
        assert config.student_npm == "2306217481"
        assert config.deflate_level == 6
        assert config.max_connections is None
        config.validate()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("GREET_HOST", "127.0.0.1")
        monkeypatch.setenv("GREET_PORT", "9000")
        monkeypatch.setenv("GREET_NPM", "1234567890")
        monkeypatch.setenv("GREET_NAME", "Budi")
        monkeypatch.setenv("GREET_MAX_CONNECTIONS", "8")
        monkeypatch.setenv("GREET_LOG_LEVEL", "DEBUG")

        config = ServerConfig.from_env()

        assert config.host == "127.0.0.1"
        assert config.port == 9000
        assert config.student_npm == "1234567890"
        assert config.student_name == "Budi"
        assert config.max_connections == 8
        assert config.log_level == "DEBUG"

    def test_from_env_defaults(self, monkeypatch):
        for name in ("GREET_HOST", "GREET_PORT", "GREET_NPM", "GREET_NAME",
                     "GREET_MAX_CONNECTIONS", "GREET_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        assert ServerConfig.from_env() == ServerConfig()

    @pytest.mark.parametrize("overrides", [
        {"port": -1},
        {"port": 65536},
        {"buffer_size": 100},
        {"timeout": 0},
        {"max_message_size": 10},
        {"max_connections": 0},
        {"student_name": ""},
        {"student_npm": ""},
        {"gzip_level": 10},
        {"deflate_level": -1},
    ])
    def test_validate_rejects(self, overrides: dict):
        with pytest.raises(ValueError):
            ServerConfig(**overrides).validate()

    def test_port_zero_allowed(self):
        ServerConfig(port=0).validate()

    def test_timeout_none_allowed(self):
        ServerConfig(timeout=None).validate()


class TestClientConfig:

    def test_defaults_valid(self):
        ClientConfig().validate()

    @pytest.mark.parametrize("overrides", [
        {"buffer_size": 0},
        {"timeout": -1.0},
        {"default_port": 0},
    ])
    def test_validate_rejects(self, overrides: dict):
        with pytest.raises(ValueError):
            ClientConfig(**overrides).validate()
