"""Tests for configuration loading."""

import json
from functools import partial

import dotenv
import pytest
from pydantic import ValidationError

from teleport_mcp_server.config import (
    AppConfig,
    ServerConfig,
    TeleportConfig,
    find_config_file,
    load_config,
    merge_config,
    parse_bool,
    parse_http_addr,
)


class TestParseHttpAddr:
    @pytest.mark.parametrize(
        "addr,expected",
        [
            (":8080", ("0.0.0.0", 8080)),
            ("127.0.0.1:9000", ("127.0.0.1", 9000)),
            ("localhost:80", ("localhost", 80)),
            ("[::1]:8443", ("::1", 8443)),
        ],
    )
    def test_valid(self, addr, expected):
        assert parse_http_addr(addr) == expected

    @pytest.mark.parametrize("addr", ["8080", "host:http", ":0", ":70000"])
    def test_invalid(self, addr):
        with pytest.raises(ValueError):
            parse_http_addr(addr)


class TestModels:
    def test_defaults(self):
        config = AppConfig()
        assert config.teleport.binary == "tsh"
        assert config.teleport.command_timeout == 30.0
        assert config.server.transport == "stdio"
        assert config.server.http_addr == ":8080"
        assert config.server.sse_endpoint == "/sse"
        assert config.server.message_endpoint == "/message"
        assert config.server.http_endpoint == "/mcp"
        assert config.server.non_destructive is True
        assert config.log_level == "INFO"

    @pytest.mark.parametrize("timeout", [0, -1, 301])
    def test_command_timeout_bounds(self, timeout):
        with pytest.raises(ValidationError):
            TeleportConfig(command_timeout=timeout)

    def test_empty_binary(self):
        with pytest.raises(ValidationError):
            TeleportConfig(binary="  ")

    def test_unknown_transport(self):
        with pytest.raises(ValidationError):
            ServerConfig(transport="websocket")

    def test_endpoint_needs_leading_slash(self):
        with pytest.raises(ValidationError):
            ServerConfig(http_endpoint="mcp")

    def test_log_level_is_normalized(self):
        assert AppConfig(log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValidationError):
            AppConfig(log_level="chatty")


class TestLoadConfig:
    def test_defaults_without_sources(self):
        assert load_config() == AppConfig()

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("teleport:\n  binary: /opt/teleport/tsh\nserver:\n  dry_run: true\n")

        config = load_config(config_file=path)

        assert config.teleport.binary == "/opt/teleport/tsh"
        assert config.server.dry_run is True

    def test_json_file(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"server": {"transport": "sse", "http_addr": ":9090"}}))

        config = load_config(config_file=str(path))

        assert config.server.transport == "sse"
        assert config.server.http_addr == ":9090"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(config_file=tmp_path / "absent.yaml")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[server]\n")
        with pytest.raises(ValueError):
            load_config(config_file=path)

    def test_auto_discovery_in_working_directory(self, tmp_path):
        (tmp_path / ".mcp-teleport.yaml").write_text("log_level: warning\n")

        assert find_config_file() == tmp_path / ".mcp-teleport.yaml"
        assert load_config().log_level == "WARNING"

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("server:\n  dry_run: false\n  transport: sse\n")
        monkeypatch.setenv("MCP_TELEPORT_DRY_RUN", "true")
        monkeypatch.setenv("TELEPORT_COMMAND_TIMEOUT", "45")

        config = load_config(config_file=path)

        assert config.server.dry_run is True
        assert config.server.transport == "sse"
        assert config.teleport.command_timeout == 45

    def test_overrides_win_and_none_is_ignored(self, monkeypatch):
        monkeypatch.setenv("MCP_TELEPORT_TRANSPORT", "sse")

        config = load_config(
            overrides={"server": {"transport": "streamable-http", "dry_run": None}}
        )

        assert config.server.transport == "streamable-http"
        assert config.server.dry_run is False

    def test_dotenv_file_is_loaded(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("MCP_TELEPORT_DEBUG=yes\n")
        monkeypatch.setattr(
            "teleport_mcp_server.config.load_dotenv", partial(dotenv.load_dotenv, tmp_path / ".env")
        )

        assert load_config().server.debug is True

    def test_invalid_environment_value(self, monkeypatch):
        monkeypatch.setenv("MCP_TELEPORT_HTTP_ADDR", "no-port")
        with pytest.raises(ValidationError):
            load_config()


class TestHelpers:
    def test_merge_config_is_deep(self):
        base = {"server": {"dry_run": False, "transport": "sse"}, "log_level": "INFO"}
        merged = merge_config(base, {"server": {"dry_run": True}})
        assert merged == {"server": {"dry_run": True, "transport": "sse"}, "log_level": "INFO"}
        assert base["server"]["dry_run"] is False

    @pytest.mark.parametrize(
        "value,expected",
        [("true", True), ("1", True), ("YES", True), (" on ", True), ("false", False), ("0", False), ("", False)],
    )
    def test_parse_bool(self, value, expected):
        assert parse_bool(value) is expected

    def test_parse_bool_passes_non_strings(self):
        assert parse_bool(True) is True
