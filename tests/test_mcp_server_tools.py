"""Test MCP server wiring: tool registration, transports and shutdown."""

import pytest
from starlette.applications import Starlette

from teleport_mcp_server.config import AppConfig
from teleport_mcp_server.mcp_server.context import ServerContext, ServerSettings
from teleport_mcp_server.mcp_server.server import (
    TeleportMCPServer,
    is_client_disconnect_error,
    is_client_disconnect_group,
)


@pytest.fixture
def config():
    return AppConfig.model_validate({"server": {"dry_run": True}})


class TestMCPServerTools:
    """Test MCP server tool registration."""

    @pytest.mark.asyncio
    async def test_server_tool_registration(self, config):
        server = TeleportMCPServer(config)
        await server.initialize()

        registry = server.tool_registry
        assert registry.get_tool_count() == 9
        assert sorted(registry.get_tools_by_category("auth")) == [
            "teleport_list_clusters",
            "teleport_login",
            "teleport_status",
        ]
        assert sorted(registry.get_tools_by_category("ssh")) == [
            "teleport_list_ssh_nodes",
            "teleport_resolve",
            "teleport_scp",
            "teleport_ssh",
        ]
        assert sorted(registry.get_tools_by_category("kube")) == [
            "teleport_kube_list_clusters",
            "teleport_kube_login",
        ]
        assert registry.get_tools_by_category("db") == []

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, config):
        server = TeleportMCPServer(config)
        await server.initialize()
        await server.initialize()
        assert server.tool_registry.get_tool_count() == 9

    @pytest.mark.asyncio
    async def test_registration_logs_each_category(self, config, caplog, enable_logging):
        server = TeleportMCPServer(config)
        with caplog.at_level("DEBUG", logger="teleport_mcp_server.mcp_server.server"):
            await server.initialize()

        assert "Category 'kube': teleport_kube_list_clusters, teleport_kube_login" in caplog.text
        assert "Registered 9 tools across 3 categories" in caplog.text

    @pytest.mark.asyncio
    async def test_tools_run_through_pipeline(self, config):
        server = TeleportMCPServer(config)
        await server.initialize()

        response = await server.tool_registry.dispatch(
            "teleport_resolve", {"host": "web-01", "proxyParam": "teleport.example.com"}
        )

        assert not response.is_error
        assert response.text == (
            "DRY RUN: Would execute: tsh resolve --proxy=teleport.example.com --format json web-01"
        )

    @pytest.mark.asyncio
    async def test_settings_come_from_config(self):
        config = AppConfig.model_validate(
            {"teleport": {"binary": "/opt/tsh"}, "server": {"dry_run": True}}
        )
        server = TeleportMCPServer(config)
        await server.initialize()

        response = await server.tool_registry.dispatch("teleport_status", {})
        assert response.text == "DRY RUN: Would execute: /opt/tsh status"

    @pytest.mark.asyncio
    async def test_explicit_context_wins(self, config):
        context = ServerContext(ServerSettings(dry_run=True, tsh_binary="tsh-dev"))
        server = TeleportMCPServer(config, context=context)
        await server.initialize()

        response = await server.tool_registry.dispatch("teleport_status", {})
        assert response.text == "DRY RUN: Would execute: tsh-dev status"

    @pytest.mark.asyncio
    async def test_shutdown(self, config):
        server = TeleportMCPServer(config)
        await server.initialize()
        await server.shutdown()

        assert server.context.is_shutting_down
        assert server.tool_registry.get_tool_count() == 0


class TestTransports:
    def test_sse_app_routes(self, config):
        server = TeleportMCPServer(config)
        app = server.build_sse_app()

        assert isinstance(app, Starlette)
        paths = [route.path for route in app.routes]
        assert "/sse" in paths
        assert "/message" in paths

    def test_streamable_http_app_routes(self):
        config = AppConfig.model_validate({"server": {"http_endpoint": "/teleport"}})
        app = TeleportMCPServer(config).build_streamable_http_app()

        assert isinstance(app, Starlette)
        assert [route.path for route in app.routes] == ["/teleport"]

    @pytest.mark.asyncio
    async def test_unsupported_transport(self, config):
        server = TeleportMCPServer(config)
        with pytest.raises(ValueError, match="Unsupported transport"):
            await server.run("websocket")

    def test_initialization_options(self, config):
        options = TeleportMCPServer(config).initialization_options()
        assert options.server_name == "mcp-teleport"
        assert "teleport_ssh" in options.instructions


class TestClientDisconnect:
    @pytest.mark.parametrize(
        "exception",
        [BrokenPipeError(), ConnectionResetError(), OSError("[Errno 32] Broken pipe")],
    )
    def test_disconnect_errors(self, exception):
        assert is_client_disconnect_error(exception)

    def test_other_errors(self):
        assert not is_client_disconnect_error(ValueError("bad input"))

    def test_groups(self):
        assert is_client_disconnect_group(
            BaseExceptionGroup("x", [BrokenPipeError(), ExceptionGroup("y", [ConnectionResetError()])])
        )
        assert not is_client_disconnect_group(
            BaseExceptionGroup("x", [BrokenPipeError(), RuntimeError("boom")])
        )
