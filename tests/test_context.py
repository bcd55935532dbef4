"""Tests for ServerContext and ServerSettings."""

import pytest
from pydantic import ValidationError

from teleport_mcp_server.config import AppConfig
from teleport_mcp_server.mcp_server.context import ServerContext, ServerSettings


class TestServerSettings:
    def test_defaults(self):
        settings = ServerSettings()
        assert settings.dry_run is False
        assert settings.debug is False
        assert settings.non_destructive is True
        assert settings.tsh_binary == "tsh"
        assert settings.command_timeout == 30.0

    def test_frozen(self):
        with pytest.raises(ValidationError):
            ServerSettings().dry_run = True

    def test_from_config(self):
        config = AppConfig.model_validate(
            {
                "teleport": {"binary": "/opt/tsh", "command_timeout": 12},
                "server": {"dry_run": True, "debug": True},
            }
        )
        settings = ServerSettings.from_config(config)
        assert settings.dry_run is True
        assert settings.debug is True
        assert settings.tsh_binary == "/opt/tsh"
        assert settings.command_timeout == 12


class TestServerContext:
    def test_snapshot_is_stable_across_toggles(self):
        context = ServerContext()
        before = context.snapshot()

        context.set_dry_run(True)
        context.set_debug_mode(True)

        assert before.dry_run is False
        assert before.debug is False
        after = context.snapshot()
        assert after.dry_run is True
        assert after.debug is True

    def test_create_executor_uses_snapshot(self):
        context = ServerContext(ServerSettings(tsh_binary="/usr/local/bin/tsh", command_timeout=5))
        executor = context.create_executor(context.snapshot())

        assert executor.binary == "/usr/local/bin/tsh"
        assert executor.timeout == 5
        assert executor.shutdown_event is context.shutdown_event

    def test_shutdown_is_idempotent(self):
        context = ServerContext()
        assert not context.is_shutting_down

        context.shutdown()
        context.shutdown()

        assert context.is_shutting_down
        assert context.shutdown_event.is_set()

    def test_custom_logger(self):
        import logging

        custom = logging.getLogger("custom")
        assert ServerContext(logger_=custom).logger is custom
