"""Unit tests for request context utilities and request ID logging."""

import asyncio
import logging

import pytest

from teleport_mcp_server.logging_utils import RequestIDFormatter, setup_logging
from teleport_mcp_server.utils.request_context import (
    REQUEST_ID_CONTEXT,
    format_request_id,
    generate_request_id,
    get_request_id,
    set_request_id,
)


class TestRequestIDGeneration:
    """Test request ID generation functions."""

    def test_generate_request_id_format(self):
        request_id = generate_request_id()

        assert request_id.startswith("req_")
        assert len(request_id) == 10  # 'req_' + 6 hex chars
        int(request_id[4:], 16)

    def test_generate_request_id_uniqueness(self):
        ids = [generate_request_id() for _ in range(100)]
        assert len(set(ids)) > 95


class TestRequestIDContext:
    """Test request ID context management."""

    def setup_method(self):
        REQUEST_ID_CONTEXT.set(None)

    def test_get_set_request_id(self):
        assert get_request_id() is None
        set_request_id("req_a1b2c3")
        assert get_request_id() == "req_a1b2c3"

    def test_format_request_id(self):
        assert format_request_id("req_a1b2c3") == "req_a1b2c3"
        assert format_request_id(None) == "req_unknown"

    @pytest.mark.asyncio
    async def test_concurrent_tasks_are_isolated(self):
        async def worker(request_id):
            set_request_id(request_id)
            await asyncio.sleep(0.01)
            return get_request_id()

        results = await asyncio.gather(worker("req_000001"), worker("req_000002"))
        assert results == ["req_000001", "req_000002"]


class TestRequestIDFormatter:
    """Test the log formatter."""

    def make_record(self):
        return logging.LogRecord("teleport_mcp_server", logging.INFO, __file__, 1, "Executing", None, None)

    def test_includes_current_request_id(self):
        token = REQUEST_ID_CONTEXT.set("req_abcdef")
        try:
            text = RequestIDFormatter().format(self.make_record())
        finally:
            REQUEST_ID_CONTEXT.reset(token)
        assert "[req_abcdef] INFO teleport_mcp_server: Executing" in text

    def test_unknown_outside_a_request(self):
        token = REQUEST_ID_CONTEXT.set(None)
        try:
            text = RequestIDFormatter().format(self.make_record())
        finally:
            REQUEST_ID_CONTEXT.reset(token)
        assert "[req_unknown]" in text

    def test_custom_format_gets_request_id(self):
        formatter = RequestIDFormatter("%(levelname)s %(message)s")
        assert "[%(request_id)s] %(levelname)s" in formatter._fmt


class TestSetupLogging:
    def test_single_stderr_handler(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging("debug")
            setup_logging("debug")
            assert len(root.handlers) == 1
            assert root.level == logging.DEBUG
            assert isinstance(root.handlers[0].formatter, RequestIDFormatter)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            setup_logging("chatty")
