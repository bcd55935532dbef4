"""Tests for MCP server error sanitization."""

from pathlib import Path
from unittest.mock import patch

from teleport_mcp_server.mcp_server.utils import sanitize_error


class TestSanitizeError:
    """Test cases for sanitize_error function."""

    def test_simple_error_message(self):
        assert sanitize_error(ValueError("Simple error message")) == "Simple error message"

    def test_home_directory_replacement(self):
        home_path = str(Path.home())
        result = sanitize_error(FileNotFoundError(f"{home_path}/.tsh/keys/profile not found"))
        assert home_path not in result
        assert "profile not found" in result

    def test_home_directory_is_collapsed_before_path_removal(self):
        with patch("teleport_mcp_server.mcp_server.utils.errors.Path.home", return_value=Path("/home/user")):
            result = sanitize_error(FileNotFoundError("/home/user/.tsh/keys/profile not found"))
        assert result == "~profile not found"

    def test_full_path_removal(self):
        result = sanitize_error(PermissionError("cannot open /etc/teleport/tls/key.pem"))
        assert "/etc/teleport/tls/" not in result
        assert result == "cannot open key.pem"

    def test_long_error_message_truncation(self):
        result = sanitize_error(RuntimeError("x" * 500))
        assert len(result) == 203
        assert result.endswith("...")

    def test_exact_limit_is_not_truncated(self):
        assert sanitize_error(RuntimeError("y" * 200)) == "y" * 200

    def test_empty_error_message(self):
        assert sanitize_error(TimeoutError()) == "TimeoutError"

    def test_sanitization_exception_fallback(self):
        with patch("teleport_mcp_server.mcp_server.utils.errors.Path.home", side_effect=RuntimeError):
            assert sanitize_error(ValueError("x")) == "Internal server error occurred"
