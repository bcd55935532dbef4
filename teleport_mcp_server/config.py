"""Configuration management for the Teleport MCP server."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Tuple, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .teleport.results import DEFAULT_COMMAND_TIMEOUT

MAX_COMMAND_TIMEOUT = 300
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

Transport = Literal["stdio", "sse", "streamable-http"]


def parse_http_addr(addr: str) -> Tuple[str, int]:
    """Split a listen address into host and port.

    ``":8080"`` listens on all interfaces; IPv6 hosts may be bracketed
    (``"[::1]:8080"``).
    """
    host, sep, port_text = addr.rpartition(":")
    if not sep:
        raise ValueError(f"Invalid HTTP address '{addr}': expected [host]:port")
    try:
        port = int(port_text)
    except ValueError:
        raise ValueError(f"Invalid HTTP address '{addr}': port must be a number") from None
    if not 0 < port < 65536:
        raise ValueError(f"Invalid HTTP address '{addr}': port out of range")

    host = host.strip("[]") or "0.0.0.0"
    return host, port


class TeleportConfig(BaseModel):
    """Configuration for the tsh client."""

    binary: str = Field(default="tsh", description="tsh executable name or path")
    command_timeout: float = Field(
        default=DEFAULT_COMMAND_TIMEOUT, description="Command timeout in seconds"
    )

    @field_validator("binary")
    @classmethod
    def validate_binary(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("binary cannot be empty")
        return v.strip()

    @field_validator("command_timeout")
    @classmethod
    def validate_command_timeout(cls, v: float) -> float:
        """Validate command_timeout is reasonable."""
        if v <= 0:
            raise ValueError("command_timeout must be positive")
        if v > MAX_COMMAND_TIMEOUT:
            raise ValueError(f"command_timeout should not exceed {MAX_COMMAND_TIMEOUT} seconds")
        return v


class ServerConfig(BaseModel):
    """Configuration for the MCP server and its transports."""

    dry_run: bool = Field(default=False, description="Describe commands instead of running them")
    debug: bool = Field(default=False, description="Enable debug logging")
    non_destructive: bool = Field(default=True, description="Non-destructive mode")
    transport: Transport = Field(default="stdio", description="MCP transport")
    http_addr: str = Field(default=":8080", description="Listen address for HTTP transports")
    sse_endpoint: str = Field(default="/sse", description="SSE stream endpoint")
    message_endpoint: str = Field(default="/message", description="SSE message endpoint")
    http_endpoint: str = Field(default="/mcp", description="Streamable HTTP endpoint")

    @field_validator("http_addr")
    @classmethod
    def validate_http_addr(cls, v: str) -> str:
        parse_http_addr(v)
        return v

    @field_validator("sse_endpoint", "message_endpoint", "http_endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError(f"endpoint must start with '/': {v}")
        return v


class AppConfig(BaseModel):
    """Main application configuration."""

    teleport: TeleportConfig = Field(default_factory=TeleportConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}")
        return level


def load_config_file(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load configuration from a YAML or JSON file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger = logging.getLogger(__name__)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.suffix.lower() in [".yaml", ".yml"]:
                return yaml.safe_load(f) or {}
            elif config_path.suffix.lower() == ".json":
                return json.load(f) or {}
            else:
                raise ValueError(f"Unsupported config file format: {config_path.suffix}")

    except Exception as e:
        logger.error(f"Failed to load config file {config_path}: {e}")
        raise


def find_config_file() -> Optional[Path]:
    """Find configuration file in standard locations."""
    search_paths = [
        Path.cwd() / ".mcp-teleport.yaml",
        Path.cwd() / ".mcp-teleport.yml",
        Path.cwd() / ".mcp-teleport.json",
        Path.home() / ".config" / "mcp-teleport" / "config.yaml",
        Path.home() / ".config" / "mcp-teleport" / "config.yml",
        Path.home() / ".config" / "mcp-teleport" / "config.json",
    ]

    for config_path in search_paths:
        if config_path.exists():
            return config_path

    return None


def merge_config(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
    """Merge configuration dictionaries with override taking precedence."""
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value

    return merged


def remove_none_values(d: Any) -> Any:
    if isinstance(d, dict):
        return {k: remove_none_values(v) for k, v in d.items() if v is not None}
    return d


def parse_bool(value: Any) -> Any:
    """Interpret an environment string as a boolean; other values pass through."""
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return value


def _env_config() -> Dict[str, Any]:
    env_config = {
        "teleport": {
            "binary": os.getenv("TELEPORT_TSH_BINARY"),
            "command_timeout": os.getenv("TELEPORT_COMMAND_TIMEOUT"),
        },
        "server": {
            "dry_run": os.getenv("MCP_TELEPORT_DRY_RUN"),
            "debug": os.getenv("MCP_TELEPORT_DEBUG"),
            "non_destructive": os.getenv("MCP_TELEPORT_NON_DESTRUCTIVE"),
            "transport": os.getenv("MCP_TELEPORT_TRANSPORT"),
            "http_addr": os.getenv("MCP_TELEPORT_HTTP_ADDR"),
        },
        "log_level": os.getenv("LOG_LEVEL"),
    }
    env_config = remove_none_values(env_config)

    server = env_config["server"]
    for key in ("dry_run", "debug", "non_destructive"):
        if key in server:
            server[key] = parse_bool(server[key])
    return env_config


def load_config(
    config_file: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> AppConfig:
    """Load configuration from multiple sources with priority order.

    Priority (highest to lowest):
    1. Explicit overrides (CLI flags)
    2. Environment variables (including a .env file)
    3. Specified or auto-discovered config file
    4. Default values

    Raises:
        FileNotFoundError: The specified config file does not exist
        pydantic.ValidationError: A value is invalid
    """
    logger = logging.getLogger(__name__)

    config_data: Dict[str, Any] = {}

    if config_file:
        config_path = Path(config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Specified config file not found: {config_path}")
        config_data = load_config_file(config_path)
        logger.info(f"Loaded configuration from: {config_path}")
    else:
        config_path = find_config_file()
        if config_path:
            config_data = load_config_file(config_path)
            logger.info(f"Auto-discovered configuration file: {config_path}")

    load_dotenv()

    final_config = merge_config(config_data, _env_config())
    final_config = merge_config(final_config, remove_none_values(overrides or {}))

    return AppConfig.model_validate(final_config)
