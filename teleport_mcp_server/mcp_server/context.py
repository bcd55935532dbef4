"""Server-wide state shared by all tool invocations.

The only mutable pieces are the dry-run and debug toggles and the shutdown
event. Invocations never read the toggles individually: each one takes a
``ServerSettings`` snapshot when it starts and uses it to the end, so a
toggle flipped mid-call does not affect a call already in flight.
"""

import asyncio
import logging
import threading
from typing import Optional, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from ..teleport.executor import CommandExecutor
from ..teleport.results import DEFAULT_COMMAND_TIMEOUT

if TYPE_CHECKING:
    from ..config import AppConfig

logger = logging.getLogger(__name__)


class ServerSettings(BaseModel):
    """Immutable snapshot of the server-wide flags."""

    model_config = ConfigDict(frozen=True)

    dry_run: bool = Field(default=False, description="Describe commands instead of running them")
    debug: bool = Field(default=False, description="Log every command line at INFO level")
    non_destructive: bool = Field(default=True, description="Non-destructive mode flag")
    tsh_binary: str = Field(default="tsh", description="tsh executable name or path")
    command_timeout: float = Field(
        default=DEFAULT_COMMAND_TIMEOUT, description="Seconds before a command is killed"
    )

    @classmethod
    def from_config(cls, config: "AppConfig") -> "ServerSettings":
        return cls(
            dry_run=config.server.dry_run,
            debug=config.server.debug,
            non_destructive=config.server.non_destructive,
            tsh_binary=config.teleport.binary,
            command_timeout=config.teleport.command_timeout,
        )


class ServerContext:
    """Owns the settings snapshot, the logger and the shutdown signal."""

    def __init__(
        self,
        settings: Optional[ServerSettings] = None,
        logger_: Optional[logging.Logger] = None,
    ):
        self._lock = threading.Lock()
        self._settings = settings or ServerSettings()
        self._logger = logger_ or logging.getLogger("teleport_mcp_server")
        self._shutdown_event = asyncio.Event()
        self._shut_down = False

    def snapshot(self) -> ServerSettings:
        with self._lock:
            return self._settings

    @property
    def logger(self) -> logging.Logger:
        with self._lock:
            return self._logger

    @property
    def shutdown_event(self) -> asyncio.Event:
        return self._shutdown_event

    @property
    def is_shutting_down(self) -> bool:
        return self._shutdown_event.is_set()

    def set_dry_run(self, enabled: bool) -> None:
        with self._lock:
            self._settings = self._settings.model_copy(update={"dry_run": enabled})
        logger.info(f"Dry-run mode {'enabled' if enabled else 'disabled'}")

    def set_debug_mode(self, enabled: bool) -> None:
        with self._lock:
            self._settings = self._settings.model_copy(update={"debug": enabled})
        logger.info(f"Debug mode {'enabled' if enabled else 'disabled'}")

    def create_executor(self, settings: ServerSettings) -> CommandExecutor:
        """Executor bound to ``settings`` and to this context's shutdown event."""
        return CommandExecutor(
            binary=settings.tsh_binary,
            timeout=settings.command_timeout,
            shutdown_event=self._shutdown_event,
            debug=settings.debug,
        )

    def shutdown(self) -> None:
        """Signal in-flight commands to stop. Safe to call more than once."""
        with self._lock:
            if self._shut_down:
                return
            self._shut_down = True
        self._shutdown_event.set()
        logger.info("Server context shut down")
