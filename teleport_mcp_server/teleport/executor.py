"""Runs tsh commands.

One invocation spawns at most one process and never retries. A live
execution ends in one of four ways:

- the process exits (any status)
- the wall clock timeout fires: the process is killed, output so far is kept
- the server shutdown event is set: the process is killed, output so far is kept
- the calling task is cancelled: the process is killed and the
  cancellation propagates

Dry-run mode never spawns anything and only describes the command line.
"""

import asyncio
import logging
import shlex
from enum import Enum
from typing import List, Optional

from .flags import CommandSpec
from .results import DEFAULT_COMMAND_TIMEOUT, ExecutionResult, RawOutcome, classify_outcome

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 65536
KILL_GRACE_SECONDS = 5.0


class ExecutionMode(str, Enum):
    DRY_RUN = "dry_run"
    LIVE = "live"


def _decode(chunks: List[bytes]) -> str:
    return b"".join(chunks).decode("utf-8", errors="replace")


class CommandExecutor:
    """Executes tsh subcommands with a bounded wall clock timeout."""

    def __init__(
        self,
        binary: str = "tsh",
        timeout: float = DEFAULT_COMMAND_TIMEOUT,
        shutdown_event: Optional[asyncio.Event] = None,
        debug: bool = False,
    ):
        """Initialize the executor.

        Args:
            binary: tsh executable name or path
            timeout: Seconds before a running command is killed
            shutdown_event: Event that aborts in-flight commands when set
            debug: Log command lines and exit status at INFO instead of DEBUG
        """
        self.binary = binary
        self.timeout = timeout
        self.shutdown_event = shutdown_event
        self.debug = debug

    def describe(self, command: CommandSpec) -> str:
        """Shell-quoted command line, as it would be typed."""
        return shlex.join(command.argv(self.binary))

    async def execute(
        self, command: CommandSpec, mode: ExecutionMode = ExecutionMode.LIVE
    ) -> ExecutionResult:
        description = self.describe(command)

        if mode is ExecutionMode.DRY_RUN:
            logger.info(f"DRY RUN: would execute {description}")
            return ExecutionResult(
                success=True,
                output=f"DRY RUN: Would execute: {description}",
                status_code=0,
            )

        level = logging.INFO if self.debug else logging.DEBUG
        logger.log(level, f"Executing: {description}")

        outcome = await self._run(command.argv(self.binary))
        result = classify_outcome(outcome, self.timeout)

        logger.log(
            level,
            f"Command finished: {description} (status={result.status_code}, success={result.success})",
        )
        if not result.success:
            logger.warning(f"Command failed: {description}: {result.error_message}")
        return result

    async def _run(self, argv: List[str]) -> RawOutcome:
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            return RawOutcome(error=f"failed to start {argv[0]}: {e}")

        chunks: List[bytes] = []

        async def drain() -> int:
            while True:
                chunk = await process.stdout.read(READ_CHUNK_SIZE)
                if not chunk:
                    break
                chunks.append(chunk)
            return await process.wait()

        run_task = asyncio.ensure_future(drain())
        stop_task = None
        waiters = {run_task}
        if self.shutdown_event is not None:
            stop_task = asyncio.ensure_future(self.shutdown_event.wait())
            waiters.add(stop_task)

        try:
            done, _ = await asyncio.wait(
                waiters, timeout=self.timeout, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            await self._terminate(process, run_task)
            raise
        finally:
            if stop_task is not None:
                stop_task.cancel()

        if run_task in done:
            try:
                exit_code = run_task.result()
            except OSError as e:
                return RawOutcome(output=_decode(chunks), error=f"reading output failed: {e}")
            return RawOutcome(output=_decode(chunks), exit_code=exit_code)

        await self._terminate(process, run_task)
        shutting_down = stop_task is not None and stop_task in done
        return RawOutcome(
            output=_decode(chunks),
            exit_code=process.returncode,
            timed_out=not shutting_down,
            cancelled=shutting_down,
        )

    async def _terminate(self, process: asyncio.subprocess.Process, run_task: asyncio.Future) -> None:
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass

        # a grandchild may keep the pipe open after the kill
        done, _ = await asyncio.wait({run_task}, timeout=KILL_GRACE_SECONDS)
        if run_task not in done:
            logger.warning(f"Process {process.pid} did not exit after kill, abandoning it")
            run_task.cancel()
        elif not run_task.cancelled() and run_task.exception() is not None:
            logger.debug(f"Output reader failed after kill: {run_task.exception()}")
