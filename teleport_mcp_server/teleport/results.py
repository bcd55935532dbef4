"""Execution outcomes and their classification.

``RawOutcome`` is what the executor observed; ``ExecutionResult`` is the
uniform view the rest of the pipeline consumes. ``classify_outcome`` maps
one onto the other and never raises.
"""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_COMMAND_TIMEOUT = 30.0


class ExecutionResult(BaseModel):
    """Result of running (or simulating) one tsh command."""

    model_config = ConfigDict(frozen=True)

    success: bool = Field(description="Whether the command completed with exit status 0")
    output: str = Field(default="", description="Combined stdout and stderr")
    error_message: str = Field(default="", description="Failure description, empty on success")
    status_code: int = Field(default=0, description="Process exit status")


@dataclass(frozen=True)
class RawOutcome:
    """What happened to a spawned process, before classification.

    Attributes:
        output: Combined output captured so far (also on timeout)
        exit_code: Process return code, None if it never ran or was not reaped
        error: Spawn or I/O failure description
        timed_out: The wall clock timeout fired
        cancelled: The server shutdown signal interrupted the wait
    """

    output: str = ""
    exit_code: Optional[int] = None
    error: Optional[str] = None
    timed_out: bool = False
    cancelled: bool = False


def _failure_status(exit_code: Optional[int]) -> int:
    if exit_code is None or exit_code == 0:
        return 1
    return exit_code


def classify_outcome(
    outcome: RawOutcome, timeout: float = DEFAULT_COMMAND_TIMEOUT
) -> ExecutionResult:
    """Convert a raw outcome into an ExecutionResult.

    Precedence of failure messages: timeout, shutdown cancellation, spawn or
    I/O error, non-zero exit status.
    """
    if outcome.timed_out:
        return ExecutionResult(
            success=False,
            output=outcome.output,
            error_message=f"Command timed out after {timeout:g} seconds",
            status_code=_failure_status(outcome.exit_code),
        )

    if outcome.cancelled:
        return ExecutionResult(
            success=False,
            output=outcome.output,
            error_message="Command cancelled: server is shutting down",
            status_code=_failure_status(outcome.exit_code),
        )

    if outcome.error:
        return ExecutionResult(
            success=False,
            output=outcome.output,
            error_message=outcome.error,
            status_code=_failure_status(outcome.exit_code),
        )

    if outcome.exit_code is None:
        return ExecutionResult(
            success=False,
            output=outcome.output,
            error_message="Command did not report an exit status",
            status_code=1,
        )

    if outcome.exit_code != 0:
        return ExecutionResult(
            success=False,
            output=outcome.output,
            error_message=f"exit status {outcome.exit_code}",
            status_code=outcome.exit_code,
        )

    return ExecutionResult(success=True, output=outcome.output, status_code=0)
