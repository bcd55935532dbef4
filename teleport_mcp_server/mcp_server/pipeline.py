"""The tool invocation pipeline.

normalize -> validate -> build -> execute -> classify -> format -> respond

Every failure mode below the registry ends up as a ``Response`` with
``is_error`` set; only cancellation of the calling task propagates.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from mcp.types import TextContent

from ..teleport.executor import CommandExecutor, ExecutionMode
from ..teleport.formatters import OutputParseError
from ..teleport.operations import Operation
from ..teleport.parameters import ValidationError, normalize_parameters
from ..teleport.results import ExecutionResult
from .context import ServerContext, ServerSettings

logger = logging.getLogger(__name__)

ExecutorFactory = Callable[[ServerSettings], CommandExecutor]


@dataclass(frozen=True)
class Response:
    """Text segments returned to the client, plus the error flag."""

    content: Tuple[str, ...]
    is_error: bool = False

    @property
    def text(self) -> str:
        return "\n".join(self.content)

    def to_text_content(self) -> List[TextContent]:
        return [TextContent(type="text", text=segment) for segment in self.content]


class ResponseBuilder:
    """Builds the response for each pipeline outcome."""

    @staticmethod
    def success(text: str) -> Response:
        return Response((text,))

    @staticmethod
    def error(message: str) -> Response:
        return Response((f"Error: {message}",), is_error=True)

    @classmethod
    def validation_failure(cls, error: ValidationError) -> Response:
        return cls.error(error.message)

    @staticmethod
    def execution_failure(result: ExecutionResult) -> Response:
        return Response((f"Error: {result.error_message}\n{result.output}",), is_error=True)


class ToolPipeline:
    """Runs one operation per call against the current server settings."""

    def __init__(self, context: ServerContext, executor_factory: Optional[ExecutorFactory] = None):
        """Initialize the pipeline.

        Args:
            context: Shared server context
            executor_factory: Builds the executor for a settings snapshot,
                defaults to ``context.create_executor``
        """
        self.context = context
        self._executor_factory = executor_factory or context.create_executor

    async def invoke(self, operation: Operation, arguments: Any) -> Response:
        settings = self.context.snapshot()
        params = normalize_parameters(arguments)

        try:
            command = operation.build(params)
        except ValidationError as e:
            logger.info(f"Rejected {operation.name}: {e.message} (fields: {', '.join(e.fields)})")
            return ResponseBuilder.validation_failure(e)

        mode = ExecutionMode.DRY_RUN if settings.dry_run else ExecutionMode.LIVE
        executor = self._executor_factory(settings)
        result = await executor.execute(command, mode)

        if not result.success:
            return ResponseBuilder.execution_failure(result)

        if mode is ExecutionMode.DRY_RUN:
            return ResponseBuilder.success(result.output)

        try:
            text = operation.render(params, result.output)
        except OutputParseError as e:
            logger.warning(f"Could not format {operation.name} output, returning raw text: {e}")
            text = result.output
        return ResponseBuilder.success(text)
