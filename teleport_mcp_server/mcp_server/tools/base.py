"""Base class for tool categories backed by tsh operations."""

import logging
from typing import Any, Dict, Tuple

from mcp.types import Tool

from ...teleport.operations import Operation
from ..config.tool_definitions import get_tool_schema
from ..handlers.registry import ToolHandler
from ..pipeline import Response, ToolPipeline

logger = logging.getLogger(__name__)


class OperationTools:
    """A category of tools, each running one operation through the pipeline.

    Subclasses only list their operations; schemas come from
    ``config.tool_definitions``.
    """

    operations: Tuple[Operation, ...] = ()

    def __init__(self, pipeline: ToolPipeline):
        """Initialize the tool category.

        Args:
            pipeline: Pipeline that runs the category's operations
        """
        self.pipeline = pipeline
        self._tool_handlers: Dict[str, ToolHandler] = {}
        self._tools: Dict[str, Tool] = {}

    def get_tools(self) -> Dict[str, Tool]:
        return self._tools.copy()

    def get_handlers(self) -> Dict[str, ToolHandler]:
        return self._tool_handlers.copy()

    def register_tools(self) -> None:
        """Register all tools and handlers of the category."""
        for operation in self.operations:
            schema = get_tool_schema(operation.name)
            self._tools[operation.name] = Tool(
                name=schema["name"],
                description=schema["description"],
                inputSchema=schema["inputSchema"],
            )
            self._tool_handlers[operation.name] = self._make_handler(operation)
        logger.debug(
            f"{self.__class__.__name__} registered {len(self._tools)} tools"
        )

    def _make_handler(self, operation: Operation) -> ToolHandler:
        async def handler(arguments: Dict[str, Any]) -> Response:
            return await self.pipeline.invoke(operation, arguments)

        handler.__name__ = operation.name
        return handler
