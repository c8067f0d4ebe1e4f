"""Routes tool invocations: lookup, validation, execution."""

import logfire
import time
from loguru import logger
from tl.ado_tools_server.errors import InvalidArgumentsError, RemoteApiError, UnknownToolError
from tl.ado_tools_server.tools import ToolRegistry
from typing import Any, Mapping, Optional


class ToolDispatcher:
    """Invokes registered tools by name.

    Invocations share no mutable state and may run concurrently.
    """

    def __init__(self, registry: ToolRegistry) -> None:
        self.registry = registry

    async def invoke(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> str:
        """Validate arguments and run the named tool.

        Args:
            name: Registered tool name
            arguments: Raw arguments supplied by the caller

        Returns:
            The tool's result string

        Raises:
            UnknownToolError: If no tool has this name
            InvalidArgumentsError: If the arguments do not match the tool's schema
            RemoteApiError: If the Azure DevOps API rejected the request
        """
        tool = self.registry.get(name)
        if tool is None:
            logger.error(f'Tool "{name}" not found')
            logfire.error('Unknown tool invoked', tool=name)
            raise UnknownToolError(name, self.registry.names())

        try:
            params = tool.parameters.validate(name, arguments)
        except InvalidArgumentsError as e:
            logger.warning(str(e))
            logfire.warn(
                'Tool arguments rejected',
                tool=name,
                fields=[v.field for v in e.violations],
            )
            raise

        started = time.monotonic()
        try:
            result = await tool.execute(params)
        except RemoteApiError as e:
            logger.error(f'Tool "{name}" failed: {e}')
            logfire.error('Tool failed', tool=name, status_code=e.status_code)
            raise
        except Exception as e:
            logger.exception(f'Tool "{name}" failed unexpectedly')
            logfire.error('Tool failed unexpectedly', tool=name, error=str(e))
            raise

        duration_ms = (time.monotonic() - started) * 1000
        logger.info(f'Tool "{name}" completed in {duration_ms:.0f} ms')
        logfire.info('Tool completed', tool=name, duration_ms=duration_ms)
        return result
