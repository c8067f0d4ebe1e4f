"""Azure DevOps tool server.

This module provides the MCP front-end: it advertises the tool registry,
routes tool calls through the dispatcher, and starts the stdio or SSE
transport.
"""

import logfire
import sys
from loguru import logger
from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import TextContent
from mcp.types import Tool as MCPTool
from tl.ado_tools_server import __version__
from tl.ado_tools_server.ado_client import AzureDevOpsClient
from tl.ado_tools_server.config import ADOConfig, load_config, load_dotenv_file
from tl.ado_tools_server.dispatcher import ToolDispatcher
from tl.ado_tools_server.errors import ADOToolsError, ConfigurationError
from tl.ado_tools_server.tools import build_tool_registry
from typing import Any, Dict, List, Optional, Sequence


SERVER_NAME = 'tl.ado-tools-server'

SSE_PATH = '/sse'

SERVER_INSTRUCTIONS = """
You are an Azure DevOps assistant working inside a single Azure DevOps project.
You can:

1. Create and list Git repositories
2. List the branches and commit history of a repository
3. Open pull requests and comment on them
4. List pipelines and trigger pipeline runs

Repository tools take the repository ID (or name). Branch names may be given
short (main) or fully qualified (refs/heads/main). List results are the first
page returned by Azure DevOps.
"""

SERVER_DEPENDENCIES: list[str] = [
    'requests',
    'python-dotenv',
    'loguru',
    'logfire',
    'pydantic',
]


class AzureDevOpsMCP(FastMCP):
    """FastMCP server whose tools come from a ``ToolDispatcher``."""

    def __init__(self, dispatcher: ToolDispatcher, **settings: Any) -> None:
        """Initialize the server.

        Args:
            dispatcher: Dispatcher holding the tool registry
            **settings: FastMCP settings such as host, port and sse_path
        """
        self.dispatcher = dispatcher
        super().__init__(
            SERVER_NAME,
            instructions=SERVER_INSTRUCTIONS,
            dependencies=SERVER_DEPENDENCIES,
            **settings,
        )

    async def list_tools(self) -> List[MCPTool]:
        """Advertise every registered tool with its parameter schema."""
        return [
            MCPTool(
                name=tool.name,
                description=tool.description,
                inputSchema=tool.parameters.json_schema(),
            )
            for tool in self.dispatcher.registry
        ]

    async def call_tool(
        self, name: str, arguments: Optional[Dict[str, Any]]
    ) -> Sequence[TextContent]:
        """Run a tool, turning every failure into an MCP tool error."""
        try:
            result = await self.dispatcher.invoke(name, arguments)
        except ADOToolsError as e:
            raise ToolError(str(e)) from e
        except Exception as e:
            raise ToolError(f'Error executing tool {name}: {e}') from e
        return [TextContent(type='text', text=result)]


def create_server(config: ADOConfig) -> AzureDevOpsMCP:
    """Wire configuration, client, registry and dispatcher into a server."""
    client = AzureDevOpsClient(config)
    registry = build_tool_registry(client)
    dispatcher = ToolDispatcher(registry)
    server = AzureDevOpsMCP(dispatcher, host='0.0.0.0', port=config.port, sse_path=SSE_PATH)

    logger.info(f'Registered {len(registry)} tools: {", ".join(registry.names())}')
    return server


def setup_logging(logfire_write_token: Optional[str]) -> None:
    """Set up logging configuration."""
    if not logfire_write_token:
        logger.warning('LOGFIRE_WRITE_TOKEN not found in environment variables.')
    else:
        logger.info('LOGFIRE_WRITE_TOKEN successfully loaded.')

    logfire.configure(
        token=logfire_write_token or None,
        send_to_logfire='if-token-present',
        service_name=SERVER_NAME,
        service_version=__version__,
        console=False,
    )
    # stdout carries the stdio transport, so local logs go to stderr.
    logger.configure(
        handlers=[{'sink': sys.stderr, 'level': 'INFO'}, logfire.loguru_handler()]
    )


def main() -> None:
    """Main entry point to start the MCP server."""
    load_dotenv_file()

    try:
        config = load_config()
    except ConfigurationError as e:
        logger.error(f'Invalid configuration: {e}')
        sys.exit(1)

    setup_logging(config.logfire_token)

    server = create_server(config)
    if config.transport == 'sse':
        logger.info(f'Starting Azure DevOps tool server on port {config.port} at {SSE_PATH}')
    else:
        logger.info('Starting Azure DevOps tool server on stdio')
    server.run(transport=config.transport)


if __name__ == '__main__':
    main()
