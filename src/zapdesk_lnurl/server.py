"""Zapdesk LNURL MCP server: Lightning Address tips as tools."""

import asyncio
import sys
from typing import Any, Dict, Optional

import structlog
from mcp import types
from mcp.server import Server
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server
from mcp.types import Tool

from . import __version__
from .client import LnurlConfig
from .resolver.service import LightningAddressResolver
from .tools import ResolverTools
from .utils.logging_config import configure_logging

logger = structlog.get_logger(__name__)

SERVER_NAME = "zapdesk-lnurl"


class ZapdeskMCPServer:
    """MCP server wrapping a single shared LightningAddressResolver."""

    def __init__(self, config: Optional[LnurlConfig] = None):
        self.config = config or LnurlConfig()
        self.server = Server(SERVER_NAME)
        self.resolver = LightningAddressResolver(self.config)
        self.tools = ResolverTools(self.resolver)

        self._register_handlers()

    # ------------------------------------------------------------------
    # MCP handlers
    # ------------------------------------------------------------------

    def _register_handlers(self) -> None:
        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            return self.tools.get_tools()

        @self.server.call_tool()
        async def call_tool(name: str, arguments: Dict[str, Any]) -> list[types.TextContent]:
            return await self.handle_call(name, arguments)

    async def handle_call(
        self, name: str, arguments: Optional[Dict[str, Any]]
    ) -> list[types.TextContent]:
        try:
            logger.info("call_tool", tool=name)
            text = await self.tools.call_tool(name, arguments or {})
        except ValueError as e:
            logger.warning("Rejected tool call", error=str(e), tool=name)
            text = str(e)
        except Exception as e:
            logger.error("Unexpected error", error=str(e), tool=name, exc_info=True)
            text = f"Error: {e}"
        return [types.TextContent(type="text", text=text)]

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def run(self) -> None:
        logger.info("Starting Zapdesk LNURL MCP server")
        try:
            async with self.resolver:
                async with stdio_server() as (read_stream, write_stream):
                    await self.server.run(
                        read_stream,
                        write_stream,
                        InitializationOptions(
                            server_name=SERVER_NAME,
                            server_version=__version__,
                            capabilities=types.ServerCapabilities(
                                tools=types.ToolsCapability(listChanged=False),
                            ),
                        ),
                    )
        finally:
            logger.info("Zapdesk LNURL MCP server stopped")


# ------------------------------------------------------------------
# Entry points
# ------------------------------------------------------------------


async def async_main() -> None:
    config = LnurlConfig()
    configure_logging(config.log_level)

    try:
        server = ZapdeskMCPServer(config)
        await server.run()
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
    except Exception as e:
        logger.error("Server error", error=str(e), exc_info=True)
        sys.exit(1)


def main() -> None:
    """Synchronous entry point for console script."""
    asyncio.run(async_main())


if __name__ == "__main__":
    main()
