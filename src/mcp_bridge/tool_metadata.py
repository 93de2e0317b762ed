"""Tool usage descriptions for the agent's system prompt.

Descriptions come from two places: the built-in tool registry, which is
computed once and memoized, and the configured MCP servers, which are queried
on every call because the server configuration may change at any time.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence

from mcp_bridge.builtin_tools import BuiltinToolRegistry
from mcp_bridge.client import MCPClient, connect
from mcp_bridge.logging import get_logger
from mcp_bridge.models.mcp_server_config import McpServerConfig
from mcp_bridge.models.tool_spec import NormalizedToolSpec

logger = get_logger("tool_metadata")

Connector = Callable[[McpServerConfig], Awaitable[MCPClient]]

DEFAULT_MCP_DESCRIPTION = "MCP tool with specific functionality."
MCP_DESCRIPTION_SUFFIX = (
    "\nMCP tool provided by external server.\nRefer to tool documentation for specific usage."
)
DEFAULT_USAGE_DESCRIPTION = (
    "External tool with specific functionality.\nRefer to tool documentation for usage."
)


def _server_label(server: McpServerConfig) -> str:
    if server.name:
        return server.name
    return getattr(server, "url", None) or getattr(server, "command", "")


class DescriptionCache:
    """Memoizes the result of ``loader`` until invalidated."""

    def __init__(self, loader: Callable[[], dict[str, str]]):
        self._loader = loader
        self._value: dict[str, str] | None = None

    @property
    def is_populated(self) -> bool:
        return self._value is not None

    def get(self) -> dict[str, str]:
        if self._value is None:
            self._value = self._loader()
        return self._value

    def invalidate(self) -> None:
        self._value = None


async def _discover_server_tools(
    server: McpServerConfig, connector: Connector
) -> list[NormalizedToolSpec]:
    try:
        client = await connector(server)
    except Exception as e:
        logger.warning(f"Failed to discover tools from MCP server {_server_label(server)}: {e}")
        return []

    try:
        return client.tools
    finally:
        await client.cleanup()


async def get_mcp_tool_specs(
    servers: Sequence[McpServerConfig],
    connector: Connector | None = None,
) -> list[NormalizedToolSpec]:
    """
    Discover the tools of every server, one independent client per server.

    A server that cannot be reached or listed is logged and skipped; the
    specs of the other servers are still returned, in server order.
    Servers are connected through ``connector``, :func:`connect` by default.
    """
    connector = connector or connect
    results = await asyncio.gather(
        *(_discover_server_tools(server, connector) for server in servers)
    )
    return [spec for specs in results for spec in specs]


class ToolMetadataProvider:
    """
    Aggregates system-prompt descriptions of built-in and MCP tools.

    Args:
        builtin_tools: Registry of the host's built-in tools.
        cache: Memo for the built-in descriptions. Created from the
            registry when omitted.
        connector: Coroutine used to connect to each MCP server,
            :func:`~mcp_bridge.client.connect` when omitted.
    """

    def __init__(
        self,
        builtin_tools: BuiltinToolRegistry,
        cache: DescriptionCache | None = None,
        connector: Connector | None = None,
    ):
        self._builtin_tools = builtin_tools
        self._cache = cache or DescriptionCache(builtin_tools.get_system_prompt_descriptions)
        self._connector = connector

    @property
    def cache(self) -> DescriptionCache:
        return self._cache

    def get_system_prompt_descriptions(self) -> dict[str, str]:
        return self._cache.get()

    async def get_mcp_system_prompt_descriptions(
        self, servers: Sequence[McpServerConfig] = ()
    ) -> dict[str, str]:
        descriptions: dict[str, str] = {}

        try:
            specs = await get_mcp_tool_specs(servers, self._connector)
            for spec in specs:
                description = spec.description or DEFAULT_MCP_DESCRIPTION
                descriptions[spec.name] = f"{description}{MCP_DESCRIPTION_SUFFIX}"
        except Exception as e:
            logger.warning(f"Failed to get MCP tool descriptions: {e}")

        return descriptions

    async def get_all_system_prompt_descriptions(
        self, servers: Sequence[McpServerConfig] = ()
    ) -> dict[str, str]:
        """Built-in descriptions take precedence over MCP ones with the same name."""
        mcp_descriptions = await self.get_mcp_system_prompt_descriptions(servers)
        return {**mcp_descriptions, **self.get_system_prompt_descriptions()}

    def get_tool_usage_description(self, tool_name: str) -> str:
        return self.get_system_prompt_descriptions().get(tool_name) or DEFAULT_USAGE_DESCRIPTION

    async def get_tool_usage_description_with_mcp(
        self, tool_name: str, servers: Sequence[McpServerConfig] = ()
    ) -> str:
        descriptions = await self.get_all_system_prompt_descriptions(servers)
        return descriptions.get(tool_name) or DEFAULT_USAGE_DESCRIPTION

    def get_available_tool_names(self) -> list[str]:
        return list(self.get_system_prompt_descriptions())

    async def get_tool_specs(
        self, servers: Sequence[McpServerConfig] = ()
    ) -> list[NormalizedToolSpec]:
        """Built-in specs followed by MCP specs whose names are not already taken."""
        specs = self._builtin_tools.get_tool_specs()
        taken = {spec.name for spec in specs}

        for spec in await get_mcp_tool_specs(servers, self._connector):
            if spec.name in taken:
                logger.debug(f"MCP tool {spec.name} shadowed by a built-in tool")
                continue
            taken.add(spec.name)
            specs.append(spec)

        return specs

    def reset_tool_metadata_cache(self) -> None:
        """Forget the memoized built-in descriptions."""
        self._cache.invalidate()
