"""MCPClient: one live connection to one MCP tool server.

Clients are only obtained from :func:`connect`, :meth:`MCPClient.from_command`
or :meth:`MCPClient.from_http`. Each of those builds the transport, performs the
MCP handshake and discovers the server's tools before returning, so a client
in the caller's hands is always connected and has a tool list.

Usage::

    async with await connect(StdioServerConfig(command="uvx", args=["mcp-server-time"])) as client:
        print([spec.name for spec in client.tools])
        result = await client.call_tool("get_current_time", {"timezone": "UTC"})
"""

from __future__ import annotations

from collections.abc import Mapping
from contextlib import AsyncExitStack
from typing import Any

from fastmcp import Client
from pydantic import ValidationError

from mcp_bridge.command_resolver import resolve_command
from mcp_bridge.convert_tools import tools_from_mcp
from mcp_bridge.errors import ConfigurationError, McpBridgeError, McpConnectionError
from mcp_bridge.logging import get_logger
from mcp_bridge.models.content import RawFallback, ToolCallResult
from mcp_bridge.models.mcp_server_config import (
    HttpServerConfig,
    McpServerConfig,
    StdioServerConfig,
)
from mcp_bridge.models.tool_spec import NormalizedToolSpec
from mcp_bridge.result_content import parse_tool_result
from mcp_bridge.transports import (
    HttpTransportHandle,
    NoTransport,
    StdioTransportHandle,
    TransportHandle,
    build_stdio_env,
    http_transport,
    stdio_transport,
)

logger = get_logger("client")


def _coerce_http_config(server_config: HttpServerConfig | Mapping[str, Any]) -> HttpServerConfig:
    if isinstance(server_config, HttpServerConfig):
        config = server_config
    else:
        if not server_config.get("url"):
            raise ConfigurationError("URL is required for HTTP transport")
        try:
            config = HttpServerConfig.model_validate(server_config)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid HTTP server config: {e}") from e

    if not config.url:
        raise ConfigurationError("URL is required for HTTP transport")
    return config


class MCPClient:
    """A connected MCP client owning exactly one transport.

    Do not instantiate directly; use :func:`connect` or one of the
    ``from_*`` factories.
    """

    def __init__(self, transport: TransportHandle, session: Client[Any]) -> None:
        self._transport: TransportHandle = transport
        self._session: Client[Any] | None = session
        self._exit_stack = AsyncExitStack()
        self._tools: list[NormalizedToolSpec] = []

    async def __aenter__(self) -> MCPClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.cleanup()

    @classmethod
    async def from_command(
        cls,
        command: str,
        args: list[str] | None = None,
        env: Mapping[str, str] | None = None,
        cwd: str | None = None,
    ) -> MCPClient:
        """Spawn a stdio server process, connect to it and discover its tools."""
        resolved = resolve_command(command)
        if resolved != command:
            logger.info(f"Using resolved command path: {resolved} (original: {command})")

        handle = stdio_transport(resolved, list(args or []), build_stdio_env(env), cwd)
        return await cls._open(handle)

    @classmethod
    async def from_http(cls, server_config: HttpServerConfig | Mapping[str, Any]) -> MCPClient:
        """Open a Streamable HTTP session, connect and discover the server's tools.

        Raises:
            ConfigurationError: If the config has no usable http(s) URL.
                No request is made.
            McpConnectionError: If connecting or listing tools fails.
        """
        config = _coerce_http_config(server_config)
        handle = http_transport(config)
        return await cls._open(handle, timeout=config.timeout_seconds)

    @classmethod
    async def _open(
        cls,
        handle: StdioTransportHandle | HttpTransportHandle,
        timeout: float | None = None,
    ) -> MCPClient:
        client = cls(handle, Client(handle.transport, timeout=timeout))
        try:
            await client._connect()
            await client._load_tools()
        except Exception as e:
            logger.error(f"Failed to connect to {handle.kind} MCP server {handle.target}: {e}")
            await client.cleanup()
            raise McpConnectionError(handle.kind, handle.target, str(e)) from e

        logger.info(f"Connected to {handle.kind} server with tools: {client.tool_names}")
        return client

    async def _connect(self) -> None:
        await self._exit_stack.enter_async_context(self._require_session())

    async def _load_tools(self) -> None:
        mcp_tools = await self._require_session().list_tools()
        # Full replace, never merged with a previous listing
        self._tools = tools_from_mcp(mcp_tools)

    def _require_session(self) -> Client[Any]:
        if self._session is None:
            raise McpBridgeError("MCP client is not connected")
        return self._session

    @property
    def transport(self) -> TransportHandle:
        return self._transport

    @property
    def tools(self) -> list[NormalizedToolSpec]:
        """The tools found at connect time. Never triggers discovery."""
        return list(self._tools)

    @property
    def tool_names(self) -> list[str]:
        return [spec.name for spec in self._tools]

    async def call_tool(self, tool_name: str, tool_input: dict[str, Any] | None = None) -> ToolCallResult:
        """
        Call a tool on the server.

        Returns:
            ParsedContent if the result content is a list of text/image
            blocks, otherwise RawFallback with the full result serialized.
        """
        result = await self._require_session().call_tool_mcp(tool_name, tool_input or {})

        if getattr(result, "isError", False):
            logger.warning(f"Tool {tool_name} reported an error result")

        parsed = parse_tool_result(result)
        if isinstance(parsed, RawFallback):
            logger.debug(f"Returning raw result for {tool_name}")
        return parsed

    async def cleanup(self) -> None:
        """
        Release the transport. Safe to call repeatedly and after a failed connect.

        Closing an HTTP session terminates it on the server before the
        streams close. Failures while closing are logged and discarded.
        """
        handle, self._transport = self._transport, NoTransport()

        match handle:
            case HttpTransportHandle():
                logger.debug(f"Closing HTTP session at {handle.url}")
            case StdioTransportHandle():
                logger.debug(f"Stopping stdio server {handle.command}")
            case NoTransport():
                pass

        try:
            await self._exit_stack.aclose()
        except Exception as e:
            logger.warning(f"Error while closing MCP session: {e}")
        finally:
            self._session = None


async def connect(config: McpServerConfig) -> MCPClient:
    """
    Connect to the server described by ``config`` and discover its tools.

    Raises:
        ConfigurationError: If the config is invalid.
        McpConnectionError: If the server cannot be reached or listed.
    """
    match config:
        case StdioServerConfig():
            return await MCPClient.from_command(
                config.command, config.args, config.env, cwd=config.cwd
            )
        case HttpServerConfig():
            return await MCPClient.from_http(config)
        case _:
            raise ConfigurationError(f"Unsupported server config: {type(config).__name__}")
