import asyncio
import gc
import json
import os
import warnings
from typing import Any

import typer
from dotenv import load_dotenv
from fastmcp.exceptions import ToolError
from mcp.shared.exceptions import McpError
from rich.console import Console
from rich.table import Table

from mcp_bridge.builtin_tools import BuiltinToolRegistry
from mcp_bridge.client import connect
from mcp_bridge.errors import McpBridgeError
from mcp_bridge.logging import configure_logging
from mcp_bridge.models.content import ParsedContent, TextContentBlock
from mcp_bridge.models.mcp_server_config import HttpServerConfig, McpServerConfig
from mcp_bridge.tool_metadata import ToolMetadataProvider
from mcp_bridge.utils import load_config

DEFAULT_CONFIG_PATH = "mcp_bridge_config.json"

# Bridge errors plus JSON-RPC and tool errors raised by the session
CALL_ERRORS = (McpBridgeError, McpError, ToolError)

app = typer.Typer()
console = Console()

ConfigOption = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c", help="Path to the config file")


@app.callback()
def main() -> None:
    """
    Connect to MCP tool servers and inspect their tools.
    """
    load_dotenv()
    configure_logging(os.getenv("LOG_LEVEL", "WARNING"))


def run_async_with_cleanup(coro: Any) -> Any:
    """Run a coroutine, hiding the "Event loop is closed" noise of late subprocess cleanup."""
    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", message="Event loop is closed")
        try:
            return asyncio.run(coro)
        finally:
            gc.collect()


def _describe_auth(server: McpServerConfig) -> str:
    if isinstance(server, HttpServerConfig) and server.auth is not None:
        return server.auth.type
    return ""


@app.command()
def servers(config_path: str = ConfigOption) -> None:
    """
    Return a table of all configured servers
    """
    config = load_config(config_path)
    table = Table("Name", "Type", "Command / Url", "Auth")

    for name, server in config.servers.items():
        if isinstance(server, HttpServerConfig):
            table.add_row(name, "http", server.url, _describe_auth(server))
        else:
            table.add_row(name, "stdio", f"{server.command} {' '.join(server.args)}", "")

    console.print(table)


async def _list_server_tools(server: McpServerConfig) -> list[tuple[str, str]]:
    async with await connect(server) as client:
        return [(spec.name, spec.description or "") for spec in client.tools]


@app.command()
def tools(
    server: str | None = typer.Option(None, "--server", "-s", help="Only list this server"),
    config_path: str = ConfigOption,
) -> None:
    """
    Connect to each configured server and list its tools
    """
    config = load_config(config_path)
    names = [server] if server else list(config.servers)

    table = Table("Server", "Name", "Description")
    for name in names:
        if name not in config.servers:
            console.print(f"[red]Server '{name}' not found in config[/red]")
            raise typer.Exit(code=1)

        try:
            server_tools = run_async_with_cleanup(_list_server_tools(config.servers[name]))
        except McpBridgeError as e:
            console.print(f"[red]{name}: {e}[/red]")
            continue

        for tool_name, description in server_tools:
            table.add_row(name, tool_name, description)

    console.print(table)


async def _call_tool(server: McpServerConfig, tool: str, arguments: dict[str, Any]) -> Any:
    async with await connect(server) as client:
        return await client.call_tool(tool, arguments)


@app.command()
def call(
    server: str,
    tool: str,
    args: str = typer.Option("{}", "--args", "-a", help="Tool arguments as a JSON object"),
    config_path: str = ConfigOption,
) -> None:
    """
    Call a tool on a configured server and print the result
    """
    config = load_config(config_path)
    if server not in config.servers:
        console.print(f"[red]Server '{server}' not found in config[/red]")
        raise typer.Exit(code=1)

    try:
        arguments = json.loads(args)
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid --args JSON: {e}[/red]")
        raise typer.Exit(code=1)

    try:
        result = run_async_with_cleanup(_call_tool(config.servers[server], tool, arguments))
    except CALL_ERRORS as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    if isinstance(result, ParsedContent):
        for block in result.blocks:
            if isinstance(block, TextContentBlock):
                console.print(block.text)
            else:
                console.print(f"\\[image {block.mime_type}, {len(block.data)} base64 chars]")
    else:
        console.print("[yellow]Unrecognised result shape, raw response:[/yellow]")
        console.print_json(result.serialized)


@app.command()
def descriptions(config_path: str = ConfigOption) -> None:
    """
    Print the system prompt descriptions of every configured server's tools
    """
    config = load_config(config_path)
    provider = ToolMetadataProvider(BuiltinToolRegistry())
    found = run_async_with_cleanup(
        provider.get_all_system_prompt_descriptions(config.server_list())
    )

    table = Table("Tool", "Description")
    for name, description in found.items():
        table.add_row(name, description)

    console.print(table)


if __name__ == "__main__":
    app()
