from . import models
from .builtin_tools import BuiltinToolRegistry
from .client import MCPClient, connect
from .command_resolver import resolve_command
from .convert_tools import tool_from_mcp, tools_from_mcp
from .errors import ConfigurationError, McpBridgeError, McpConnectionError
from .result_content import parse_tool_result
from .tool_metadata import DescriptionCache, ToolMetadataProvider, get_mcp_tool_specs
from .utils import load_config

__all__ = [
    "MCPClient",
    "connect",
    "BuiltinToolRegistry",
    "ToolMetadataProvider",
    "DescriptionCache",
    "get_mcp_tool_specs",
    "resolve_command",
    "tool_from_mcp",
    "tools_from_mcp",
    "parse_tool_result",
    "load_config",
    "McpBridgeError",
    "ConfigurationError",
    "McpConnectionError",
    "models",
]
