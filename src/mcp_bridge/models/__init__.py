from .config import Config
from .content import (
    ContentBlock,
    ImageContentBlock,
    ParsedContent,
    RawFallback,
    TextContentBlock,
    ToolCallResult,
)
from .mcp_server_config import (
    BasicAuth,
    BearerAuth,
    HttpServerConfig,
    McpServerConfig,
    StdioServerConfig,
)
from .tool_spec import NormalizedToolSpec, ToolInputSchema, ToolSpec

__all__ = [
    "Config",
    "McpServerConfig",
    "StdioServerConfig",
    "HttpServerConfig",
    "BearerAuth",
    "BasicAuth",
    "NormalizedToolSpec",
    "ToolSpec",
    "ToolInputSchema",
    "ContentBlock",
    "TextContentBlock",
    "ImageContentBlock",
    "ParsedContent",
    "RawFallback",
    "ToolCallResult",
]
