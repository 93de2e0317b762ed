"""Error types raised by the MCP bridge."""


class McpBridgeError(Exception):
    """Base error for all bridge failures."""


class ConfigurationError(McpBridgeError, ValueError):
    """A server connection config is missing or invalid.

    Raised before any I/O is attempted.
    """


class McpConnectionError(McpBridgeError):
    """Connecting to, or discovering tools on, an MCP server failed.

    Attributes:
        transport: ``"stdio"`` or ``"http"``.
        target: The command or URL that was being connected to.
    """

    def __init__(self, transport: str, target: str, detail: str = "") -> None:
        self.transport = transport
        self.target = target
        self.detail = detail
        message = f"Failed to connect to {transport} MCP server {target}"
        super().__init__(f"{message}: {detail}" if detail else message)
