from pydantic import BaseModel, Field

from mcp_bridge.models.mcp_server_config import McpServerConfig


class Config(BaseModel):
    servers: dict[str, McpServerConfig] = Field(default_factory=dict)

    def server_list(self) -> list[McpServerConfig]:
        """Return the configured servers with ``name`` filled in from their key."""
        return [
            server if server.name else server.model_copy(update={"name": name})
            for name, server in self.servers.items()
        ]
