"""MCP server configuration models.

Defines connection settings for stdio-based and Streamable HTTP MCP servers.
Exactly one variant describes a given connection: stdio servers are told
apart by ``command``, HTTP servers by ``url``.
"""

import base64
from typing import Annotated, Literal
from urllib.parse import urlparse

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class BearerAuth(BaseModel):
    """Bearer token authentication for HTTP servers."""

    type: Literal["bearer"] = "bearer"
    token: str = Field(min_length=1)

    def authorization_header(self) -> str:
        return f"Bearer {self.token}"


class BasicAuth(BaseModel):
    """HTTP basic authentication for HTTP servers."""

    type: Literal["basic"] = "basic"
    username: str = Field(min_length=1)
    password: str

    def authorization_header(self) -> str:
        credentials = f"{self.username}:{self.password}".encode()
        return f"Basic {base64.b64encode(credentials).decode('ascii')}"


ServerAuth = Annotated[BearerAuth | BasicAuth, Field(discriminator="type")]


class StdioServerConfig(BaseModel):
    """Configuration for a stdio-based MCP server.

    Attributes:
        command: The command to run (e.g. ``"npx"``). Resolved against the
            host and user binary directories before spawning.
        args: Command-line arguments passed to the server process.
        env: Environment variables overlaid on the host environment.
        cwd: Working directory for the server process.
        transport: Always ``"stdio"`` for this server type.
        name: Display name, filled in from the config key when loaded.
        description: Free-form description of the server.
    """

    command: str
    args: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)
    cwd: str | None = None
    transport: Literal["stdio"] = "stdio"
    name: str | None = None
    description: str | None = None


class HttpServerConfig(BaseModel):
    """Configuration for a remote MCP server spoken to over Streamable HTTP.

    Attributes:
        url: The server endpoint. Required, with an http or https scheme.
        headers: Static HTTP headers sent with every request.
        timeout_ms: Request timeout in milliseconds. Accepts ``timeoutMs``
            and ``timeout`` as input keys.
        auth: Bearer or basic credentials turned into an ``Authorization``
            header. Takes precedence over an explicit header of that name.
        transport: ``"streamable-http"`` (``"http"`` is accepted as an alias).
        name: Display name, filled in from the config key when loaded.
        description: Free-form description of the server.
    """

    model_config = ConfigDict(populate_by_name=True)

    url: str
    headers: dict[str, str] | None = None
    timeout_ms: float | None = Field(
        default=None,
        gt=0,
        validation_alias=AliasChoices("timeout_ms", "timeoutMs", "timeout"),
    )
    auth: ServerAuth | None = None
    transport: Literal["streamable-http", "http"] = "streamable-http"
    name: str | None = None
    description: str | None = None

    @field_validator("url", mode="after")
    @classmethod
    def url_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("URL is required for HTTP transport")
        if urlparse(value).scheme.lower() not in ("http", "https"):
            raise ValueError(f"URL must use http or https: {value}")
        return value

    @property
    def timeout_seconds(self) -> float | None:
        if self.timeout_ms is None:
            return None
        return self.timeout_ms / 1000


McpServerConfig = StdioServerConfig | HttpServerConfig
