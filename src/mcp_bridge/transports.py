"""Transport handles for the two ways of reaching an MCP server.

A handle is a tagged variant: ``StdioTransportHandle`` wraps a subprocess
speaking MCP over stdin/stdout, ``HttpTransportHandle`` wraps a Streamable HTTP
session, and ``NoTransport`` marks a client that has been cleaned up.

Closing an HTTP handle's session sends the ``DELETE`` carrying the
``mcp-session-id`` header before the streams are closed; the SDK treats a
``405`` reply as "termination not supported".
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal

from fastmcp.client.transports import StdioTransport, StreamableHttpTransport

from mcp_bridge.errors import ConfigurationError
from mcp_bridge.models.mcp_server_config import HttpServerConfig


@dataclass(slots=True)
class StdioTransportHandle:
    transport: StdioTransport
    command: str
    kind: Literal["stdio"] = "stdio"

    @property
    def target(self) -> str:
        return self.command


@dataclass(slots=True)
class HttpTransportHandle:
    transport: StreamableHttpTransport
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    timeout: float | None = None
    kind: Literal["http"] = "http"

    @property
    def target(self) -> str:
        return self.url


@dataclass(slots=True)
class NoTransport:
    kind: Literal["none"] = "none"

    @property
    def target(self) -> str:
        return ""


TransportHandle = StdioTransportHandle | HttpTransportHandle | NoTransport


def build_stdio_env(
    env: Mapping[str, str] | None = None,
    base: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """
    Build the environment for a stdio server process.

    The caller's ``env`` is overlaid on the host environment (``base``,
    defaulting to ``os.environ``). ``PATH`` is always set to the host's value,
    or to an empty string when the host has none, so the subprocess never
    inherits an undefined ``PATH``.
    """
    host = dict(os.environ if base is None else base)
    return {**host, **(env or {}), "PATH": host.get("PATH", "")}


def build_http_headers(config: HttpServerConfig) -> dict[str, str]:
    """
    Build the static request headers for an HTTP server.

    Explicit headers are applied first; the ``Authorization`` header derived
    from ``auth`` is applied last and replaces any explicit header of the same
    name regardless of case.
    """
    headers = dict(config.headers or {})

    if config.auth is not None:
        for key in [k for k in headers if k.lower() == "authorization"]:
            del headers[key]
        headers["Authorization"] = config.auth.authorization_header()

    return headers


def stdio_transport(
    command: str,
    args: list[str],
    env: dict[str, str],
    cwd: str | None = None,
) -> StdioTransportHandle:
    transport = StdioTransport(command=command, args=args, env=env, cwd=cwd, keep_alive=False)
    return StdioTransportHandle(transport=transport, command=command)


def http_transport(config: HttpServerConfig) -> HttpTransportHandle:
    """
    Build the Streamable HTTP transport for ``config``.

    The request timeout is applied by the session, not the transport.

    Raises:
        ConfigurationError: If the transport rejects the URL.
    """
    headers = build_http_headers(config)
    try:
        transport = StreamableHttpTransport(url=config.url, headers=headers)
    except ValueError as e:
        raise ConfigurationError(f"Invalid HTTP server URL {config.url!r}: {e}") from e

    return HttpTransportHandle(
        transport=transport,
        url=config.url,
        headers=headers,
        timeout=config.timeout_seconds,
    )
