"""Shared pytest fixtures."""

from unittest.mock import AsyncMock, Mock

import mcp
import pytest


@pytest.fixture
def mock_session():
    """Create a mock fastmcp Client with async context manager support."""
    session = AsyncMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=None)
    session.list_tools = AsyncMock(return_value=[])
    return session


@pytest.fixture
def sample_tools():
    """MCP tool descriptors as returned by list_tools."""
    return [
        mcp.Tool(
            name="get_weather",
            description="Get weather data",
            inputSchema={
                "type": "object",
                "properties": {"city": {"type": "string", "description": "City name"}},
                "required": ["city"],
            },
        ),
        mcp.Tool(
            name="get_time",
            inputSchema={"type": "object", "properties": {}},
        ),
    ]


@pytest.fixture
def mock_stdio_transport():
    """Stand-in for fastmcp's StdioTransport class."""
    return Mock(name="StdioTransport")


@pytest.fixture
def mock_http_transport():
    """Stand-in for fastmcp's StreamableHttpTransport class, with no session id."""
    transport_cls = Mock(name="StreamableHttpTransport")
    transport_cls.return_value.get_session_id.return_value = None
    return transport_cls


@pytest.fixture
def sample_config_data():
    """Sample configuration data for tests."""
    return {
        "servers": {
            "time": {"command": "uvx", "args": ["mcp-server-time"], "env": {"TZ": "UTC"}},
            "remote": {
                "url": "https://example.com/mcp",
                "headers": {"X-Team": "agents"},
                "auth": {"type": "bearer", "token": "secret"},
                "timeoutMs": 5000,
            },
        }
    }
