"""Tests for the built-in registry, description cache and MCP aggregation."""

from unittest.mock import AsyncMock, Mock

import pytest

from mcp_bridge.builtin_tools import BuiltinToolRegistry
from mcp_bridge.errors import McpConnectionError
from mcp_bridge.models.mcp_server_config import HttpServerConfig, StdioServerConfig
from mcp_bridge.models.tool_spec import NormalizedToolSpec, ToolSpec
from mcp_bridge.tool_metadata import (
    DEFAULT_USAGE_DESCRIPTION,
    DescriptionCache,
    ToolMetadataProvider,
    get_mcp_tool_specs,
)


def make_spec(name, description=None):
    return NormalizedToolSpec(tool_spec=ToolSpec(name=name, description=description))


def make_client(*specs):
    client = Mock()
    client.tools = list(specs)
    client.cleanup = AsyncMock()
    return client


@pytest.fixture
def registry():
    registry = BuiltinToolRegistry()
    registry.register(make_spec("readFiles", "Read files"), "Read the content of files.")
    registry.register(make_spec("think", "Think"), "Think step by step.")
    return registry


@pytest.fixture
def good_server():
    return StdioServerConfig(command="uvx", args=["good"], name="good")


@pytest.fixture
def bad_server():
    return HttpServerConfig(url="https://down.example.com/mcp", name="bad")


@pytest.fixture
def connector(good_server, bad_server):
    """Connector where the good server has two tools and the bad one fails."""
    clients = {
        "good": make_client(make_spec("fetch", "Fetch a URL"), make_spec("search")),
    }

    async def connect(server):
        if server.name == "bad":
            raise McpConnectionError("http", server.url, "refused")
        return clients[server.name]

    connect.clients = clients
    return connect


class TestBuiltinToolRegistry:
    """Tests for BuiltinToolRegistry."""

    def test_register_and_lookup(self, registry):
        """Test registered tools are reported."""
        assert "readFiles" in registry
        assert len(registry) == 2
        assert [s.name for s in registry.get_tool_specs()] == ["readFiles", "think"]

    def test_descriptions_are_fresh_dicts(self, registry):
        """Test each call builds a new mapping."""
        first = registry.get_system_prompt_descriptions()
        second = registry.get_system_prompt_descriptions()

        assert first == second
        assert first is not second

    def test_unregister(self, registry):
        """Test removing a tool."""
        registry.unregister("think")
        registry.unregister("missing")

        assert "think" not in registry


class TestDescriptionCache:
    """Tests for DescriptionCache."""

    def test_memoizes(self):
        """Test the loader runs once until invalidated."""
        loader = Mock(return_value={"a": "b"})
        cache = DescriptionCache(loader)

        assert not cache.is_populated
        assert cache.get() is cache.get()
        assert cache.is_populated
        loader.assert_called_once()

    def test_invalidate_recomputes(self):
        """Test invalidate causes the next get to reload."""
        loader = Mock(side_effect=lambda: {"a": "b"})
        cache = DescriptionCache(loader)
        first = cache.get()

        cache.invalidate()

        assert not cache.is_populated
        assert cache.get() is not first
        assert loader.call_count == 2


class TestGetMcpToolSpecs:
    """Tests for get_mcp_tool_specs."""

    async def test_collects_from_servers_and_cleans_up(self, good_server, connector):
        """Test specs are gathered and every client is cleaned up."""
        specs = await get_mcp_tool_specs([good_server], connector)

        assert [s.name for s in specs] == ["fetch", "search"]
        connector.clients["good"].cleanup.assert_awaited_once()

    async def test_failing_server_is_skipped(self, good_server, bad_server, connector):
        """Test one failing server does not prevent the others."""
        specs = await get_mcp_tool_specs([bad_server, good_server], connector)

        assert [s.name for s in specs] == ["fetch", "search"]

    async def test_no_servers(self, connector):
        """Test no servers gives no specs."""
        assert await get_mcp_tool_specs([], connector) == []


class TestToolMetadataProvider:
    """Tests for ToolMetadataProvider."""

    def test_system_prompt_descriptions_memoized(self, registry):
        """Test built-in descriptions are computed once."""
        provider = ToolMetadataProvider(registry)

        first = provider.get_system_prompt_descriptions()
        registry.register(make_spec("late"), "Registered later.")

        assert provider.get_system_prompt_descriptions() is first
        assert "late" not in provider.get_system_prompt_descriptions()

    def test_reset_recomputes(self, registry):
        """Test reset forces the next call to recompute."""
        provider = ToolMetadataProvider(registry)
        first = provider.get_system_prompt_descriptions()
        registry.register(make_spec("late"), "Registered later.")

        provider.reset_tool_metadata_cache()
        second = provider.get_system_prompt_descriptions()

        assert second is not first
        assert second["late"] == "Registered later."

    async def test_mcp_descriptions_format(self, registry, good_server, connector):
        """Test MCP descriptions use the tool description or a default."""
        provider = ToolMetadataProvider(registry, connector=connector)

        descriptions = await provider.get_mcp_system_prompt_descriptions([good_server])

        assert descriptions == {
            "fetch": "Fetch a URL\nMCP tool provided by external server.\n"
            "Refer to tool documentation for specific usage.",
            "search": "MCP tool with specific functionality.\nMCP tool provided by external server.\n"
            "Refer to tool documentation for specific usage.",
        }

    async def test_mcp_descriptions_not_cached(self, registry, good_server, connector):
        """Test MCP servers are queried on every call."""
        calls = []

        async def counting_connector(server):
            calls.append(server)
            return await connector(server)

        provider = ToolMetadataProvider(registry, connector=counting_connector)

        await provider.get_mcp_system_prompt_descriptions([good_server])
        await provider.get_mcp_system_prompt_descriptions([good_server])

        assert len(calls) == 2

    async def test_partial_failure(self, registry, good_server, bad_server, connector):
        """Test one failing server yields the other server's tools plus built-ins."""
        provider = ToolMetadataProvider(registry, connector=connector)

        descriptions = await provider.get_all_system_prompt_descriptions([good_server, bad_server])

        assert set(descriptions) == {"readFiles", "think", "fetch", "search"}

    async def test_unexpected_failure_returns_empty(self, registry, good_server):
        """Test an unexpected failure during aggregation is logged, not raised."""
        client = make_client(make_spec("fetch"))
        client.cleanup = AsyncMock(side_effect=RuntimeError("cleanup exploded"))
        provider = ToolMetadataProvider(registry, connector=AsyncMock(return_value=client))

        assert await provider.get_mcp_system_prompt_descriptions([good_server]) == {}

    async def test_builtin_wins_on_collision(self, registry, good_server):
        """Test built-in descriptions take precedence over MCP ones."""
        client = make_client(make_spec("readFiles", "Remote read"), make_spec("fetch"))
        provider = ToolMetadataProvider(registry, connector=AsyncMock(return_value=client))

        descriptions = await provider.get_all_system_prompt_descriptions([good_server])

        assert descriptions["readFiles"] == "Read the content of files."
        assert "fetch" in descriptions

    def test_usage_description(self, registry):
        """Test lookup of a built-in usage description with default."""
        provider = ToolMetadataProvider(registry)

        assert provider.get_tool_usage_description("think") == "Think step by step."
        assert provider.get_tool_usage_description("unknown") == DEFAULT_USAGE_DESCRIPTION

    async def test_usage_description_with_mcp(self, registry, good_server, connector):
        """Test lookup including MCP tools."""
        provider = ToolMetadataProvider(registry, connector=connector)

        description = await provider.get_tool_usage_description_with_mcp("fetch", [good_server])

        assert description.startswith("Fetch a URL\n")
        assert await provider.get_tool_usage_description_with_mcp("nope", []) == DEFAULT_USAGE_DESCRIPTION

    def test_available_tool_names(self, registry):
        """Test built-in names are listed."""
        assert ToolMetadataProvider(registry).get_available_tool_names() == ["readFiles", "think"]

    async def test_tool_specs_merge(self, registry, good_server):
        """Test built-in specs come first and shadow MCP specs of the same name."""
        client = make_client(make_spec("think", "Remote think"), make_spec("fetch"))
        provider = ToolMetadataProvider(registry, connector=AsyncMock(return_value=client))

        specs = await provider.get_tool_specs([good_server])

        assert [s.name for s in specs] == ["readFiles", "think", "fetch"]
        assert specs[1].description == "Think"

    def test_injected_cache(self, registry):
        """Test an injected cache is used."""
        cache = DescriptionCache(lambda: {"x": "y"})
        provider = ToolMetadataProvider(registry, cache=cache)

        assert provider.get_system_prompt_descriptions() == {"x": "y"}
        assert provider.cache is cache
