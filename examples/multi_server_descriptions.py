"""
Example: build system prompt descriptions from every configured server.

Reads ``mcp_bridge_config.json``. Servers that cannot be reached are logged
and skipped.
"""

import asyncio
import os

from dotenv import load_dotenv

from mcp_bridge import BuiltinToolRegistry, ToolMetadataProvider, load_config
from mcp_bridge.logging import configure_logging
from mcp_bridge.models import NormalizedToolSpec, ToolSpec

load_dotenv()
configure_logging(level=os.getenv("LOG_LEVEL", "WARNING"))


async def main():
    config = load_config("mcp_bridge_config.json")

    builtin_tools = BuiltinToolRegistry()
    builtin_tools.register(
        NormalizedToolSpec(tool_spec=ToolSpec(name="think", description="Think before acting")),
        "Use to reason about a problem step by step before answering.",
    )

    provider = ToolMetadataProvider(builtin_tools)
    descriptions = await provider.get_all_system_prompt_descriptions(config.server_list())

    for name, description in descriptions.items():
        print(f"## {name}\n{description}\n")

    specs = await provider.get_tool_specs(config.server_list())
    print(f"{len(specs)} tools available to the agent")


if __name__ == "__main__":
    asyncio.run(main())
