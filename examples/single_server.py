"""
Example: connect to one stdio server, list its tools and call one.

Uses the reference time server, started with ``uvx mcp-server-time``.
"""

import asyncio
import os

from dotenv import load_dotenv

from mcp_bridge import connect
from mcp_bridge.logging import configure_logging
from mcp_bridge.models import ParsedContent, StdioServerConfig

load_dotenv()
configure_logging(level=os.getenv("LOG_LEVEL", "INFO"))


async def main():
    server = StdioServerConfig(command="uvx", args=["mcp-server-time"])

    async with await connect(server) as client:
        for spec in client.tools:
            print(f"- {spec.name}: {spec.description}")

        result = await client.call_tool("get_current_time", {"timezone": "Europe/London"})

    if isinstance(result, ParsedContent):
        print(result.to_payload())
    else:
        print(f"Raw response: {result.serialized}")


if __name__ == "__main__":
    asyncio.run(main())
