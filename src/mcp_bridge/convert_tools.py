import json
from collections.abc import Sequence
from typing import Any

import mcp

from mcp_bridge.logging import get_logger
from mcp_bridge.models.tool_spec import NormalizedToolSpec, ToolInputSchema, ToolSpec

logger = get_logger("convert_tools")


def _plain_schema(input_schema: Any) -> dict[str, Any]:
    """JSON round-trip a schema so only plain serializable values remain."""
    if not isinstance(input_schema, dict):
        return {}
    return json.loads(json.dumps(input_schema, default=str))


def tool_from_mcp(mcp_tool: mcp.Tool) -> NormalizedToolSpec:
    """
    Convert an MCP tool descriptor to a normalized tool spec.

    Args:
        mcp_tool: Tool descriptor as returned by ``list_tools``

    Returns:
        NormalizedToolSpec whose ``inputSchema.json`` is a plain copy of the
        descriptor's input schema

    Raises:
        ValueError: If the descriptor has no name
    """
    if not mcp_tool.name:
        raise ValueError(f"MCP tool missing required field: name={mcp_tool.name}")

    input_schema = getattr(mcp_tool, "inputSchema", {})

    return NormalizedToolSpec(
        tool_spec=ToolSpec(
            name=mcp_tool.name,
            description=getattr(mcp_tool, "description", None),
            input_schema=ToolInputSchema(json_schema=_plain_schema(input_schema)),
        )
    )


def tools_from_mcp(mcp_tools: Sequence[mcp.Tool]) -> list[NormalizedToolSpec]:
    """
    Convert MCP tool descriptors to normalized tool specs, preserving order.

    Descriptors without a name are skipped with a warning.
    """
    specs = []

    for mcp_tool in mcp_tools:
        try:
            specs.append(tool_from_mcp(mcp_tool))
        except ValueError as e:
            logger.warning(f"Skipping invalid MCP tool: {e}")

    return specs
