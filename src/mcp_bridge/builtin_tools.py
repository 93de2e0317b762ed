"""Registry of the hosting application's built-in tools.

Built-in tools are implemented by the host, not by MCP servers. The registry
only records what the agent needs to know about them: their spec and the
usage description placed in the system prompt.
"""

from dataclasses import dataclass

from mcp_bridge.models.tool_spec import NormalizedToolSpec


@dataclass(frozen=True, slots=True)
class BuiltinTool:
    spec: NormalizedToolSpec
    system_prompt_description: str


class BuiltinToolRegistry:
    def __init__(self) -> None:
        self._tools: dict[str, BuiltinTool] = {}

    def register(self, spec: NormalizedToolSpec, system_prompt_description: str) -> None:
        """Add or replace a built-in tool."""
        self._tools[spec.name] = BuiltinTool(spec, system_prompt_description)

    def unregister(self, name: str) -> None:
        self._tools.pop(name, None)

    def get_tool_specs(self) -> list[NormalizedToolSpec]:
        return [tool.spec for tool in self._tools.values()]

    def get_system_prompt_descriptions(self) -> dict[str, str]:
        return {name: tool.system_prompt_description for name, tool in self._tools.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
