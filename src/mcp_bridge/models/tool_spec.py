"""Provider-neutral tool specification models.

The agent's LLM tool-calling layer consumes every tool, built-in or MCP, as::

    {"toolSpec": {"name": ..., "description": ..., "inputSchema": {"json": {...}}}}
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ToolInputSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    json_schema: dict[str, Any] = Field(default_factory=dict, alias="json")


class ToolSpec(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    description: str | None = None
    input_schema: ToolInputSchema = Field(default_factory=ToolInputSchema, alias="inputSchema")


class NormalizedToolSpec(BaseModel):
    """A tool spec in the shape expected by the LLM tool-calling layer."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    tool_spec: ToolSpec = Field(alias="toolSpec")

    @property
    def name(self) -> str:
        return self.tool_spec.name

    @property
    def description(self) -> str | None:
        return self.tool_spec.description

    def to_dict(self) -> dict[str, Any]:
        """Dump to the camelCase wire shape, omitting a missing description."""
        return self.model_dump(by_alias=True, exclude_none=True)
