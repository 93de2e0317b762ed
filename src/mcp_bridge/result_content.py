"""Validation of tool-call results.

MCP servers return a variety of content shapes. The bridge accepts the
minimal union of text and image blocks; anything else (resources, audio,
unknown payloads from newer or older servers) is handed back as a raw JSON
serialization instead of being rejected.
"""

import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from mcp_bridge.logging import get_logger
from mcp_bridge.models.content import ContentBlock, ParsedContent, RawFallback, ToolCallResult

logger = get_logger("result_content")

_content_adapter: TypeAdapter[list[ContentBlock]] = TypeAdapter(list[ContentBlock])


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_plain(v) for v in value]
    return value


def _raw_content(result: Any) -> Any:
    if isinstance(result, Mapping):
        return result.get("content")
    if isinstance(result, list):
        return result
    return getattr(result, "content", None)


def serialize_result(result: Any) -> str:
    return json.dumps(_plain(result), default=str, ensure_ascii=False)


def parse_tool_result(result: Any) -> ToolCallResult:
    """
    Validate the content of a tool-call result.

    Args:
        result: A ``CallToolResult``, a mapping with a ``content`` key, or a
            bare list of content blocks

    Returns:
        ParsedContent when every block is a text or image block, otherwise
        RawFallback with the whole result serialized as JSON. Never raises on
        an unexpected shape.
    """
    try:
        blocks = _content_adapter.validate_python(_plain(_raw_content(result)))
    except ValidationError as e:
        logger.debug(f"Tool result did not match the content union, returning raw: {e}")
        return RawFallback(serialized=serialize_result(result))

    return ParsedContent(blocks=blocks)
