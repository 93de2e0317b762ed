"""Tool-call result content models.

A tool-call result is either a list of validated content blocks or, when the
server answers with anything else, the raw result serialized as a string.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class TextContentBlock(BaseModel):
    model_config = ConfigDict(strict=True)

    type: Literal["text"]
    text: str


class ImageContentBlock(BaseModel):
    model_config = ConfigDict(strict=True, populate_by_name=True)

    type: Literal["image"]
    data: str = Field(description="Base64 encoded image data")
    mime_type: str = Field(alias="mimeType")


ContentBlock = Annotated[TextContentBlock | ImageContentBlock, Field(discriminator="type")]


class ParsedContent(BaseModel):
    """The result content matched the text/image block union."""

    kind: Literal["content"] = "content"
    blocks: list[ContentBlock]

    def to_payload(self) -> list[dict[str, Any]]:
        return [block.model_dump(by_alias=True) for block in self.blocks]


class RawFallback(BaseModel):
    """The result did not match the union; ``serialized`` holds the raw JSON."""

    kind: Literal["raw"] = "raw"
    serialized: str

    def to_payload(self) -> str:
        return self.serialized


ToolCallResult = ParsedContent | RawFallback
