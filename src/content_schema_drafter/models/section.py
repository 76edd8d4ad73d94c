from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .field import FieldDefinition


class ElementType(str, Enum):
    text = "text"
    image = "image"
    button = "button"
    input = "input"
    textarea = "textarea"


class Element(BaseModel):
    """One piece of content inside a section, independent of where it came from."""

    type: ElementType
    content: str = ""
    name: str | None = None
    role: str | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)
    structure: Literal["repeater", "group"] | None = None
    children: list["Element"] = Field(default_factory=list)

    @property
    def repeated(self) -> bool:
        """True for elements belonging to the second or later item of a repeated block."""
        return bool(self.attributes.get("repeat"))


class ContentPatterns(BaseModel):
    is_repeater: bool = False
    is_group: bool = False
    has_image_grid: bool = False
    has_carousel: bool = False


class ContentSection(BaseModel):
    name: str
    label: str | None = None
    elements: list[Element] = Field(default_factory=list)
    patterns: ContentPatterns = Field(default_factory=ContentPatterns)
    block_hint: str | None = None
    source: Literal["markup", "metadata", "structured", "prompt", "preset"] = "markup"


class Section(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    key_name: str = Field(alias="keyName")
    label: str
    order: int = Field(gt=0)
    fields: Sequence[FieldDefinition] = Field(default_factory=list)
    block_hint: str | None = Field(default=None, alias="block")

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "keyName": self.key_name,
            "label": self.label,
            "section": str(self.order),
            "fields": [field.to_dict() for field in self.fields],
        }
        if self.block_hint:
            payload["block"] = self.block_hint
        return payload


__all__ = [
    "ContentPatterns",
    "ContentSection",
    "Element",
    "ElementType",
    "Section",
]
