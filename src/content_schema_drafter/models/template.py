from __future__ import annotations

from typing import Any, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .section import Section


class PostTypeHint(BaseModel):
    """An external post collection referenced by a ``post_related`` field."""

    name: str
    slug: str
    original_section: str


class Template(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    description: str
    is_content: bool = False
    multilanguage: bool = True
    is_multiple: bool = False
    components: Sequence[Section] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "is_content": self.is_content,
            "multilanguage": self.multilanguage,
            "is_multiple": self.is_multiple,
            "description": self.description,
            "components": [section.to_dict() for section in self.components],
        }


__all__ = ["PostTypeHint", "Template"]
