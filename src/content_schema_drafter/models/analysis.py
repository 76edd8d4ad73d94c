from __future__ import annotations

from enum import Enum
from typing import Any, Sequence

from pydantic import BaseModel, Field


class Archetype(str, Enum):
    post_collection = "post_collection"
    repeater = "repeater"
    group = "group"
    media_gallery = "media_gallery"
    form = "form"
    single = "single"


class FieldSuggestion(BaseModel):
    name: str
    label: str
    kind: str
    options: dict[str, Any] = Field(default_factory=dict)
    children: list["FieldSuggestion"] = Field(default_factory=list)


class SectionAnalysis(BaseModel):
    archetype: Archetype
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: Sequence[str] = Field(default_factory=list)
    field_suggestions: Sequence[FieldSuggestion] = Field(default_factory=list)


class AnalysisSummary(BaseModel):
    section: str
    archetype: Archetype
    confidence: float
    reasoning: Sequence[str] = Field(default_factory=list)


__all__ = ["AnalysisSummary", "Archetype", "FieldSuggestion", "SectionAnalysis"]
