from __future__ import annotations

from typing import Sequence

from pydantic import BaseModel, Field


class ValidationReport(BaseModel):
    valid: bool
    errors: Sequence[str] = Field(default_factory=list)
    warnings: Sequence[str] = Field(default_factory=list)


__all__ = ["ValidationReport"]
