"""
Schemas for AI-generated result content.
"""
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr


class ControlSchema(BaseModel):
    """Recommended control for a vulnerability."""
    model_config = ConfigDict(extra="allow")

    name: StrictStr = Field(..., min_length=1)
    description: StrictStr = Field(..., min_length=1)
    nist: Optional[StrictStr] = None
    iso: Optional[StrictStr] = None


class VulnerabilitySchema(BaseModel):
    """Scored vulnerability; scores are 0 (unscored) to 5."""
    model_config = ConfigDict(extra="allow")

    name: StrictStr = Field(..., min_length=1)
    description: StrictStr = Field(..., min_length=1)
    cve: List[Any]
    mitre: List[Any]
    impact: StrictInt = Field(..., ge=0, le=5)
    likelihood: StrictInt = Field(..., ge=0, le=5)
    new_impact: StrictInt = Field(..., ge=0, le=5)
    new_likelihood: StrictInt = Field(..., ge=0, le=5)
    control: List[ControlSchema]


class ResultContentSchema(BaseModel):
    """Document returned by the content generator; success is 1 or 2."""

    success: StrictInt = Field(..., ge=1, le=2)
    summary: StrictStr
    message: StrictStr
    vulnerability: List[VulnerabilitySchema]

    def to_payload(self) -> dict:
        # Only keys present in the generator output are written back.
        return self.model_dump(exclude_unset=True)
