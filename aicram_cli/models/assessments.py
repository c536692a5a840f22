from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class Assessment:
    id: str
    name: str
    situation: str
    matrix_id: str = ""
    organization_id: str = ""
    user_id: str = ""
    asset: List[str] = field(default_factory=list)
    threat: List[str] = field(default_factory=list)
    constraint: str = ""
    created_at: str = ""


@dataclass
class AssessmentForm:
    """Data collected by the assessment wizard before submission."""

    name: str = ""
    matrix_id: str = ""
    organization_id: str = ""
    situation: str = ""
    asset: List[str] = field(default_factory=list)
    threat: List[str] = field(default_factory=list)
    constraint: str = ""
