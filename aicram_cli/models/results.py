from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

RESULT_COMPLETED = 1
RESULT_FAILED = 2
RESULT_REMOVED = 3

RESULT_STATUS_LABELS: Dict[int, str] = {
    RESULT_COMPLETED: "Completed",
    RESULT_FAILED: "Failed",
    RESULT_REMOVED: "Removed",
}

CONTENT_SUCCESS = 1
CONTENT_FAILURE = 2


@dataclass
class Control:
    name: str
    description: str
    nist: Optional[str] = None
    iso: Optional[str] = None


@dataclass
class Vulnerability:
    name: str
    description: str
    impact: int
    likelihood: int
    new_impact: int
    new_likelihood: int
    cve: List[str] = field(default_factory=list)
    mitre: List[str] = field(default_factory=list)
    control: List[Control] = field(default_factory=list)


@dataclass
class ResultContent:
    success: int
    summary: str
    message: str
    vulnerability: List[Vulnerability] = field(default_factory=list)


@dataclass
class Result:
    id: str
    assessment_id: str
    status: int
    content: ResultContent
    user_id: str = ""
    created_at: str = ""

    @property
    def status_label(self) -> str:
        return RESULT_STATUS_LABELS.get(self.status, "Unknown")
