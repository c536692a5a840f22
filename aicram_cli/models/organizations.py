from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class OrganizationAsset:
    name: str
    value: float
    criticality: int


@dataclass
class Organization:
    id: str
    name: str
    status: int
    industry: str
    country: str
    description: str = ""
    employees: int = 0
    customers: int = 0
    revenue: float = 0.0
    regulation: List[str] = field(default_factory=list)
    asset: List[OrganizationAsset] = field(default_factory=list)
    structure: str = ""
    architecture: str = ""
    measure: str = ""
    constraint: str = ""
