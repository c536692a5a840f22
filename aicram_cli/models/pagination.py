from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Page:
    # None when the backend omits total_count or sends a non-integer.
    total_count: Optional[int]
    items: List[Dict[str, Any]] = field(default_factory=list)
