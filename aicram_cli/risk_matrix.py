"""Risk level classification for impact/likelihood pairs.

Two lookups live here. ``classify`` is the reference 5x5 grid published in
the documentation. ``risk_rating`` rates a scored vulnerability against the
matrix type chosen for its assessment (3x3, 4x4 or 5x5).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

from aicram_cli.models.matrices import (
    BAND_LABELS,
    MATRIX_3X3,
    MATRIX_4X4,
    MATRIX_5X5,
)


class RiskLevel(IntEnum):
    VERY_LOW = 1
    LOW = 2
    MEDIUM = 3
    HIGH = 4
    CRITICAL = 5

    @property
    def label(self) -> str:
        return _LEVEL_LABELS[self]

    @property
    def style_class(self) -> str:
        return _LEVEL_STYLES[self]


_LEVEL_LABELS: Dict[RiskLevel, str] = {
    RiskLevel.VERY_LOW: "Very Low",
    RiskLevel.LOW: "Low",
    RiskLevel.MEDIUM: "Medium",
    RiskLevel.HIGH: "High",
    RiskLevel.CRITICAL: "Critical",
}

_LEVEL_STYLES: Dict[RiskLevel, str] = {
    RiskLevel.VERY_LOW: "blue",
    RiskLevel.LOW: "green",
    RiskLevel.MEDIUM: "yellow",
    RiskLevel.HIGH: "orange",
    RiskLevel.CRITICAL: "red",
}


@dataclass(frozen=True)
class RiskClassification:
    level: RiskLevel
    style_class: str

    @property
    def label(self) -> str:
        return self.level.label


_V = RiskLevel.VERY_LOW
_L = RiskLevel.LOW
_M = RiskLevel.MEDIUM
_H = RiskLevel.HIGH
_C = RiskLevel.CRITICAL

# (impact, likelihood) -> level
RISK_TABLE_5X5: Dict[Tuple[int, int], RiskLevel] = {
    (1, 1): _V, (1, 2): _V, (2, 1): _V,
    (1, 3): _L, (2, 2): _L, (3, 1): _L,
    (1, 4): _M, (1, 5): _M, (2, 3): _M, (2, 4): _M,
    (3, 2): _M, (3, 3): _M, (4, 1): _M, (4, 2): _M, (5, 1): _M,
    (2, 5): _H, (3, 4): _H, (3, 5): _H, (4, 3): _H,
    (4, 4): _H, (5, 2): _H, (5, 3): _H,
    (4, 5): _C, (5, 4): _C, (5, 5): _C,
}


def classify(impact: int, likelihood: int) -> RiskClassification:
    level = RISK_TABLE_5X5.get((impact, likelihood), RiskLevel.MEDIUM)
    return RiskClassification(level=level, style_class=level.style_class)


# impact -> ratings for each likelihood band of the matrix, in band order
_RATINGS: Dict[int, Tuple[Tuple[int, ...], Dict[int, Tuple[int, ...]]]] = {
    MATRIX_3X3: ((2, 3, 4), {
        2: (2, 2, 3),
        3: (2, 3, 4),
        4: (3, 4, 4),
    }),
    MATRIX_4X4: ((2, 3, 4, 5), {
        2: (2, 2, 3, 3),
        3: (2, 3, 4, 4),
        4: (3, 4, 4, 5),
        5: (3, 4, 5, 5),
    }),
    MATRIX_5X5: ((1, 2, 3, 4, 5), {
        1: (1, 1, 2, 3, 3),
        2: (1, 2, 3, 3, 4),
        3: (2, 3, 3, 4, 4),
        4: (3, 3, 4, 4, 5),
        5: (3, 4, 4, 5, 5),
    }),
}


def risk_rating(matrix_type: Optional[int], impact: int, likelihood: int) -> int:
    """Return the 1..5 rating for a scored pair, or 0 when it cannot be rated.

    Unknown matrix types are rated on the 5x5 scale.
    """
    if impact == 0 or likelihood == 0:
        return 0
    bands, rows = _RATINGS.get(matrix_type or MATRIX_5X5, _RATINGS[MATRIX_5X5])
    row = rows.get(impact)
    if row is None or likelihood not in bands:
        return 0
    return row[bands.index(likelihood)]


def rating_level(rating: int) -> Optional[RiskLevel]:
    try:
        return RiskLevel(rating)
    except ValueError:
        return None


def rating_label(rating: int) -> str:
    level = rating_level(rating)
    return level.label if level is not None else "Unknown"


def matrix_grid() -> List[Tuple[int, List[RiskClassification]]]:
    """Rows of the 5x5 grid, highest likelihood first, impact increasing left to right."""
    rows: List[Tuple[int, List[RiskClassification]]] = []
    for likelihood in range(5, 0, -1):
        rows.append((likelihood, [classify(impact, likelihood) for impact in range(1, 6)]))
    return rows


def render_matrix_markdown() -> str:
    header = "| Likelihood \\ Impact | " + " | ".join(BAND_LABELS[i] for i in range(1, 6)) + " |"
    lines = [header, "|---" * 6 + "|"]
    for likelihood, cells in matrix_grid():
        labels = " | ".join(cell.label for cell in cells)
        lines.append(f"| {BAND_LABELS[likelihood]} | {labels} |")
    return "\n".join(lines)
