from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

MATRIX_3X3 = 1
MATRIX_4X4 = 2
MATRIX_5X5 = 3

MATRIX_TYPE_LABELS: Dict[int, str] = {
    MATRIX_3X3: "3x3",
    MATRIX_4X4: "4x4",
    MATRIX_5X5: "5x5",
}

# Severity bands in use for each matrix type.
MATRIX_BANDS: Dict[int, Tuple[int, ...]] = {
    MATRIX_3X3: (2, 3, 4),
    MATRIX_4X4: (2, 3, 4, 5),
    MATRIX_5X5: (1, 2, 3, 4, 5),
}

BAND_NAMES: Dict[int, str] = {
    1: "very_low",
    2: "low",
    3: "medium",
    4: "high",
    5: "extreme",
}

BAND_LABELS: Dict[int, str] = {
    1: "Very Low",
    2: "Low",
    3: "Medium",
    4: "High",
    5: "Extreme",
}

STATUS_ACTIVE = 1
STATUS_INACTIVE = 2

STATUS_LABELS: Dict[int, str] = {
    STATUS_ACTIVE: "Active",
    STATUS_INACTIVE: "Inactive",
}


@dataclass
class RiskMatrix:
    id: str
    name: str
    status: int
    type: int
    description: str = ""
    impact_1: str = ""
    impact_2: str = ""
    impact_3: str = ""
    impact_4: str = ""
    impact_5: str = ""
    likelihood_1: str = ""
    likelihood_2: str = ""
    likelihood_3: str = ""
    likelihood_4: str = ""
    likelihood_5: str = ""

    @property
    def type_label(self) -> str:
        return MATRIX_TYPE_LABELS.get(self.type, "")

    @property
    def bands(self) -> Tuple[int, ...]:
        # Unknown types fall back to the 3x3 low/medium/high bands.
        return MATRIX_BANDS.get(self.type, MATRIX_BANDS[MATRIX_3X3])

    def impact(self, band: int) -> str:
        return str(getattr(self, f"impact_{band}"))

    def likelihood(self, band: int) -> str:
        return str(getattr(self, f"likelihood_{band}"))
