from __future__ import annotations

import pytest

from aicram_cli.models.matrices import MATRIX_3X3, MATRIX_4X4, MATRIX_5X5
from aicram_cli.risk_matrix import (
    RISK_TABLE_5X5,
    RiskLevel,
    classify,
    matrix_grid,
    rating_label,
    rating_level,
    render_matrix_markdown,
    risk_rating,
)

# Rows: likelihood 5 down to 1; columns: impact 1 to 5.
_DOCUMENTED_GRID = [
    ["Medium", "High", "High", "Critical", "Critical"],
    ["Medium", "Medium", "High", "High", "Critical"],
    ["Low", "Medium", "Medium", "High", "High"],
    ["Very Low", "Low", "Medium", "Medium", "High"],
    ["Very Low", "Very Low", "Low", "Medium", "Medium"],
]


class TestClassify:
    def test_table_covers_all_pairs(self) -> None:
        assert set(RISK_TABLE_5X5) == {(i, l) for i in range(1, 6) for l in range(1, 6)}

    @pytest.mark.parametrize("likelihood", range(1, 6))
    @pytest.mark.parametrize("impact", range(1, 6))
    def test_matches_documented_grid(self, impact: int, likelihood: int) -> None:
        expected = _DOCUMENTED_GRID[5 - likelihood][impact - 1]
        assert classify(impact, likelihood).label == expected

    def test_lowest_and_highest(self) -> None:
        assert classify(1, 1).label == "Very Low"
        assert classify(1, 1).style_class == "blue"
        assert classify(5, 5).label == "Critical"
        assert classify(5, 5).style_class == "red"

    def test_middle(self) -> None:
        result = classify(3, 3)
        assert result.level is RiskLevel.MEDIUM
        assert result.style_class == "yellow"

    @pytest.mark.parametrize("pair", [(0, 0), (6, 1), (1, 6), (-1, 3)])
    def test_out_of_range_falls_back_to_medium(self, pair: tuple) -> None:
        assert classify(*pair).level is RiskLevel.MEDIUM

    def test_style_classes_distinct_per_level(self) -> None:
        styles = {level.style_class for level in RiskLevel}
        assert len(styles) == len(RiskLevel)


class TestRiskRating:
    def test_zero_scores_are_unrated(self) -> None:
        assert risk_rating(MATRIX_5X5, 0, 3) == 0
        assert risk_rating(MATRIX_5X5, 3, 0) == 0

    def test_5x5_corners(self) -> None:
        assert risk_rating(MATRIX_5X5, 1, 1) == 1
        assert risk_rating(MATRIX_5X5, 5, 5) == 5
        assert risk_rating(MATRIX_5X5, 5, 1) == 3

    def test_3x3_uses_middle_bands(self) -> None:
        assert risk_rating(MATRIX_3X3, 2, 2) == 2
        assert risk_rating(MATRIX_3X3, 4, 4) == 4
        assert risk_rating(MATRIX_3X3, 1, 2) == 0
        assert risk_rating(MATRIX_3X3, 3, 5) == 0

    def test_4x4_skips_lowest_band(self) -> None:
        assert risk_rating(MATRIX_4X4, 5, 5) == 5
        assert risk_rating(MATRIX_4X4, 2, 5) == 3
        assert risk_rating(MATRIX_4X4, 1, 3) == 0

    def test_unknown_type_rates_on_5x5(self) -> None:
        assert risk_rating(None, 1, 1) == risk_rating(MATRIX_5X5, 1, 1)
        assert risk_rating(99, 4, 5) == risk_rating(MATRIX_5X5, 4, 5)

    def test_rating_labels(self) -> None:
        assert rating_label(0) == "Unknown"
        assert rating_label(1) == "Very Low"
        assert rating_label(5) == "Critical"
        assert rating_level(7) is None


class TestGrid:
    def test_grid_rows_highest_likelihood_first(self) -> None:
        grid = matrix_grid()
        assert [likelihood for likelihood, _ in grid] == [5, 4, 3, 2, 1]
        assert [[c.label for c in cells] for _, cells in grid] == _DOCUMENTED_GRID

    def test_render_markdown(self) -> None:
        text = render_matrix_markdown()
        lines = text.splitlines()
        assert lines[0].startswith("| Likelihood \\ Impact | Very Low |")
        assert len(lines) == 7
        assert lines[2] == "| Extreme | Medium | High | High | Critical | Critical |"
        assert lines[-1] == "| Very Low | Very Low | Very Low | Low | Medium | Medium |"
