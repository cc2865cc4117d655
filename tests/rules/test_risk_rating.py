"""Tests for the combined risk rating matrix."""
from __future__ import annotations

import itertools

import pytest

from icofr.models.shared import RiskLevel
from icofr.rules.risk_rating import RISK_MATRIX, rate
from icofr.utils.error_handler import InvalidEnumError

LEVELS = [RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH]


class TestRate:
    @pytest.mark.parametrize(
        "quantitative,qualitative,expected",
        [
            ("High", "Low", "Medium"),
            ("High", "Medium", "High"),
            ("High", "High", "High"),
            ("Medium", "Low", "Low"),
            ("Medium", "Medium", "Medium"),
            ("Medium", "High", "High"),
            ("Low", "Low", "Low"),
            ("Low", "Medium", "Medium"),
            ("Low", "High", "Medium"),
        ],
    )
    def test_matrix_cells(self, quantitative, qualitative, expected):
        """Every cell of the 3x3 matrix."""
        assert rate(quantitative, qualitative) == RiskLevel(expected)

    def test_accepts_enum_members(self):
        """Enum members and their string values are interchangeable."""
        assert rate(RiskLevel.HIGH, RiskLevel.LOW) is RiskLevel.MEDIUM

    def test_matrix_is_asymmetric(self):
        """High/Low and Low/High differ only through the qualitative side."""
        assert rate("High", "Low") == RiskLevel.MEDIUM
        assert rate("Low", "High") == RiskLevel.MEDIUM
        assert rate("Medium", "Low") != rate("Low", "Medium")

    def test_monotone_in_each_argument(self):
        """Raising either input never lowers the rating."""
        for a, b in itertools.product(LEVELS, repeat=2):
            for higher in LEVELS:
                if higher.rank >= a.rank:
                    assert rate(higher, b).rank >= rate(a, b).rank
                if higher.rank >= b.rank:
                    assert rate(a, higher).rank >= rate(a, b).rank

    def test_matrix_is_total(self):
        """All nine combinations are present."""
        assert len(RISK_MATRIX) == 9

    @pytest.mark.parametrize("bad", ["high", "Critical", "", None, 2])
    def test_invalid_level_raises(self, bad):
        """Unknown or wrongly-cased levels are rejected."""
        with pytest.raises(InvalidEnumError):
            rate(bad, "Low")
        with pytest.raises(InvalidEnumError):
            rate("Low", bad)
