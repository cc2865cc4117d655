"""Tests for the materiality calculator."""
from __future__ import annotations

import math

import pytest

from icofr.models.records import MaterialityInputs
from icofr.rules.materiality import compute_materiality
from icofr.utils.error_handler import RangeError


def _inputs(**overrides) -> MaterialityInputs:
    fields = {"benchmark_value": 1_000_000_000, "percentage": 5, "haircut": 25, "location_count": 1}
    fields.update(overrides)
    return MaterialityInputs(**fields)


class TestComputeMateriality:
    def test_single_location(self):
        """OM = value x pct, PM = OM x (1 - haircut)."""
        result = compute_materiality(_inputs())
        assert result.base_overall_materiality == pytest.approx(50_000_000)
        assert result.overall_materiality == pytest.approx(50_000_000)
        assert result.performance_materiality == pytest.approx(37_500_000)
        assert result.multiplier == 1
        assert not result.is_group

    def test_group_multiplier_applied(self):
        """Two locations scale OM by 1.5."""
        result = compute_materiality(_inputs(location_count=2))
        assert result.multiplier == 1.5
        assert result.overall_materiality == pytest.approx(75_000_000)
        assert result.base_overall_materiality == pytest.approx(50_000_000)
        assert result.is_group

    def test_zero_haircut_pm_equals_om(self):
        """No haircut leaves PM exactly equal to OM."""
        result = compute_materiality(_inputs(haircut=0, percentage=3.3))
        assert result.performance_materiality == result.overall_materiality

    def test_full_haircut_pm_zero(self):
        """A 100% haircut gives zero PM."""
        result = compute_materiality(_inputs(haircut=100))
        assert result.performance_materiality == 0.0

    def test_zero_value(self):
        """A zero benchmark gives zero OM and PM."""
        result = compute_materiality(_inputs(benchmark_value=0))
        assert result.overall_materiality == 0
        assert result.performance_materiality == 0

    def test_pm_never_exceeds_om(self):
        """PM <= OM for any valid haircut."""
        for haircut in (0, 0.1, 12.5, 25, 50, 75, 99.9, 100):
            result = compute_materiality(_inputs(haircut=haircut, location_count=7))
            assert result.performance_materiality <= result.overall_materiality

    def test_monotone_in_haircut(self):
        """A larger haircut never raises PM."""
        pms = [compute_materiality(_inputs(haircut=h)).performance_materiality for h in range(0, 101, 5)]
        assert pms == sorted(pms, reverse=True)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"percentage": -1},
            {"percentage": 100.5},
            {"haircut": -0.1},
            {"haircut": 101},
            {"haircut": math.nan},
            {"benchmark_value": -10},
            {"benchmark_value": math.inf},
            {"location_count": 0},
        ],
    )
    def test_out_of_range_raises(self, overrides):
        """Out-of-range inputs raise instead of clamping."""
        with pytest.raises(RangeError):
            compute_materiality(_inputs(**overrides))
