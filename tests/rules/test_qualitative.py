"""Tests for the qualitative risk and haircut checklists."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from icofr.models.records import HaircutFactors, QualitativeRiskFactors
from icofr.models.shared import RiskLevel
from icofr.rules.qualitative import haircut_risk_label, score, suggest_haircut

QUALITATIVE_FIELDS = list(QualitativeRiskFactors.model_fields)
HAIRCUT_FIELDS = list(HaircutFactors.model_fields)


def _qualitative(count: int) -> QualitativeRiskFactors:
    return QualitativeRiskFactors(**{name: True for name in QUALITATIVE_FIELDS[:count]})


def _haircut(count: int) -> HaircutFactors:
    return HaircutFactors(**{name: True for name in HAIRCUT_FIELDS[:count]})


class TestScore:
    @pytest.mark.parametrize(
        "count,expected",
        [
            (0, RiskLevel.LOW),
            (2, RiskLevel.LOW),
            (3, RiskLevel.MEDIUM),
            (5, RiskLevel.MEDIUM),
            (6, RiskLevel.HIGH),
            (9, RiskLevel.HIGH),
        ],
    )
    def test_thresholds(self, count, expected):
        """6+ High, 3-5 Medium, otherwise Low."""
        assert score(_qualitative(count)) == expected

    def test_only_count_matters(self):
        """Which criteria are active does not change the rating."""
        first = QualitativeRiskFactors(fraud_risk=True, high_judgement=True, prior_deficiencies=True)
        second = QualitativeRiskFactors(
            complex_transactions=True, accounting_estimates=True, third_party_dependency=True
        )
        assert score(first) == score(second) == RiskLevel.MEDIUM

    def test_monotone(self):
        """Adding a criterion never lowers the rating."""
        ranks = [score(_qualitative(n)).rank for n in range(len(QUALITATIVE_FIELDS) + 1)]
        assert ranks == sorted(ranks)

    def test_nine_criteria(self):
        """The checklist has exactly nine criteria."""
        assert len(QUALITATIVE_FIELDS) == 9

    def test_unknown_criterion_rejected(self):
        """Misspelled criteria fail validation instead of counting as absent."""
        with pytest.raises(ValidationError):
            QualitativeRiskFactors(fraud=True)

    def test_wrong_record_type(self):
        """Passing haircut factors to the qualitative scorer is a type error."""
        with pytest.raises(TypeError):
            score(HaircutFactors())


class TestSuggestHaircut:
    @pytest.mark.parametrize("count,expected", [(0, 25), (1, 50), (2, 50), (3, 75), (4, 75)])
    def test_thresholds(self, count, expected):
        """0 -> 25, 1-2 -> 50, 3+ -> 75."""
        assert suggest_haircut(_haircut(count)) == expected

    def test_monotone(self):
        """More risk factors never reduce the haircut."""
        values = [suggest_haircut(_haircut(n)) for n in range(len(HAIRCUT_FIELDS) + 1)]
        assert values == sorted(values)

    def test_range(self):
        """Suggested haircut stays within 25..75."""
        for n in range(len(HAIRCUT_FIELDS) + 1):
            assert 25 <= suggest_haircut(_haircut(n)) <= 75

    def test_wrong_record_type(self):
        """Qualitative factors are not accepted by the haircut wizard."""
        with pytest.raises(TypeError):
            suggest_haircut(QualitativeRiskFactors())


class TestHaircutRiskLabel:
    @pytest.mark.parametrize("haircut,expected", [(25, "Low"), (50, "Medium"), (75, "High"), (0, "Low")])
    def test_label(self, haircut, expected):
        """Risk band shown next to the haircut."""
        assert haircut_risk_label(haircut) == RiskLevel(expected)
