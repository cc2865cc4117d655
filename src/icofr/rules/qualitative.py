"""Checklist scorers: qualitative risk wizard and PM haircut wizard.

Both count the active criteria and map the count through a stepped
threshold table. They are independent; neither reads the other's factors.
"""
from __future__ import annotations

from icofr.models.records import HaircutFactors, QualitativeRiskFactors
from icofr.models.shared import RiskLevel

# (minimum active criteria, rating), checked top-down
QUALITATIVE_RISK_THRESHOLDS: list[tuple[int, RiskLevel]] = [
    (6, RiskLevel.HIGH),
    (3, RiskLevel.MEDIUM),
    (0, RiskLevel.LOW),
]

# (minimum active criteria, haircut percentage), checked top-down
HAIRCUT_THRESHOLDS: list[tuple[int, int]] = [
    (3, 75),
    (1, 50),
    (0, 25),
]


def score(factors: QualitativeRiskFactors) -> RiskLevel:
    """Qualitative risk rating from the nine-criteria checklist.

    Only the number of active criteria matters: 6+ is High, 3-5 Medium,
    fewer Low.
    """
    if not isinstance(factors, QualitativeRiskFactors):
        raise TypeError(f"Expected QualitativeRiskFactors, got {type(factors).__name__}")
    count = factors.active_count
    for minimum, rating in QUALITATIVE_RISK_THRESHOLDS:
        if count >= minimum:
            return rating
    return RiskLevel.LOW


def suggest_haircut(factors: HaircutFactors) -> int:
    """Suggested PM haircut percentage from the four-criteria checklist.

    0 active -> 25%, 1-2 active -> 50%, 3+ active -> 75%.
    """
    if not isinstance(factors, HaircutFactors):
        raise TypeError(f"Expected HaircutFactors, got {type(factors).__name__}")
    count = factors.active_count
    for minimum, haircut in HAIRCUT_THRESHOLDS:
        if count >= minimum:
            return haircut
    return 25


def haircut_risk_label(haircut: float) -> RiskLevel:
    """Risk band shown beside a suggested haircut."""
    if haircut <= 25:
        return RiskLevel.LOW
    if haircut <= 50:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH
