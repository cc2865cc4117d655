"""Data models for the ICOFR calculators.

This package contains:
- shared.py: Enumerations shared across calculators and ``parse_enum``
- records.py: Immutable input/result records
"""
from icofr.models.shared import (
    RiskLevel,
    Frequency,
    ControlNature,
    DeficiencySeverity,
    PeriodUnit,
    Stakeholder,
    ITGCArea,
    BenchmarkBasis,
    QualitativeScopingReason,
    UserRole,
    parse_enum,
)
from icofr.models.records import (
    AccountInput,
    SampleRange,
    RemediationPeriod,
    MaterialityInputs,
    MaterialityResult,
    QualitativeRiskFactors,
    HaircutFactors,
    SuggestedControl,
)

__all__ = [
    # Enums
    "RiskLevel",
    "Frequency",
    "ControlNature",
    "DeficiencySeverity",
    "PeriodUnit",
    "Stakeholder",
    "ITGCArea",
    "BenchmarkBasis",
    "QualitativeScopingReason",
    "UserRole",
    "parse_enum",
    # Records
    "SampleRange",
    "RemediationPeriod",
    "MaterialityInputs",
    "MaterialityResult",
    "QualitativeRiskFactors",
    "HaircutFactors",
    "SuggestedControl",
    "AccountInput",
]
