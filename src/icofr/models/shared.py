"""Shared vocabulary for the ICOFR calculators.

This module contains canonical definitions for the enumerations that the
calculators share (risk levels, frequencies, severities) and the lookup
helper that turns plain strings into them.

Enum values are the exact strings the application stores and exchanges
through CSV, so ``Frequency("Semi-Annual").value == "Semi-Annual"``.

Usage:
    from icofr.models.shared import RiskLevel, Frequency, parse_enum
"""
from __future__ import annotations

from enum import Enum
from typing import Any, TypeVar

from icofr.utils.error_handler import InvalidEnumError


class RiskLevel(str, Enum):
    """Three-level ordinal risk scale (Low < Medium < High)."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return RISK_LEVEL_RANK[self]


class Frequency(str, Enum):
    """Control operating frequency, least to most frequent."""
    ANNUAL = "Annual"
    SEMI_ANNUAL = "Semi-Annual"
    QUARTERLY = "Quarterly"
    MONTHLY = "Monthly"
    WEEKLY = "Weekly"
    DAILY = "Daily"
    AD_HOC = "Ad-hoc"


class ControlNature(str, Enum):
    """Execution mode of a control.

    Only AUTOMATED changes calculator behavior; the rest are manual or
    IT-dependent manual modes.
    """
    MANUAL = "Manual"
    AUTOMATED = "Automated"
    ITDM_IPE = "ITDM - IPE"
    ITDM_EUC = "ITDM - EUC"
    MRC = "MRC"


class DeficiencySeverity(str, Enum):
    """Deficiency classification, strictly increasing in severity."""
    CONTROL_DEFICIENCY = "Control Deficiency"
    SIGNIFICANT_DEFICIENCY = "Significant Deficiency"
    MATERIAL_WEAKNESS = "Material Weakness"

    @property
    def rank(self) -> int:
        return SEVERITY_RANK[self]


class PeriodUnit(str, Enum):
    """Time unit of a remediation waiting period."""
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    QUARTERS = "quarters"


class Stakeholder(str, Enum):
    """Recipients of a deficiency report."""
    PROCESS_OWNER = "Process Owner"
    MANAGEMENT = "Management (Lines 2 & 3)"
    BOARD_OF_DIRECTORS = "Board of Directors (CEO/CFO)"
    AUDIT_COMMITTEE = "Audit Committee"
    BOARD_OF_COMMISSIONERS = "Board of Commissioners"


class ITGCArea(str, Enum):
    """IT general control areas."""
    ACCESS_TO_PROGRAM_AND_DATA = "Access to Program and Data"
    PROGRAM_DEVELOPMENT = "Program Development"
    PROGRAM_CHANGES = "Program Changes"
    COMPUTER_OPERATIONS = "Computer Operations"


class BenchmarkBasis(str, Enum):
    """Financial benchmark used for overall materiality."""
    PRE_TAX_INCOME = "Pre-Tax Income"
    REVENUE = "Revenue"
    ASSETS = "Assets"
    EQUITY = "Equity"


class QualitativeScopingReason(str, Enum):
    """Qualitative reasons an account below PM is still in scope."""
    FRAUD_RISK_EXPOSURE = "Fraud risk exposure"
    VOLUME_COMPLEXITY_HOMOGENEITY = "Transaction volume, complexity and homogeneity"
    SIGNIFICANT_CHANGES = "Significant change in account characteristics"
    HIGH_JUDGEMENT = "Account requires significant judgement"
    ESTIMATES = "Account affected by estimates"
    LOAN_COVENANT = "Loan covenant compliance"
    THIRD_PARTY_ASSETS = "Assets managed by a third party"
    OTHER = "Other"


class UserRole(str, Enum):
    """Application roles (three lines model plus admin and external audit)."""
    LINE_1 = "Line 1"
    LINE_2 = "Line 2"
    LINE_3 = "Line 3"
    ADMIN = "Admin"
    EXTERNAL_AUDITOR = "External Auditor"


RISK_LEVEL_RANK: dict[RiskLevel, int] = {
    RiskLevel.LOW: 0,
    RiskLevel.MEDIUM: 1,
    RiskLevel.HIGH: 2,
}

SEVERITY_RANK: dict[DeficiencySeverity, int] = {
    DeficiencySeverity.CONTROL_DEFICIENCY: 0,
    DeficiencySeverity.SIGNIFICANT_DEFICIENCY: 1,
    DeficiencySeverity.MATERIAL_WEAKNESS: 2,
}


E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: type[E], value: Any, field: str) -> E:
    """Resolve ``value`` to a member of ``enum_cls``.

    Accepts a member of ``enum_cls`` or its exact string value. Anything
    else raises InvalidEnumError; there is no case folding or default.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str) and not isinstance(value, Enum):
        try:
            return enum_cls(value)
        except ValueError:
            pass
    raise InvalidEnumError(field, value, [m.value for m in enum_cls])
