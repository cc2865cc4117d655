"""Value records consumed and produced by the calculators."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from icofr.models.shared import BenchmarkBasis, PeriodUnit

DAY_MS = 86_400_000

# Calendar-approximate: a month is 30 days, a quarter 3 months.
PERIOD_UNIT_MS: dict[PeriodUnit, int] = {
    PeriodUnit.DAYS: DAY_MS,
    PeriodUnit.WEEKS: DAY_MS * 7,
    PeriodUnit.MONTHS: DAY_MS * 30,
    PeriodUnit.QUARTERS: DAY_MS * 90,
}


class SampleRange(BaseModel):
    """Suggested sample size interval for a test of effectiveness."""
    model_config = ConfigDict(frozen=True)

    min: int = Field(ge=0)
    max: int = Field(ge=0)
    label: str

    @model_validator(mode="after")
    def check_bounds(self) -> "SampleRange":
        if self.min > self.max:
            raise ValueError(f"min {self.min} exceeds max {self.max}")
        return self

    @property
    def is_point(self) -> bool:
        return self.min == self.max


class RemediationPeriod(BaseModel):
    """Minimum wait before a remediated control can be retested."""
    model_config = ConfigDict(frozen=True)

    value: int = Field(gt=0)
    unit: PeriodUnit

    def to_milliseconds(self) -> int:
        return self.value * PERIOD_UNIT_MS[self.unit]

    def __str__(self) -> str:
        return f"{self.value} {self.unit.value}"


class MaterialityInputs(BaseModel):
    """Inputs of the materiality calculation.

    Domain checks (percentages within 0-100, non-negative value, at least
    one location) happen in ``compute_materiality`` so that they surface as
    RangeError rather than a validation error.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    benchmark_value: float
    percentage: float
    haircut: float
    location_count: int = 1
    benchmark: Optional[BenchmarkBasis] = None


class MaterialityResult(BaseModel):
    """Overall and Performance Materiality (PM <= OM)."""
    model_config = ConfigDict(frozen=True)

    overall_materiality: float
    performance_materiality: float
    base_overall_materiality: float
    multiplier: float

    @property
    def is_group(self) -> bool:
        """OM was scaled up for a multi-location group."""
        return self.multiplier > 1


class QualitativeRiskFactors(BaseModel):
    """Qualitative risk checklist (nine criteria).

    Field names are fixed; a misspelled criterion is rejected on
    construction instead of being silently counted as absent.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    fraud_risk: bool = False
    complex_transactions: bool = False
    significant_changes: bool = False
    high_judgement: bool = False
    accounting_estimates: bool = False
    related_party_transactions: bool = False
    non_routine_transactions: bool = False
    third_party_dependency: bool = False
    prior_deficiencies: bool = False

    @property
    def active_count(self) -> int:
        return sum(1 for value in self.model_dump().values() if value)


class HaircutFactors(BaseModel):
    """Performance materiality haircut checklist (four criteria)."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    past_adjustments: bool = False
    complex_operations: bool = False
    prior_control_weakness: bool = False
    significant_changes: bool = False

    @property
    def active_count(self) -> int:
        return sum(1 for value in self.model_dump().values() if value)


class SuggestedControl(BaseModel):
    """Suggested key control for a COSO principle."""
    model_config = ConfigDict(frozen=True)

    name: str
    description: str


class AccountInput(BaseModel):
    """One trial balance line submitted for scoping."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    balance: float
    qualitative_reasons: list[str] = Field(default_factory=list)
