"""Sample-size guidance for tests of operating effectiveness.

Automated controls are tested once: automation removes population
sampling risk. Manual controls are sampled by operating frequency, with a
larger sample for High-risk controls.
"""
from __future__ import annotations

from typing import Union

from icofr.models.records import SampleRange
from icofr.models.shared import ControlNature, Frequency, RiskLevel, parse_enum

AUTOMATED_SAMPLE = SampleRange(min=1, max=1, label="1 (Test of One)")
AD_HOC_SAMPLE = SampleRange(min=1, max=25, label="1-25 (Auditor judgement)")

# frequency -> (High risk sample, non-High risk sample)
SAMPLE_SIZE_TABLE: dict[Frequency, tuple[int, int]] = {
    Frequency.ANNUAL: (1, 1),
    Frequency.SEMI_ANNUAL: (3, 2),
    Frequency.QUARTERLY: (3, 2),
    Frequency.MONTHLY: (5, 2),
    Frequency.WEEKLY: (15, 5),
    Frequency.DAILY: (40, 15),
}

# Minimum sample when retesting a remediated control
REMEDIATION_SAMPLE_SIZES: dict[Frequency, int] = {
    Frequency.ANNUAL: 1,
    Frequency.SEMI_ANNUAL: 1,
    Frequency.QUARTERLY: 2,
    Frequency.MONTHLY: 2,
    Frequency.WEEKLY: 5,
    Frequency.DAILY: 15,
    Frequency.AD_HOC: 30,
}


def suggest_sample_range(
    frequency: Union[Frequency, str],
    risk: Union[RiskLevel, str],
    nature: str,
) -> SampleRange:
    """Suggested sample range for a control.

    Args:
        frequency: Operating frequency of the control
        risk: Control risk rating
        nature: Execution mode; "Automated" short-circuits to a test of one

    Raises:
        InvalidEnumError: unrecognized frequency or risk level
    """
    freq = parse_enum(Frequency, frequency, "frequency")
    rating = parse_enum(RiskLevel, risk, "risk level")

    if nature == ControlNature.AUTOMATED.value:
        return AUTOMATED_SAMPLE

    if freq is Frequency.AD_HOC:
        return AD_HOC_SAMPLE

    high_size, standard_size = SAMPLE_SIZE_TABLE[freq]
    if freq is Frequency.ANNUAL:
        return SampleRange(min=standard_size, max=standard_size, label=f"{standard_size} (Annual)")
    if rating is RiskLevel.HIGH:
        return SampleRange(min=high_size, max=high_size, label=f"{high_size} (High Risk)")
    return SampleRange(min=standard_size, max=standard_size, label=f"{standard_size} (Low Risk)")


def remediation_sample_size(frequency: Union[Frequency, str]) -> int:
    """Sample size for retesting a remediated control."""
    freq = parse_enum(Frequency, frequency, "frequency")
    return REMEDIATION_SAMPLE_SIZES[freq]
