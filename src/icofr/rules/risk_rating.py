"""Combined risk rating from quantitative and qualitative factors.

The 3x3 matrix is asymmetric: a high quantitative exposure with low
qualitative risk lands on Medium, while low quantitative exposure can only
reach Medium even when qualitative risk is High.
"""
from __future__ import annotations

from typing import Union

from icofr.models.shared import RiskLevel, parse_enum

RiskInput = Union[RiskLevel, str]

# (quantitative, qualitative) -> combined rating
RISK_MATRIX: dict[tuple[RiskLevel, RiskLevel], RiskLevel] = {
    (RiskLevel.HIGH, RiskLevel.LOW): RiskLevel.MEDIUM,
    (RiskLevel.HIGH, RiskLevel.MEDIUM): RiskLevel.HIGH,
    (RiskLevel.HIGH, RiskLevel.HIGH): RiskLevel.HIGH,
    (RiskLevel.MEDIUM, RiskLevel.LOW): RiskLevel.LOW,
    (RiskLevel.MEDIUM, RiskLevel.MEDIUM): RiskLevel.MEDIUM,
    (RiskLevel.MEDIUM, RiskLevel.HIGH): RiskLevel.HIGH,
    (RiskLevel.LOW, RiskLevel.LOW): RiskLevel.LOW,
    (RiskLevel.LOW, RiskLevel.MEDIUM): RiskLevel.MEDIUM,
    (RiskLevel.LOW, RiskLevel.HIGH): RiskLevel.MEDIUM,
}


def rate(quantitative: RiskInput, qualitative: RiskInput) -> RiskLevel:
    """Combine quantitative and qualitative risk into one rating.

    Raises:
        InvalidEnumError: either input is not Low, Medium or High.
    """
    quant = parse_enum(RiskLevel, quantitative, "quantitative risk")
    qual = parse_enum(RiskLevel, qualitative, "qualitative risk")
    return RISK_MATRIX[(quant, qual)]
