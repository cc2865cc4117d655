"""Significant account scoping against Performance Materiality."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from icofr.models.shared import QualitativeScopingReason, parse_enum
from icofr.utils.error_handler import RangeError

QUANTITATIVE_REASON = "> PM"
QUALITATIVE_REASON = "Qualitative (Risk)"

# Scoped FSLIs must cover at least two thirds of the financial statements.
MINIMUM_COVERAGE = (2, 3)


@dataclass(frozen=True)
class AccountScoping:
    """Scoping decision for one financial statement line item."""
    name: str
    balance: float
    significant: bool
    reason: Optional[str] = None
    qualitative_reasons: tuple[QualitativeScopingReason, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "balance": self.balance,
            "significant": self.significant,
            "reason": self.reason,
            "qualitative_reasons": [r.value for r in self.qualitative_reasons],
        }


def assess_account(
    name: str,
    balance: float,
    performance_materiality: float,
    qualitative_reasons: Iterable[Any] = (),
) -> AccountScoping:
    """Decide whether an account is significant.

    Accounts whose absolute balance exceeds PM are significant on
    quantitative grounds; smaller accounts are still in scope when any
    qualitative scoping reason applies.

    Raises:
        RangeError: negative PM, or a non-numeric or non-finite balance
        InvalidEnumError: unknown qualitative reason
    """
    if math.isnan(performance_materiality) or performance_materiality < 0:
        raise RangeError("performance materiality", performance_materiality, "a non-negative amount")
    if isinstance(balance, bool) or not isinstance(balance, (int, float)) or not math.isfinite(balance):
        raise RangeError("balance", balance, "a finite amount")
    reasons = tuple(
        parse_enum(QualitativeScopingReason, reason, "qualitative scoping reason")
        for reason in qualitative_reasons
    )

    if abs(balance) > performance_materiality:
        return AccountScoping(name, balance, True, QUANTITATIVE_REASON, reasons)
    if reasons:
        return AccountScoping(name, balance, True, QUALITATIVE_REASON, reasons)
    return AccountScoping(name, balance, False, None, reasons)


def coverage_ratio(covered: float, total: float) -> float:
    """Share of the financial statements covered by scoped accounts."""
    if covered < 0 or total < 0:
        raise RangeError("coverage amounts", (covered, total), "non-negative")
    if total == 0:
        return 0.0
    if covered > total:
        raise RangeError("covered amount", covered, f"at most the total ({total})")
    return covered / total


def meets_coverage_requirement(covered: float, total: float) -> bool:
    """True when scoped accounts cover at least two thirds of the total."""
    if total == 0:
        return False
    coverage_ratio(covered, total)
    numerator, denominator = MINIMUM_COVERAGE
    return covered * denominator >= total * numerator
