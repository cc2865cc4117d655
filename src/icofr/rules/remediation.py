"""Remediation readiness: minimum wait before retesting a fixed control.

Elapsed time is measured with calendar-approximate units (30-day months,
90-day quarters), not calendar arithmetic.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

import structlog

from icofr.models.records import DAY_MS, RemediationPeriod
from icofr.models.shared import Frequency, PeriodUnit, parse_enum
from icofr.utils.error_handler import RangeError

logger = structlog.get_logger(__name__)

Instant = Union[datetime, int, float]
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

MINIMUM_WAIT_PERIODS: dict[Frequency, RemediationPeriod] = {
    Frequency.ANNUAL: RemediationPeriod(value=1, unit=PeriodUnit.QUARTERS),
    Frequency.SEMI_ANNUAL: RemediationPeriod(value=1, unit=PeriodUnit.QUARTERS),
    Frequency.QUARTERLY: RemediationPeriod(value=2, unit=PeriodUnit.QUARTERS),
    Frequency.MONTHLY: RemediationPeriod(value=3, unit=PeriodUnit.MONTHS),
    Frequency.WEEKLY: RemediationPeriod(value=5, unit=PeriodUnit.WEEKS),
    Frequency.DAILY: RemediationPeriod(value=30, unit=PeriodUnit.DAYS),
    Frequency.AD_HOC: RemediationPeriod(value=25, unit=PeriodUnit.DAYS),
}

READY_MESSAGE = "Minimum remediation waiting period has been met."
NOT_READY_MESSAGE = "Minimum remediation waiting period ({period}) has not yet elapsed since remediation."


@dataclass(frozen=True)
class ReadinessResult:
    """Outcome of a remediation readiness check."""
    is_ready: bool
    message: str
    required_period: RemediationPeriod
    elapsed_ms: int
    required_ms: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_ready": self.is_ready,
            "message": self.message,
            "required_period": str(self.required_period),
            "elapsed_days": round(self.elapsed_ms / DAY_MS, 2),
        }


def minimum_wait_period(frequency: Union[Frequency, str]) -> RemediationPeriod:
    """Minimum wait after remediation before the control can be retested.

    Raises:
        InvalidEnumError: unrecognized frequency
    """
    freq = parse_enum(Frequency, frequency, "frequency")
    return MINIMUM_WAIT_PERIODS[freq]


def to_epoch_ms(instant: Instant, field: str = "timestamp") -> int:
    """Epoch milliseconds for a datetime or an epoch-millisecond number.

    Naive datetimes are taken as UTC.
    """
    if isinstance(instant, datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        return (instant - EPOCH) // timedelta(milliseconds=1)
    if isinstance(instant, bool) or not isinstance(instant, (int, float)):
        raise RangeError(field, instant, "a datetime or epoch milliseconds")
    if not math.isfinite(instant):
        raise RangeError(field, instant, "finite epoch milliseconds")
    if instant < 0:
        raise RangeError(field, instant, "non-negative epoch milliseconds")
    return int(instant)


def is_ready(
    frequency: Union[Frequency, str],
    remediation_timestamp: Instant,
    now: Optional[Instant] = None,
) -> ReadinessResult:
    """Check whether enough time has passed since remediation to retest.

    Args:
        frequency: Operating frequency of the remediated control
        remediation_timestamp: When the remediation was put in place
        now: Reference instant; defaults to the current UTC time

    Returns:
        ReadinessResult, ready iff elapsed >= the minimum period
    """
    period = minimum_wait_period(frequency)
    remediated_ms = to_epoch_ms(remediation_timestamp, "remediation timestamp")
    now_ms = to_epoch_ms(now if now is not None else datetime.now(timezone.utc), "now")

    elapsed = now_ms - remediated_ms
    required = period.to_milliseconds()
    ready = elapsed >= required

    if elapsed < 0:
        logger.warning("remediation_timestamp_in_future", remediation_ms=remediated_ms, now_ms=now_ms)

    message = READY_MESSAGE if ready else NOT_READY_MESSAGE.format(period=period)
    return ReadinessResult(
        is_ready=ready,
        message=message,
        required_period=period,
        elapsed_ms=elapsed,
        required_ms=required,
    )
