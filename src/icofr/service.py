"""Service seam between the CRUD/UI layer and the calculators.

The CRUD layer reads current field values, calls a method here, and writes
the returned ``result`` back as a field update. Every payload echoes the
``inputs`` it was computed from so the stored value keeps a clear
"last computed from these inputs" relationship.

The acting role is explicit configuration (``ServiceConfig``) rather than
ambient state; calculators never see it.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping, Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict

from icofr.config.loader import get_default_role
from icofr.models.records import (
    AccountInput,
    HaircutFactors,
    MaterialityInputs,
    QualitativeRiskFactors,
)
from icofr.models.shared import UserRole, parse_enum
from icofr.rules import dod
from icofr.rules.distribution import distribution_for
from icofr.rules.lookups import review_itgc_mapping, suggested_control
from icofr.rules.materiality import compute_materiality
from icofr.rules.qualitative import haircut_risk_label, score, suggest_haircut
from icofr.rules.remediation import is_ready
from icofr.rules.risk_rating import rate
from icofr.rules.sampling import remediation_sample_size, suggest_sample_range
from icofr.rules.scoping import assess_account
from icofr.utils.error_handler import InvalidEnumError, RulesError

logger = structlog.get_logger(__name__)


class ServiceConfig(BaseModel):
    """Explicit caller context for the service."""
    model_config = ConfigDict(frozen=True)

    role: UserRole = UserRole.LINE_1
    actor: Optional[str] = None

    @classmethod
    def from_environment(cls, actor: Optional[str] = None) -> "ServiceConfig":
        """Build from ICOFR_ROLE / the config file default role."""
        return cls(role=parse_enum(UserRole, get_default_role(), "role"), actor=actor)


def _payload(inputs: dict[str, Any], result: Any) -> dict[str, Any]:
    return {"inputs": inputs, "result": result}


def _plain(value: Any) -> Any:
    return getattr(value, "value", value)


def _box_number(key: Union[int, str]) -> int:
    try:
        return int(key)
    except (TypeError, ValueError):
        raise InvalidEnumError("DoD box", key, [str(n) for n in range(1, 7)]) from None


class ComplianceService:
    """Calculator facade used by the application's route handlers."""

    def __init__(self, config: Optional[ServiceConfig] = None):
        self.config = config or ServiceConfig()
        self._log = logger.bind(role=self.config.role.value, actor=self.config.actor)

    def rate_control_risk(
        self,
        quantitative: str,
        qualitative: Optional[str] = None,
        factors: Optional[Mapping[str, bool]] = None,
    ) -> dict[str, Any]:
        """Combined control risk rating.

        The qualitative side is either given directly or scored from the
        nine-criteria checklist.
        """
        if qualitative is not None and factors:
            raise RulesError(
                error_type="CONFLICTING_INPUT",
                message="Give either a qualitative rating or checklist factors, not both",
                details=f"qualitative={_plain(qualitative)!r}, factors={sorted(factors)}",
            )
        if qualitative is None:
            qualitative_level = score(QualitativeRiskFactors(**dict(factors or {})))
        else:
            qualitative_level = qualitative
        rating = rate(quantitative, qualitative_level)
        self._log.info("control_risk_rated", rating=rating.value)
        return _payload(
            {
                "quantitative": _plain(quantitative),
                "qualitative": _plain(qualitative_level),
                "factors": dict(factors) if factors else None,
            },
            rating.value,
        )

    def score_qualitative_risk(self, factors: Mapping[str, bool]) -> dict[str, Any]:
        """Qualitative risk rating from the nine-criteria checklist."""
        rating = score(QualitativeRiskFactors(**dict(factors)))
        self._log.info("qualitative_risk_scored", rating=rating.value)
        return _payload({"factors": dict(factors)}, rating.value)

    def suggest_haircut(self, factors: Mapping[str, bool]) -> dict[str, Any]:
        """Suggested PM haircut from the four-criteria checklist."""
        haircut = suggest_haircut(HaircutFactors(**dict(factors)))
        self._log.info("haircut_suggested", haircut=haircut)
        return _payload(
            {"factors": dict(factors)},
            {"haircut": haircut, "risk": haircut_risk_label(haircut).value},
        )

    def suggest_samples(self, frequency: str, risk: str, nature: str) -> dict[str, Any]:
        """Sample range for a test of effectiveness, plus the remediation retest size."""
        sample = suggest_sample_range(frequency, risk, nature)
        self._log.debug("sample_range_suggested", frequency=frequency, min=sample.min, max=sample.max)
        return _payload(
            {"frequency": _plain(frequency), "risk": _plain(risk), "nature": _plain(nature)},
            {
                **sample.model_dump(),
                "remediation_sample_size": remediation_sample_size(frequency),
            },
        )

    def check_remediation(
        self,
        frequency: str,
        remediation_timestamp: Union[datetime, int, float],
        now: Optional[Union[datetime, int, float]] = None,
    ) -> dict[str, Any]:
        """Whether a remediated control has waited long enough to be retested."""
        readiness = is_ready(frequency, remediation_timestamp, now=now)
        self._log.info("remediation_checked", frequency=frequency, ready=readiness.is_ready)
        stamp = remediation_timestamp.isoformat() if isinstance(remediation_timestamp, datetime) else remediation_timestamp
        return _payload({"frequency": _plain(frequency), "remediation_timestamp": stamp}, readiness.to_dict())

    def calculate_materiality(self, **fields: Any) -> dict[str, Any]:
        """OM and PM for the materiality form fields."""
        inputs = MaterialityInputs(**fields)
        result = compute_materiality(inputs)
        self._log.info(
            "materiality_computed",
            overall=result.overall_materiality,
            performance=result.performance_materiality,
            multiplier=result.multiplier,
        )
        return _payload(
            inputs.model_dump(mode="json"),
            {**result.model_dump(), "is_group": result.is_group},
        )

    def classify_deficiency(
        self,
        answers: Mapping[Union[int, str], bool],
        aggregate: bool = False,
    ) -> dict[str, Any]:
        """Run the DoD procedure over a completed answer sheet.

        Keys may be box numbers or their string form (as decoded from JSON).
        """
        normalized: dict[int, bool] = {}
        for key, value in answers.items():
            box = _box_number(key)
            if box in normalized:
                raise RulesError(
                    error_type="DUPLICATE_ANSWER",
                    message=f"Box {box} answered more than once",
                    details="Each DoD box takes a single answer",
                )
            normalized[box] = value
        traversal = dod.replay(normalized, aggregate=aggregate)
        severity = traversal.result()
        self._log.info(
            "deficiency_classified",
            severity=severity.value,
            path=traversal.path,
            aggregate=aggregate,
        )
        return _payload(
            {"answers": normalized, "aggregate": aggregate},
            {
                "severity": severity.value,
                "path": traversal.path,
                "distribution": [s.value for s in distribution_for(severity)],
            },
        )

    def route_deficiency_report(self, severity: str) -> dict[str, Any]:
        """Recipients of a deficiency report."""
        recipients = distribution_for(severity)
        return _payload({"severity": _plain(severity)}, [s.value for s in recipients])

    def review_itgc_mapping(self, cobit_id: str, area: str) -> dict[str, Any]:
        """Advisory COBIT / ITGC area consistency check; never blocks a save."""
        review = review_itgc_mapping(cobit_id, area)
        return _payload({"cobit_id": cobit_id, "area": _plain(area)}, review.to_dict())

    def suggest_control(self, principle: int) -> dict[str, Any]:
        """Suggested key control for a COSO principle."""
        control = suggested_control(principle)
        return _payload({"principle": principle}, control.model_dump())

    def assess_accounts(
        self,
        accounts: Iterable[Mapping[str, Any]],
        performance_materiality: float,
    ) -> list[dict[str, Any]]:
        """Scope a trial balance: one decision per account.

        Each account mapping needs ``name`` and ``balance`` and may carry
        ``qualitative_reasons``; anything else fails validation.
        """
        records = [AccountInput.model_validate(account) for account in accounts]
        decisions = [
            assess_account(
                record.name,
                record.balance,
                performance_materiality,
                record.qualitative_reasons,
            ).to_dict()
            for record in records
        ]
        self._log.info(
            "accounts_scoped",
            total=len(decisions),
            significant=sum(1 for d in decisions if d["significant"]),
        )
        return decisions
