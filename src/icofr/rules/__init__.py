"""ICOFR calculators.

This package contains:
- risk_rating.py: Quantitative x qualitative risk matrix
- qualitative.py: Qualitative risk and PM haircut checklists
- sampling.py: Sample-size guidance
- remediation.py: Remediation waiting period and readiness
- materiality.py: Overall / Performance Materiality
- dod.py: Degree of Deficiency decision procedure
- distribution.py: Deficiency report recipients
- lookups.py: COBIT/ITGC, COSO and group multiplier tables
- scoping.py: Significant account scoping

Every function is pure; none of them read configuration or hold state.
"""
from icofr.rules.risk_rating import RISK_MATRIX, rate
from icofr.rules.qualitative import score, suggest_haircut, haircut_risk_label
from icofr.rules.sampling import suggest_sample_range, remediation_sample_size
from icofr.rules.remediation import ReadinessResult, minimum_wait_period, is_ready
from icofr.rules.materiality import compute_materiality
from icofr.rules.dod import (
    DoDNode,
    DoDTraversal,
    transition,
    replay,
    classify,
)
from icofr.rules.distribution import distribution_for
from icofr.rules.lookups import (
    COBIT_ITGC_MAPPING,
    ITGCReview,
    group_multiplier,
    suggested_control,
    review_itgc_mapping,
)
from icofr.rules.scoping import (
    AccountScoping,
    assess_account,
    coverage_ratio,
    meets_coverage_requirement,
)

__all__ = [
    # Risk
    "RISK_MATRIX",
    "rate",
    "score",
    "suggest_haircut",
    "haircut_risk_label",
    # Sampling and remediation
    "suggest_sample_range",
    "remediation_sample_size",
    "ReadinessResult",
    "minimum_wait_period",
    "is_ready",
    # Materiality and scoping
    "compute_materiality",
    "group_multiplier",
    "AccountScoping",
    "assess_account",
    "coverage_ratio",
    "meets_coverage_requirement",
    # Deficiencies
    "DoDNode",
    "DoDTraversal",
    "transition",
    "replay",
    "classify",
    "distribution_for",
    # Lookups
    "COBIT_ITGC_MAPPING",
    "ITGCReview",
    "suggested_control",
    "review_itgc_mapping",
]
