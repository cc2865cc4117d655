"""Static regulatory lookup tables.

- COBIT 2019 objective -> ITGC areas (advisory consistency check)
- COSO principle -> suggested key control
- Significant location count -> group materiality multiplier
"""
from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from typing import Any, Optional, Union

import structlog

from icofr.models.records import SuggestedControl
from icofr.models.shared import ITGCArea, parse_enum
from icofr.utils.error_handler import RangeError

logger = structlog.get_logger(__name__)

_ACCESS = ITGCArea.ACCESS_TO_PROGRAM_AND_DATA
_DEVELOPMENT = ITGCArea.PROGRAM_DEVELOPMENT
_CHANGES = ITGCArea.PROGRAM_CHANGES
_OPERATIONS = ITGCArea.COMPUTER_OPERATIONS

COBIT_ITGC_MAPPING: dict[str, tuple[ITGCArea, ...]] = {
    "APO09": (_DEVELOPMENT, _CHANGES, _OPERATIONS, _ACCESS),
    "APO10": (_DEVELOPMENT, _CHANGES, _OPERATIONS, _ACCESS),
    "APO13": (_OPERATIONS, _ACCESS),
    "BAI02": (_DEVELOPMENT, _CHANGES),
    "BAI03": (_DEVELOPMENT, _CHANGES),
    "BAI04": (_DEVELOPMENT, _CHANGES),
    "BAI06": (_CHANGES, _OPERATIONS, _ACCESS),
    "BAI07": (_DEVELOPMENT, _CHANGES, _OPERATIONS, _ACCESS),
    "BAI10": (_CHANGES, _OPERATIONS, _ACCESS),
    "DSS01": (_DEVELOPMENT, _OPERATIONS, _ACCESS),
    "DSS02": (_DEVELOPMENT, _CHANGES, _OPERATIONS),
    "DSS03": (_OPERATIONS,),
    "DSS04": (_OPERATIONS, _ACCESS),
    "DSS05": (_OPERATIONS, _ACCESS),
    "DSS06": (_OPERATIONS, _ACCESS),
}

COSO_SUGGESTED_CONTROLS: dict[int, SuggestedControl] = {
    1: SuggestedControl(
        name="Code of Conduct",
        description="A written code of conduct is maintained, updated periodically and accessible to all personnel.",
    ),
    2: SuggestedControl(
        name="Audit Committee Charter",
        description="The independence of the Board of Commissioners and Audit Committee in overseeing financial reporting is formally established.",
    ),
    3: SuggestedControl(
        name="Organization Structure & DoA",
        description="Management defines reporting lines and a clear Delegation of Authority (DoA) matrix.",
    ),
    4: SuggestedControl(
        name="Recruitment & Competency Policy",
        description="Recruitment includes reference checks and periodic training tailored to each function.",
    ),
    5: SuggestedControl(
        name="ICOFR KPIs",
        description="Performance evaluation (KPI) includes accountability for internal control responsibilities.",
    ),
    6: SuggestedControl(
        name="Scoping Documentation",
        description="Management documents the ICOFR scoping review based on quantitative and qualitative factors.",
    ),
    7: SuggestedControl(
        name="Significant Risk Identification",
        description="The lines of defense coordinate to identify risks affecting financial reporting objectives.",
    ),
    8: SuggestedControl(
        name="Fraud Risk Assessment",
        description="RCM design specifically considers potential asset misappropriation and corruption.",
    ),
    9: SuggestedControl(
        name="Business Change Monitoring",
        description="Organizational or technology changes affecting the control system are identified.",
    ),
    10: SuggestedControl(
        name="Segregation of Duties (SoD)",
        description="Authorization, recording and asset custody functions are adequately segregated.",
    ),
    11: SuggestedControl(
        name="IT General Controls (ITGC)",
        description="Controls over technology infrastructure (access, change, operations) are established end to end.",
    ),
    12: SuggestedControl(
        name="Policies & SOPs",
        description="SOPs for operations and financial reporting are drafted and reviewed periodically.",
    ),
    13: SuggestedControl(
        name="IPE/EUC Validation",
        description="Controls ensure the accuracy and completeness of system or spreadsheet generated information.",
    ),
    14: SuggestedControl(
        name="Whistleblowing System (WBS)",
        description="An internal reporting channel for fraud exists with a formal investigation process.",
    ),
    15: SuggestedControl(
        name="External Communication & SOC",
        description="Information is reviewed before release to external parties and third-party SOC reports are reviewed.",
    ),
    16: SuggestedControl(
        name="Periodic Monitoring (CSA/Audit)",
        description="Ongoing evaluation through control self-assessment (CSA) and independent internal audit.",
    ),
    17: SuggestedControl(
        name="Deficiency Remediation",
        description="Deficiencies are evaluated and communicated timely and remediation activities are carried out.",
    ),
}

DEFAULT_SUGGESTED_CONTROL = SuggestedControl(
    name="Transaction Authorization",
    description="Every material transaction is authorized by an official with the appropriate authority limit.",
)

# Upper bound of each location-count band and its multiplier; above the last
# bound the multiplier is GROUP_MULTIPLIER_CEILING.
GROUP_MULTIPLIER_BANDS: list[tuple[int, float]] = [
    (1, 1.0),
    (2, 1.5),
    (4, 2.0),
    (6, 2.5),
    (9, 3.0),
    (14, 3.5),
    (19, 4.0),
    (25, 4.5),
    (30, 5.0),
    (40, 5.5),
    (50, 6.0),
    (64, 6.5),
    (80, 7.0),
    (94, 7.5),
    (110, 8.0),
    (130, 8.5),
]
GROUP_MULTIPLIER_CEILING = 9.0

_BAND_BOUNDS = [bound for bound, _ in GROUP_MULTIPLIER_BANDS]


def group_multiplier(count: int) -> float:
    """Materiality multiplier for the number of significant locations.

    Non-decreasing in ``count``: 1 for one location or fewer, 9 beyond 130.

    Raises:
        RangeError: negative or non-integer count
    """
    if isinstance(count, bool) or not isinstance(count, int):
        raise RangeError("location count", count, "a whole number")
    if count < 0:
        raise RangeError("location count", count, "zero or greater")

    index = bisect.bisect_left(_BAND_BOUNDS, count)
    if index >= len(GROUP_MULTIPLIER_BANDS):
        return GROUP_MULTIPLIER_CEILING
    return GROUP_MULTIPLIER_BANDS[index][1]


def suggested_control(principle: int) -> SuggestedControl:
    """Suggested key control for a COSO principle (1-17).

    Unmapped codes fall back to a generic transaction authorization control.
    """
    control = COSO_SUGGESTED_CONTROLS.get(principle)
    if control is None:
        logger.warning("coso_principle_unmapped", principle=principle)
        return DEFAULT_SUGGESTED_CONTROL
    return control


@dataclass(frozen=True)
class ITGCReview:
    """Result of checking a COBIT objective against a chosen ITGC area."""
    cobit_id: str
    area: ITGCArea
    consistent: bool
    expected_areas: tuple[ITGCArea, ...] = field(default_factory=tuple)
    warning: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "cobit_id": self.cobit_id,
            "area": self.area.value,
            "consistent": self.consistent,
            "expected_areas": [a.value for a in self.expected_areas],
            "warning": self.warning,
        }


def itgc_areas_for(cobit_id: str) -> tuple[ITGCArea, ...]:
    """ITGC areas covered by a COBIT objective; empty if unknown."""
    return COBIT_ITGC_MAPPING.get(cobit_id.strip().upper(), ())


def review_itgc_mapping(cobit_id: str, area: Union[ITGCArea, str]) -> ITGCReview:
    """Check a user-entered COBIT ID / ITGC area pair against the mapping.

    Advisory only: an inconsistent pair yields a warning, never an error,
    and never blocks saving the control.

    Raises:
        InvalidEnumError: ``area`` is not one of the four ITGC areas
    """
    itgc_area = parse_enum(ITGCArea, area, "ITGC area")
    normalized = cobit_id.strip().upper()
    expected = itgc_areas_for(normalized)

    if not expected:
        warning = f"{normalized} is not in the COBIT to ITGC reference mapping"
    elif itgc_area not in expected:
        warning = (
            f"{normalized} is not normally mapped to {itgc_area.value}; "
            f"expected one of: {', '.join(a.value for a in expected)}"
        )
    else:
        warning = None

    if warning:
        logger.warning("itgc_mapping_inconsistent", cobit_id=normalized, area=itgc_area.value)

    return ITGCReview(
        cobit_id=normalized,
        area=itgc_area,
        consistent=warning is None,
        expected_areas=expected,
        warning=warning,
    )
