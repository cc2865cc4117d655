"""Deficiency report distribution matrix.

Recipients grow with severity: everyone who receives a Control Deficiency
report also receives the Significant Deficiency and Material Weakness ones.
"""
from __future__ import annotations

from typing import Any

import structlog

from icofr.models.shared import DeficiencySeverity, Stakeholder

logger = structlog.get_logger(__name__)

DISTRIBUTION_MATRIX: dict[DeficiencySeverity, tuple[Stakeholder, ...]] = {
    DeficiencySeverity.CONTROL_DEFICIENCY: (
        Stakeholder.PROCESS_OWNER,
    ),
    DeficiencySeverity.SIGNIFICANT_DEFICIENCY: (
        Stakeholder.PROCESS_OWNER,
        Stakeholder.MANAGEMENT,
        Stakeholder.AUDIT_COMMITTEE,
    ),
    DeficiencySeverity.MATERIAL_WEAKNESS: (
        Stakeholder.PROCESS_OWNER,
        Stakeholder.MANAGEMENT,
        Stakeholder.BOARD_OF_DIRECTORS,
        Stakeholder.AUDIT_COMMITTEE,
        Stakeholder.BOARD_OF_COMMISSIONERS,
    ),
}


def distribution_for(severity: Any) -> list[Stakeholder]:
    """Ordered recipients of a deficiency report.

    Unknown severities get the Control Deficiency recipients, the minimal
    disclosure set.
    """
    try:
        key = DeficiencySeverity(severity)
    except ValueError:
        logger.warning("distribution_unknown_severity", severity=str(severity))
        key = DeficiencySeverity.CONTROL_DEFICIENCY
    return list(DISTRIBUTION_MATRIX[key])
