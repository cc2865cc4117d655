"""Overall and Performance Materiality.

    base OM = benchmark value x percentage / 100
    OM      = base OM x group multiplier(location count)
    PM      = OM x (1 - haircut / 100)
"""
from __future__ import annotations

import math

from icofr.models.records import MaterialityInputs, MaterialityResult
from icofr.rules.lookups import group_multiplier
from icofr.utils.error_handler import RangeError


def _check_percentage(field: str, value: float) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool) or math.isnan(value):
        raise RangeError(field, value, "a number between 0 and 100")
    if value < 0 or value > 100:
        raise RangeError(field, value, "between 0 and 100")


def validate_inputs(inputs: MaterialityInputs) -> None:
    """Raise RangeError for any input outside its domain; never clamps."""
    value = inputs.benchmark_value
    if math.isnan(value) or math.isinf(value) or value < 0:
        raise RangeError("benchmark value", value, "a non-negative amount")
    _check_percentage("percentage", inputs.percentage)
    _check_percentage("haircut", inputs.haircut)
    if inputs.location_count < 1:
        raise RangeError("location count", inputs.location_count, "at least 1")


def compute_materiality(inputs: MaterialityInputs) -> MaterialityResult:
    """Compute OM and PM for the given inputs.

    A zero benchmark value gives OM = PM = 0. A 0% haircut gives PM == OM
    and a 100% haircut gives PM == 0.

    Raises:
        RangeError: percentage or haircut outside [0, 100], negative value,
            or fewer than one location
    """
    validate_inputs(inputs)

    base = inputs.benchmark_value * inputs.percentage / 100
    multiplier = group_multiplier(inputs.location_count)
    overall = base * multiplier

    if inputs.haircut == 0:
        performance = overall
    elif inputs.haircut == 100:
        performance = 0.0
    else:
        performance = overall * (1 - inputs.haircut / 100)

    return MaterialityResult(
        overall_materiality=overall,
        performance_materiality=min(performance, overall),
        base_overall_materiality=base,
        multiplier=multiplier,
    )
