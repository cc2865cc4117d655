"""Calculator errors with user-facing messages.

Every calculator either returns a complete result or raises one of the
errors below. None of them are retryable: the calculators are pure, so
calling again with the same inputs fails the same way.
"""
from __future__ import annotations

import sys
from typing import Any, Iterable

import structlog

logger = structlog.get_logger(__name__)


class RulesError(Exception):
    """Base class for calculator errors with user-friendly messaging."""

    def __init__(self, error_type: str, message: str, details: str = ""):
        self.error_type = error_type
        self.message = message
        self.details = details
        super().__init__(self.message)

    def get_user_message(self) -> str:
        """Return a user-friendly error message."""
        msg = f"\n{self.message}"
        if self.details:
            msg += f"\n   Details: {self.details}"
        return msg

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_type": self.error_type,
            "message": self.message,
            "details": self.details,
        }


class InvalidEnumError(RulesError):
    """Input value is outside its declared enumeration."""

    def __init__(self, field: str, value: Any, allowed: Iterable[str] = ()):
        allowed = list(allowed)
        self.field = field
        self.value = value
        super().__init__(
            error_type="INVALID_ENUM",
            message=f"Unrecognized {field}: {value!r}",
            details=f"Expected one of: {', '.join(allowed)}" if allowed else "",
        )


class RangeError(RulesError):
    """Numeric input is outside its declared domain."""

    def __init__(self, field: str, value: Any, constraint: str):
        self.field = field
        self.value = value
        super().__init__(
            error_type="RANGE_ERROR",
            message=f"{field} out of range: {value!r}",
            details=f"Must be {constraint}",
        )


class IncompleteTraversalError(RulesError):
    """Deficiency classification requested before the decision tree finished."""

    def __init__(self, node: Any = None):
        details = f"Traversal stopped at box {node}" if node is not None else ""
        super().__init__(
            error_type="INCOMPLETE_TRAVERSAL",
            message="Degree of Deficiency assessment is not complete",
            details=details,
        )


class TraversalError(RulesError):
    """An answer was given after the decision tree reached its result."""

    def __init__(self):
        super().__init__(
            error_type="TRAVERSAL_COMPLETE",
            message="Degree of Deficiency assessment already has a result",
            details="Reset the assessment to answer again",
        )


def exit_with_error(error: RulesError, context: str = "") -> int:
    """Log error and exit gracefully with user-friendly message."""
    logger.error(
        "calculation_failed",
        error_type=error.error_type,
        message=error.message,
        details=error.details,
        context=context,
    )

    print(error.get_user_message(), file=sys.stderr)
    print("", file=sys.stderr)
    return 1
