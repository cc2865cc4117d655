"""Shared utilities."""
from icofr.utils.error_handler import (
    RulesError,
    InvalidEnumError,
    RangeError,
    IncompleteTraversalError,
    TraversalError,
    exit_with_error,
)

__all__ = [
    "RulesError",
    "InvalidEnumError",
    "RangeError",
    "IncompleteTraversalError",
    "TraversalError",
    "exit_with_error",
]
