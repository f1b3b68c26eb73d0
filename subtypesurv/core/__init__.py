"""
Core infrastructure for subtypesurv.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Special functions and timing
"""

from subtypesurv.core.result import Result
from subtypesurv.core.exceptions import (
    SubtypeSurvError,
    ValidationError,
    DimensionError,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "SubtypeSurvError",
    "ValidationError",
    "DimensionError",
]
