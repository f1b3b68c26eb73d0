"""
Exception hierarchy for subtypesurv.

All exceptions inherit from SubtypeSurvError so callers can catch any
library-specific error with a single clause.

Only malformed input raises. Statistical routines signal "analysis not
applicable" by returning None, never by raising.
"""


class SubtypeSurvError(Exception):
    """Base exception for all subtypesurv errors."""
    pass


class ValidationError(SubtypeSurvError):
    """
    Input validation failed.

    Raised when survival curves, subtype counts or approximation settings
    fail validation at construction time.

    Attributes:
        field: Name of the offending parameter or record field, if known
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class DimensionError(ValidationError):
    """
    Arrays that must line up point-for-point have different lengths.

    Raised when e.g. the survival array of a curve does not match its
    time array.
    """
    pass
