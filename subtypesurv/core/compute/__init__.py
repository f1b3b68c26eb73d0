"""
Shared numeric infrastructure for subtypesurv.

Submodules:
    special: Normal CDF, log-gamma, incomplete gamma, chi-squared CDF
    timing: Execution timing utilities
"""

from subtypesurv.core.compute.special import (
    chi_square_cdf,
    chi_square_sf_series,
    log_gamma,
    normal_cdf,
    regularized_lower_incomplete_gamma,
)
from subtypesurv.core.compute.timing import Timer

__all__ = [
    # Special functions
    "normal_cdf",
    "log_gamma",
    "regularized_lower_incomplete_gamma",
    "chi_square_cdf",
    "chi_square_sf_series",
    # Timing
    "Timer",
]
