"""
Generic result container for all subtypesurv computations.

Every analysis wraps its domain-specific parameter payload in the same
immutable envelope. This gives one place for timing, diagnostics and
method metadata while each analysis defines its own parameter structure.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for method metadata (approximation settings, p-value path)
    - timing is optional (don't burden unit tests)
    - warnings carry non-fatal diagnostics (default group sizes, dropped groups)
    - Immutable (frozen=True) so results are reproducible value objects
"""

import platform
from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

import numpy as np

P = TypeVar('P')  # Parameter payload type


def _default_provenance() -> dict[str, str]:
    """Library and interpreter versions that produced a result."""
    from subtypesurv import __version__

    return {
        "subtypesurv_version": __version__,
        "numpy_version": np.__version__,
        "python_version": platform.python_version(),
    }


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for curve-based survival statistics.

    Type Parameters:
        P: The analysis-specific parameter payload type

    Attributes:
        params: Analysis parameters (test statistic, hazard ratios, ...)
        info: Structured metadata (method, approximation settings)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the routine that produced this result
        warnings: Non-fatal issues encountered during computation
        provenance: Versions of the software that produced the result

    Examples:
        >>> Result(
        ...     params=LogRankParams(...),
        ...     info={'method': 'Log-rank test (curve approximation)'},
        ...     timing={'total_seconds': 0.001},
        ...     backend_name='cpu_logrank_curves',
        ...     warnings=("no usable count for C2; using default group size 100",),
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)
    provenance: dict[str, str] = field(default_factory=_default_provenance)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
