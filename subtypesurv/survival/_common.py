"""
Parameter payloads for curve-based survival results.

Each dataclass is a frozen payload carried inside a Result[P] envelope.
"""

from __future__ import annotations

from dataclasses import dataclass

from numpy.typing import NDArray


@dataclass(frozen=True)
class CleanCurve:
    """Preprocessed survival curve.

    Sorted by time, one point per distinct time, survival non-increasing.
    """

    subtype: str
    time: NDArray                # (m,): distinct times, ascending
    survival: NDArray            # (m,): running-minimum S(t)
    se: NDArray                  # (m,): Greenwood approximation
    ci_lower: NDArray            # (m,): max(0, S - z*se)
    ci_upper: NDArray            # (m,): min(1, S + z*se)
    censored: NDArray            # (m,): supplied censored counts (0 if absent)
    events: NDArray              # (m,): supplied event counts (0 if absent)
    n_initial: int               # initial at-risk count of the group


@dataclass(frozen=True)
class CurveParams:
    """Descriptive summaries of a set of cleaned curves."""

    curves: tuple[CleanCurve, ...]
    median_survival: tuple[float | None, ...]          # per curve
    event_markers: tuple[tuple[str, float, float], ...]   # (subtype, time, S)
    censor_markers: tuple[tuple[str, float, float], ...]  # (subtype, time, S)


@dataclass(frozen=True)
class LogRankParams:
    """Log-rank test on curve-derived event estimates."""

    chi_square: float
    degrees_of_freedom: int      # n_groups - 1
    p_value: float
    n_groups: int
    group_labels: tuple[str, ...]
    observed: NDArray            # (n_groups,): estimated events per group
    expected: NDArray            # (n_groups,): expected events per group
    n_initial: NDArray           # (n_groups,): initial at-risk counts
    n_times: int                 # length of the pooled time grid
    p_value_method: str          # "series" or "gamma" (df > 1 only)


@dataclass(frozen=True)
class HazardRatioGroup:
    """Hazard ratio of one subtype against the reference subtype."""

    subtype: str
    hazard_ratio: float          # exp(coefficient)
    lower_ci: float
    upper_ci: float
    p_value: float               # two-sided Wald test
    coefficient: float           # mean log hazard ratio
    se: float                    # max(empirical SD, sample-size floor)
    n_time_points: int           # valid per-time samples


@dataclass(frozen=True)
class WaldTest:
    """Aggregate Wald test over all retained groups."""

    chi_square: float
    df: int
    p_value: float


@dataclass(frozen=True)
class CoxPHParams:
    """Cox PH approximation from curve shape."""

    reference_group: str
    groups: tuple[HazardRatioGroup, ...]
    wald_test: WaldTest
    z_critical: float
    dropped_groups: tuple[str, ...]  # no comparable time points
