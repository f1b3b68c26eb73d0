"""
Curve preprocessing shared by the log-rank and hazard-ratio engines.

Every engine goes through clean_curve() so both see the same normalized
step function:
    1. Points sorted by time (stable)
    2. Survival forced non-increasing by a running minimum starting at 1.0
    3. Duplicate times collapsed to the last (lowest) survival value
    4. Greenwood approximation SE(t) = S * sqrt((1 - S) / (n * S))
       inside the Greenwood window, 0 outside it

The grid helpers rebuild estimated events and at-risk counts from curve
shape alone. These are approximations: the raw event times behind an
aggregated curve are not available.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from subtypesurv.survival._approximation import CurveApproximation
from subtypesurv.survival._common import CleanCurve
from subtypesurv.survival.design import SurvivalCurve


def round_half_up(x: NDArray) -> NDArray:
    """Round to the nearest integer, halves away from zero for x >= 0."""
    return np.floor(np.asarray(x, dtype=np.float64) + 0.5)


def clean_curve(
    curve: SurvivalCurve,
    n_initial: int,
    approximation: CurveApproximation,
) -> CleanCurve:
    """Normalize a raw curve.

    Parameters
    ----------
    curve : SurvivalCurve
        Validated raw curve.
    n_initial : int
        Initial at-risk count of the group.
    approximation : CurveApproximation
        Greenwood window and critical value.

    Returns
    -------
    CleanCurve
    """
    order = np.argsort(curve.time, kind="stable")
    time = curve.time[order]
    survival = np.minimum.accumulate(np.minimum(curve.survival[order], 1.0))

    n_raw = len(time)
    censored = curve.censored[order] if curve.censored is not None else np.zeros(n_raw)
    events = curve.events[order] if curve.events is not None else np.zeros(n_raw)

    # Collapse duplicate times: keep the last (lowest) survival, sum counts
    unique_time, first_idx = np.unique(time, return_index=True)
    last_idx = np.append(first_idx[1:] - 1, n_raw - 1)
    survival = survival[last_idx]
    censored = np.add.reduceat(censored, first_idx)
    events = np.add.reduceat(events, first_idx)

    lo, hi = approximation.greenwood_bounds
    se = np.zeros_like(survival)
    inside = (survival > lo) & (survival < hi)
    s_in = survival[inside]
    se[inside] = s_in * np.sqrt((1.0 - s_in) / (n_initial * s_in))

    z = approximation.z_critical
    ci_lower = np.maximum(0.0, survival - z * se)
    ci_upper = np.minimum(1.0, survival + z * se)

    return CleanCurve(
        subtype=curve.subtype,
        time=unique_time,
        survival=survival,
        se=se,
        ci_lower=ci_lower,
        ci_upper=ci_upper,
        censored=censored,
        events=events,
        n_initial=int(n_initial),
    )


def median_survival(curve: CleanCurve) -> float | None:
    """Median survival time, linearly interpolated across the 0.5 crossing.

    Returns None when the curve never reaches 0.5.
    """
    below = np.nonzero(curve.survival <= 0.5)[0]
    if len(below) == 0:
        return None

    i = int(below[0])
    if i == 0:
        return float(curve.time[0])

    t0, s0 = curve.time[i - 1], curve.survival[i - 1]
    t1, s1 = curve.time[i], curve.survival[i]
    if s0 <= 0.5:
        return float(t1)
    slope = (s1 - s0) / (t1 - t0)
    if slope == 0:
        return float(t1)
    return float(t0 + (0.5 - s0) / slope)


def event_markers(
    curve: CleanCurve,
    approximation: CurveApproximation,
) -> list[tuple[str, float, float]]:
    """Points where survival drops by more than the event threshold."""
    s = curve.survival
    drops = np.nonzero(s[1:] < s[:-1] - approximation.event_threshold)[0] + 1
    return [(curve.subtype, float(curve.time[i]), float(s[i])) for i in drops]


def censor_markers(
    curve: CleanCurve,
    approximation: CurveApproximation,
) -> list[tuple[str, float, float]]:
    """Points with explicit censoring, plus a still-surviving last point."""
    idx = [int(i) for i in np.nonzero(curve.censored[1:] > 0)[0] + 1]
    last = len(curve.time) - 1
    if curve.survival[last] > approximation.event_threshold and last not in idx:
        idx.append(last)
    return [
        (curve.subtype, float(curve.time[i]), float(curve.survival[i]))
        for i in idx
    ]


def estimated_events(curve: CleanCurve, approximation: CurveApproximation) -> NDArray:
    """Estimated events at each of the curve's own times.

    A drop from the previous point (1.0 before the first) larger than the
    event threshold counts ``max(1, round(drop * event_scale))`` events.
    """
    previous = np.concatenate(([1.0], curve.survival[:-1]))
    drop = previous - curve.survival
    scaled = np.maximum(1.0, round_half_up(drop * approximation.event_scale))
    return np.where(drop > approximation.event_threshold, scaled, 0.0)


def events_on_grid(
    curve: CleanCurve,
    grid: NDArray,
    approximation: CurveApproximation,
) -> NDArray:
    """Estimated events placed on a pooled time grid (0 off the curve)."""
    out = np.zeros(len(grid), dtype=np.float64)
    out[np.searchsorted(grid, curve.time)] = estimated_events(curve, approximation)
    return out


def at_risk_on_grid(curve: CleanCurve, grid: NDArray) -> NDArray:
    """Estimated at-risk count at each grid time.

    ``round(n_initial * S(t-))`` where S(t-) is the survival at the curve's
    last own time strictly before t, or 1.0 if there is none.
    """
    idx = np.searchsorted(curve.time, grid, side="left") - 1
    s_before = np.where(idx >= 0, curve.survival[np.maximum(idx, 0)], 1.0)
    return round_half_up(curve.n_initial * s_before)
