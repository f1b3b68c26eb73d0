"""
Hazard ratios from survival-curve shape (Cox PH approximation).

Under proportional hazards the cumulative hazards of two groups differ by
a constant factor, so log S_cmp(t) = HR * log S_ref(t) at every t. Each
time shared by a comparison curve and the reference curve therefore gives
one sample of the hazard ratio:

    hr(t) = log S_cmp(t) / log S_ref(t)

Samples are taken only where both survivals lie inside the HR survival
window and only if 0 < hr < hr_max. Per comparison group:

    coefficient = mean(log hr(t))                  (geometric-mean HR)
    se          = max(sd(log hr(t)), f * sqrt(1/n_ref + 1/n_cmp))
    CI          = exp(coefficient +/- z * se)
    p           = 2 * (1 - Phi(|coefficient / se|))

The aggregate Wald test sums (coefficient / se)^2 over the retained groups
on len(groups) degrees of freedom.

This is not a partial-likelihood fit; it only approximates the coxph
estimate when the curves follow proportional hazards.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from subtypesurv.core.compute.special import chi_square_cdf, normal_cdf
from subtypesurv.survival._approximation import CurveApproximation
from subtypesurv.survival._common import CleanCurve, CoxPHParams, HazardRatioGroup, WaldTest


def hazard_ratio_samples(
    reference: CleanCurve,
    comparison: CleanCurve,
    approximation: CurveApproximation,
):
    """Per-time hazard-ratio samples of comparison vs reference.

    Returns
    -------
    NDArray
        Valid samples, in time order. May be empty.
    """
    shared = np.intersect1d(reference.time, comparison.time)
    shared = shared[shared > 0]

    s_ref = reference.survival[np.searchsorted(reference.time, shared)]
    s_cmp = comparison.survival[np.searchsorted(comparison.time, shared)]

    lo, hi = approximation.hr_survival_bounds
    usable = (s_ref > lo) & (s_ref < hi) & (s_cmp > lo) & (s_cmp < hi)
    hr = np.log(s_cmp[usable]) / np.log(s_ref[usable])

    return hr[(hr > 0) & (hr < approximation.hr_max)]


def hazard_ratio_group(
    reference: CleanCurve,
    comparison: CleanCurve,
    approximation: CurveApproximation,
) -> HazardRatioGroup | None:
    """Hazard ratio of one comparison curve against the reference.

    Returns None if no shared time gives a valid sample.
    """
    hr = hazard_ratio_samples(reference, comparison, approximation)
    if len(hr) == 0:
        return None

    log_hr = np.log(hr)
    coefficient = float(np.mean(log_hr))
    empirical_sd = float(np.std(log_hr, ddof=1)) if len(log_hr) > 1 else 0.0
    floor = approximation.se_floor_factor * math.sqrt(
        1.0 / reference.n_initial + 1.0 / comparison.n_initial
    )
    se = max(empirical_sd, floor)

    z = approximation.z_critical
    p_value = 2.0 * (1.0 - normal_cdf(abs(coefficient / se)))

    return HazardRatioGroup(
        subtype=comparison.subtype,
        hazard_ratio=math.exp(coefficient),
        lower_ci=math.exp(coefficient - z * se),
        upper_ci=math.exp(coefficient + z * se),
        p_value=max(0.0, min(1.0, p_value)),
        coefficient=coefficient,
        se=se,
        n_time_points=len(hr),
    )


def wald_test(groups: Sequence[HazardRatioGroup]) -> WaldTest:
    """Aggregate Wald test over the retained groups."""
    chi_square = float(sum((g.coefficient / g.se) ** 2 for g in groups))
    df = len(groups)
    p_value = 1.0 - chi_square_cdf(chi_square, df)
    return WaldTest(
        chi_square=chi_square,
        df=df,
        p_value=max(0.0, min(1.0, p_value)),
    )


def cox_from_curves(
    curves: Sequence[CleanCurve],
    approximation: CurveApproximation,
) -> CoxPHParams | None:
    """Hazard ratios of every curve against the first one.

    Parameters
    ----------
    curves : sequence of CleanCurve
        Cleaned curves; the first is the reference group.
    approximation : CurveApproximation
        Sample windows, SE floor and critical value.

    Returns
    -------
    CoxPHParams or None
        None if there are fewer than two curves or every comparison group
        was dropped.
    """
    if len(curves) < 2:
        return None

    reference = curves[0]
    groups = []
    dropped = []
    for comparison in curves[1:]:
        group = hazard_ratio_group(reference, comparison, approximation)
        if group is None:
            dropped.append(comparison.subtype)
        else:
            groups.append(group)

    if not groups:
        return None

    return CoxPHParams(
        reference_group=reference.subtype,
        groups=tuple(groups),
        wald_test=wald_test(groups),
        z_critical=approximation.z_critical,
        dropped_groups=tuple(dropped),
    )
