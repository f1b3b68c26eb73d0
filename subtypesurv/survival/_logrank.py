"""
Log-rank test for comparing subtype survival curves.

Mantel-Haenszel log-rank statistic computed from aggregated Kaplan-Meier
curves rather than subject-level data:

Algorithm:
    1. Pool the distinct times of all cleaned curves into one grid
    2. At each grid time t_j, per group k:
       - d_kj = estimated events (survival drop * event_scale)
       - n_kj = round(n_k * S_k(t_j-)), estimated number at risk
       - N_j, D_j = totals over groups
       - E_kj = n_kj * D_j / N_j
       - V_kj = n_kj (N_j - n_kj) D_j (N_j - D_j) / (N_j^2 (N_j - 1))
    3. Sum (O - E) and V over every group except the last (the group
       deviations sum to zero) and over every time with D_j > 0
    4. chi-squared = (sum O - E)^2 / sum V on n_groups - 1 df

For df = 1 the p-value is 2 * (1 - Phi(sqrt(chi2))). For df > 1 it is the
simplified upper-tail series ("series", default) or the regularized
incomplete gamma function ("gamma").

References:
    Mantel, N. (1966). Evaluation of survival data and two new rank order
        statistics arising in its consideration. Cancer Chemother Rep,
        50(3), 163-170.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from subtypesurv.core.compute.special import (
    chi_square_cdf,
    chi_square_sf_series,
    normal_cdf,
)
from subtypesurv.survival._approximation import CurveApproximation
from subtypesurv.survival._common import CleanCurve, LogRankParams
from subtypesurv.survival._curves import at_risk_on_grid, events_on_grid


P_VALUE_METHODS = ("series", "gamma")


def logrank_p_value(chi_square: float, df: int, method: str = "series") -> float:
    """Upper-tail p-value of a log-rank statistic.

    Parameters
    ----------
    chi_square : float
        Test statistic.
    df : int
        Degrees of freedom.
    method : str
        Path for df > 1: "series" or "gamma".

    Returns
    -------
    float
        p-value in [0, 1].
    """
    if df == 1:
        p = 2.0 * (1.0 - normal_cdf(math.sqrt(max(chi_square, 0.0))))
    elif method == "gamma":
        p = 1.0 - chi_square_cdf(chi_square, df)
    else:
        p = chi_square_sf_series(chi_square, df)
    return max(0.0, min(1.0, p))


def logrank_from_curves(
    curves: Sequence[CleanCurve],
    approximation: CurveApproximation,
    p_value_method: str = "series",
) -> LogRankParams | None:
    """Compute the log-rank test over cleaned curves.

    Parameters
    ----------
    curves : sequence of CleanCurve
        At least two cleaned curves.
    approximation : CurveApproximation
        Event reconstruction constants.
    p_value_method : str
        "series" or "gamma" (only affects df > 1).

    Returns
    -------
    LogRankParams or None
        None if there are fewer than two curves, the pooled grid is empty,
        or the variance is zero.
    """
    n_groups = len(curves)
    if n_groups < 2:
        return None

    grid = np.unique(np.concatenate([c.time for c in curves]))
    if len(grid) == 0:
        return None

    # (m, n_groups): estimated events and at-risk per grid time
    d = np.column_stack([events_on_grid(c, grid, approximation) for c in curves])
    n = np.column_stack([at_risk_on_grid(c, grid) for c in curves])

    D = d.sum(axis=1)
    N = n.sum(axis=1)
    valid = (N > 0) & (D > 0)
    d, n, D, N = d[valid], n[valid], D[valid], N[valid]

    expected = n * (D / N)[:, None]

    variance = np.zeros_like(n)
    multi = N > 1
    if np.any(multi):
        Nm = N[multi][:, None]
        Dm = D[multi][:, None]
        nm = n[multi]
        variance[multi] = nm * (Nm - nm) * Dm * (Nm - Dm) / (Nm ** 2 * (Nm - 1))

    # The last group is linearly dependent on the others
    numerator = float(np.sum(d[:, :-1] - expected[:, :-1]))
    denominator = float(np.sum(variance[:, :-1]))

    if denominator <= 0:
        return None

    chi_square = numerator ** 2 / denominator
    df = n_groups - 1
    p_value = logrank_p_value(chi_square, df, p_value_method)

    return LogRankParams(
        chi_square=chi_square,
        degrees_of_freedom=df,
        p_value=p_value,
        n_groups=n_groups,
        group_labels=tuple(c.subtype for c in curves),
        observed=d.sum(axis=0),
        expected=expected.sum(axis=0),
        n_initial=np.array([c.n_initial for c in curves], dtype=np.float64),
        n_times=len(grid),
        p_value_method=p_value_method,
    )
