"""
Public API for curve-based survival analysis.

    survival_curves(curves, counts) → CurveSolution
    logrank_test(curves, counts) → LogRankSolution | None
    estimate_coxph(curves, counts) → CoxPHSolution | None

Each function validates inputs, creates a CurveDesign, preprocesses every
curve the same way, runs the engine and wraps the Result in a Solution.
The tests return None when the analysis is not applicable (fewer than two
groups, no usable time points, zero variance).
"""

from __future__ import annotations

import warnings
from collections.abc import Mapping
from typing import Literal

from subtypesurv.core.compute.timing import Timer
from subtypesurv.core.exceptions import ValidationError
from subtypesurv.core.result import Result
from subtypesurv.survival._approximation import DEFAULT_APPROXIMATION, CurveApproximation
from subtypesurv.survival._common import CleanCurve, CurveParams
from subtypesurv.survival._cox import cox_from_curves
from subtypesurv.survival._curves import (
    censor_markers,
    clean_curve,
    event_markers,
    median_survival,
)
from subtypesurv.survival._logrank import P_VALUE_METHODS, logrank_from_curves
from subtypesurv.survival.design import CurveDesign
from subtypesurv.survival.solution import CoxPHSolution, CurveSolution, LogRankSolution


def _preprocess(design: CurveDesign) -> list[CleanCurve]:
    return [
        clean_curve(curve, n, design.approximation)
        for curve, n in zip(design.curves, design.group_sizes)
    ]


def _design_warnings(design: CurveDesign) -> list[str]:
    notes = []
    if design.defaulted:
        notes.append(
            f"no usable count for {', '.join(design.defaulted)}; "
            f"using default group size {design.approximation.default_group_size}"
        )
    if design.clamped_subtypes:
        notes.append(
            f"survival above 1 clamped to 1 for {', '.join(design.clamped_subtypes)}"
        )
    if design.duplicated_subtypes:
        notes.append(
            f"duplicate subtype identifiers: {', '.join(design.duplicated_subtypes)}"
        )
    return notes


def survival_curves(
    curves,
    counts: Mapping[str, int] | None = None,
    *,
    approximation: CurveApproximation = DEFAULT_APPROXIMATION,
) -> CurveSolution:
    """Clean subtype curves and summarize them.

    Parameters
    ----------
    curves : sequence of SurvivalCurve or record mappings
        One curve per subtype.
    counts : mapping or None
        Subtype -> initial at-risk count.
    approximation : CurveApproximation
        Heuristic constants.

    Returns
    -------
    CurveSolution
    """
    design = CurveDesign.for_curves(curves, counts, approximation=approximation)

    timer = Timer()
    timer.start()

    with timer.section('preprocess'):
        cleaned = _preprocess(design)

    events = []
    censors = []
    for c in cleaned:
        events.extend(event_markers(c, approximation))
        censors.extend(censor_markers(c, approximation))

    params = CurveParams(
        curves=tuple(cleaned),
        median_survival=tuple(median_survival(c) for c in cleaned),
        event_markers=tuple(events),
        censor_markers=tuple(censors),
    )

    timer.stop()

    result = Result(
        params=params,
        info={"method": "Kaplan-Meier curve preprocessing",
              "approximation": approximation.as_info()},
        timing=timer.result(),
        backend_name="cpu_curves",
        warnings=tuple(_design_warnings(design)),
    )

    return CurveSolution(_result=result)


def logrank_test(
    curves,
    counts: Mapping[str, int] | None = None,
    *,
    p_value_method: Literal["series", "gamma"] = "series",
    approximation: CurveApproximation = DEFAULT_APPROXIMATION,
) -> LogRankSolution | None:
    """Log-rank test for equal survival across subtypes.

    Events and numbers at risk are estimated from the curves, so this is
    an approximate log-rank test.

    Parameters
    ----------
    curves : sequence of SurvivalCurve or record mappings
        One curve per subtype; at least two for a result.
    counts : mapping or None
        Subtype -> initial at-risk count.
    p_value_method : str
        p-value path for more than two groups: "series" (default, the
        simplified upper-tail series) or "gamma" (regularized incomplete
        gamma function).
    approximation : CurveApproximation
        Heuristic constants.

    Returns
    -------
    LogRankSolution or None
        None if fewer than two curves are given or the test statistic
        is undefined (no estimated events, zero variance).
    """
    if p_value_method not in P_VALUE_METHODS:
        raise ValidationError(
            f"p_value_method must be 'series' or 'gamma', got '{p_value_method}'",
            field="p_value_method",
        )

    design = CurveDesign.for_curves(curves, counts, approximation=approximation)
    if design.n_groups < 2:
        return None

    timer = Timer()
    timer.start()

    with timer.section('preprocess'):
        cleaned = _preprocess(design)

    with timer.section('statistic'):
        params = logrank_from_curves(cleaned, approximation, p_value_method)

    timer.stop()

    if params is None:
        warnings.warn(
            "Log-rank test not applicable: the survival curves imply no "
            "estimated events with non-zero variance.",
            RuntimeWarning,
            stacklevel=2,
        )
        return None

    result = Result(
        params=params,
        info={
            "method": "Log-rank test (curve approximation)",
            "p_value_method": p_value_method,
            "approximation": approximation.as_info(),
        },
        timing=timer.result(),
        backend_name="cpu_logrank_curves",
        warnings=tuple(_design_warnings(design)),
    )

    return LogRankSolution(_result=result)


def estimate_coxph(
    curves,
    counts: Mapping[str, int] | None = None,
    *,
    approximation: CurveApproximation = DEFAULT_APPROXIMATION,
) -> CoxPHSolution | None:
    """Hazard ratios of each subtype against the first one.

    Approximates a Cox PH fit with one categorical covariate from curve
    shape: log S_cmp(t) / log S_ref(t) at shared times.

    Parameters
    ----------
    curves : sequence of SurvivalCurve or record mappings
        One curve per subtype; the first is the reference group.
    counts : mapping or None
        Subtype -> initial at-risk count.
    approximation : CurveApproximation
        Heuristic constants.

    Returns
    -------
    CoxPHSolution or None
        None if fewer than two curves are given or no comparison group
        has a usable shared time point.
    """
    design = CurveDesign.for_curves(curves, counts, approximation=approximation)
    if design.n_groups < 2:
        return None

    timer = Timer()
    timer.start()

    with timer.section('preprocess'):
        cleaned = _preprocess(design)

    with timer.section('hazard_ratios'):
        params = cox_from_curves(cleaned, approximation)

    timer.stop()

    if params is None:
        warnings.warn(
            "Hazard-ratio estimation not applicable: no comparison group "
            "shares a usable time point with the reference group.",
            RuntimeWarning,
            stacklevel=2,
        )
        return None

    warnings_list = _design_warnings(design)
    if params.dropped_groups:
        warnings_list.append(
            f"dropped {', '.join(params.dropped_groups)}: "
            f"no comparable time points with {params.reference_group}"
        )

    result = Result(
        params=params,
        info={
            "method": "Cox PH (curve approximation)",
            "reference_group": params.reference_group,
            "approximation": approximation.as_info(),
        },
        timing=timer.result(),
        backend_name="cpu_coxph_curves",
        warnings=tuple(warnings_list),
    )

    return CoxPHSolution(_result=result)
