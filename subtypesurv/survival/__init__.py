"""
Survival comparison of molecular subtypes from Kaplan-Meier curves.

Public API:
    survival_curves(curves, counts) -> CurveSolution
    logrank_test(curves, counts) -> LogRankSolution | None
    estimate_coxph(curves, counts) -> CoxPHSolution | None
    format_pvalue(p), format_hr(hr, lower, upper)
"""

from subtypesurv.survival.solvers import estimate_coxph, logrank_test, survival_curves
from subtypesurv.survival.design import CurveDesign, SurvivalCurve
from subtypesurv.survival.solution import CoxPHSolution, CurveSolution, LogRankSolution
from subtypesurv.survival._approximation import DEFAULT_APPROXIMATION, CurveApproximation
from subtypesurv.survival._common import (
    CleanCurve,
    CoxPHParams,
    HazardRatioGroup,
    LogRankParams,
    WaldTest,
)
from subtypesurv.survival._format import format_hr, format_pvalue

__all__ = [
    "survival_curves",
    "logrank_test",
    "estimate_coxph",
    "format_pvalue",
    "format_hr",
    "SurvivalCurve",
    "CurveDesign",
    "CurveApproximation",
    "DEFAULT_APPROXIMATION",
    "CurveSolution",
    "LogRankSolution",
    "CoxPHSolution",
    "CleanCurve",
    "LogRankParams",
    "CoxPHParams",
    "HazardRatioGroup",
    "WaldTest",
]
