"""
Solution wrappers for curve-based survival results.

Each Solution wraps a Result[Params] and exposes user-friendly properties
with R-style summary() methods. All tests here are approximations built
from aggregated curves; summaries say so.
"""

from __future__ import annotations

from subtypesurv.core.result import Result
from subtypesurv.survival._common import (
    CleanCurve,
    CoxPHParams,
    CurveParams,
    HazardRatioGroup,
    LogRankParams,
    WaldTest,
)
from subtypesurv.survival._format import format_hr, format_pvalue


def _significance_stars(p: float) -> str:
    """Return significance stars like R."""
    if p < 0.001:
        return '***'
    elif p < 0.01:
        return '**'
    elif p < 0.05:
        return '*'
    elif p < 0.1:
        return '.'
    else:
        return ' '


class CurveSolution:
    """Cleaned subtype curves with descriptive summaries."""

    __slots__ = ('_result',)

    def __init__(self, _result: Result[CurveParams]) -> None:
        self._result = _result

    @property
    def curves(self) -> tuple[CleanCurve, ...]:
        """Cleaned curves in supplied order."""
        return self._result.params.curves

    @property
    def subtypes(self) -> tuple[str, ...]:
        return tuple(c.subtype for c in self.curves)

    @property
    def median_survival(self) -> dict[str, float | None]:
        """Median survival per subtype (None if not reached)."""
        return dict(zip(self.subtypes, self._result.params.median_survival))

    @property
    def event_markers(self) -> tuple[tuple[str, float, float], ...]:
        """(subtype, time, survival) where the curve drops."""
        return self._result.params.event_markers

    @property
    def censor_markers(self) -> tuple[tuple[str, float, float], ...]:
        """(subtype, time, survival) of censoring ticks."""
        return self._result.params.censor_markers

    def curve(self, subtype: str) -> CleanCurve:
        """Cleaned curve of one subtype."""
        for c in self.curves:
            if c.subtype == subtype:
                return c
        raise KeyError(subtype)

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def info(self) -> dict:
        return self._result.info

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    def summary(self) -> str:
        """Per-subtype table of group size, points and median survival."""
        lines = []
        lines.append("Call: survival_curves()")
        lines.append("")
        lines.append(
            f"  {'subtype':>12s}  {'n':>6s}  {'points':>6s}  "
            f"{'events':>6s}  {'final S':>8s}  {'median':>8s}"
        )
        medians = self._result.params.median_survival
        n_events = {}
        for subtype, _, _ in self.event_markers:
            n_events[subtype] = n_events.get(subtype, 0) + 1
        for c, median in zip(self.curves, medians):
            median_str = f"{median:.4g}" if median is not None else "NR"
            lines.append(
                f"  {c.subtype:>12s}  {c.n_initial:6d}  {len(c.time):6d}  "
                f"{n_events.get(c.subtype, 0):6d}  "
                f"{c.survival[-1]:8.4f}  {median_str:>8s}"
            )
        for w in self.warnings:
            lines.append(f"  Warning: {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"CurveSolution(subtypes={list(self.subtypes)})"


class LogRankSolution:
    """Log-rank test solution.

    Properties mirror R's survdiff() output, with observed and expected
    events estimated from curve shape.
    """

    __slots__ = ('_result',)

    def __init__(self, _result: Result[LogRankParams]) -> None:
        self._result = _result

    @property
    def chi_square(self) -> float:
        return self._result.params.chi_square

    @property
    def degrees_of_freedom(self) -> int:
        return self._result.params.degrees_of_freedom

    @property
    def df(self) -> int:
        return self._result.params.degrees_of_freedom

    @property
    def p_value(self) -> float:
        return self._result.params.p_value

    @property
    def n_groups(self) -> int:
        return self._result.params.n_groups

    @property
    def group_labels(self) -> tuple[str, ...]:
        return self._result.params.group_labels

    @property
    def observed(self):
        """Estimated events per group."""
        return self._result.params.observed

    @property
    def expected(self):
        """Expected events per group under equal survival."""
        return self._result.params.expected

    @property
    def n_initial(self):
        return self._result.params.n_initial

    @property
    def n_times(self) -> int:
        return self._result.params.n_times

    @property
    def p_value_method(self) -> str:
        return self._result.params.p_value_method

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def info(self) -> dict:
        return self._result.info

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    def summary(self) -> str:
        """R-style summary of the log-rank test."""
        lines = []
        lines.append("Call: logrank_test()")
        lines.append("  (approximate: events estimated from survival curves)")
        lines.append("")

        lines.append(f"  {'':>12s}  {'N':>6s}  {'Observed':>10s}  {'Expected':>10s}  {'(O-E)^2/E':>10s}")
        for i in range(self.n_groups):
            oe = ((self.observed[i] - self.expected[i]) ** 2
                  / self.expected[i]) if self.expected[i] > 0 else 0
            label = str(self.group_labels[i])
            lines.append(
                f"  {label:>12s}  {self.n_initial[i]:6.0f}  "
                f"{self.observed[i]:10.1f}  {self.expected[i]:10.1f}  "
                f"{oe:10.3f}"
            )

        lines.append("")
        lines.append(
            f"  Chisq= {self.chi_square:.4f} on {self.df} degrees of freedom, "
            f"{format_pvalue(self.p_value)}"
        )
        for w in self.warnings:
            lines.append(f"  Warning: {w}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LogRankSolution(chisq={self.chi_square:.4f}, "
            f"df={self.df}, p={self.p_value:.4g})"
        )


class CoxPHSolution:
    """Hazard ratios against the reference subtype.

    Properties mirror R's coxph() output for a single categorical
    covariate, estimated from curve shape.
    """

    __slots__ = ('_result',)

    def __init__(self, _result: Result[CoxPHParams]) -> None:
        self._result = _result

    @property
    def reference_group(self) -> str:
        return self._result.params.reference_group

    @property
    def groups(self) -> tuple[HazardRatioGroup, ...]:
        return self._result.params.groups

    @property
    def wald_test(self) -> WaldTest:
        return self._result.params.wald_test

    @property
    def dropped_groups(self) -> tuple[str, ...]:
        return self._result.params.dropped_groups

    @property
    def hazard_ratios(self) -> dict[str, float]:
        return {g.subtype: g.hazard_ratio for g in self.groups}

    @property
    def p_values(self) -> dict[str, float]:
        return {g.subtype: g.p_value for g in self.groups}

    def group(self, subtype: str) -> HazardRatioGroup:
        """Hazard-ratio entry of one comparison subtype."""
        for g in self.groups:
            if g.subtype == subtype:
                return g
        raise KeyError(subtype)

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def info(self) -> dict:
        return self._result.info

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    def summary(self) -> str:
        """R-style summary of the hazard-ratio estimates."""
        lines = []
        lines.append("Call: estimate_coxph()")
        lines.append("  (approximate: hazard ratios estimated from survival curves)")
        lines.append("")
        lines.append(f"  Reference: {self.reference_group}")
        lines.append("")

        lines.append(
            f"  {'':>12s}  {'coef':>10s}  {'exp(coef)':>10s}  "
            f"{'se(coef)':>10s}  {'z':>10s}  {'Pr(>|z|)':>12s}"
        )
        for g in self.groups:
            lines.append(
                f"  {g.subtype:>12s}  {g.coefficient:10.6f}  "
                f"{g.hazard_ratio:10.6f}  {g.se:10.6f}  "
                f"{g.coefficient / g.se:10.4f}  {g.p_value:12.4g} "
                f"{_significance_stars(g.p_value)}"
            )

        lines.append("")
        for g in self.groups:
            lines.append(
                f"  {g.subtype:>12s}  HR = {format_hr(g.hazard_ratio, g.lower_ci, g.upper_ci)}"
            )

        wt = self.wald_test
        lines.append("")
        lines.append(
            f"  Wald test= {wt.chi_square:.4f} on {wt.df} df, "
            f"{format_pvalue(wt.p_value)}"
        )
        for w in self.warnings:
            lines.append(f"  Warning: {w}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"CoxPHSolution(reference={self.reference_group!r}, "
            f"groups={len(self.groups)}, "
            f"wald_p={self.wald_test.p_value:.4g})"
        )
