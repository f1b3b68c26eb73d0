"""
Tests for curve preprocessing: cleaning, Greenwood SE, medians, markers
and the event / at-risk reconstruction used by the log-rank engine.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from subtypesurv.survival import (
    DEFAULT_APPROXIMATION,
    SurvivalCurve,
    survival_curves,
)
from subtypesurv.survival._curves import (
    at_risk_on_grid,
    censor_markers,
    clean_curve,
    estimated_events,
    event_markers,
    events_on_grid,
    median_survival,
    round_half_up,
)


def _clean(time, survival, n=100, **kwargs):
    curve = SurvivalCurve.from_points("C1", time, survival, **kwargs)
    return clean_curve(curve, n, DEFAULT_APPROXIMATION)


class TestCleanCurve:

    def test_sorts_and_collapses_duplicates(self):
        c = _clean([10, 0, 5, 5], [0.6, 1.0, 0.9, 0.8], censored=[1, 0, 2, 3])
        assert_allclose(c.time, [0, 5, 10])
        assert_allclose(c.survival, [1.0, 0.8, 0.6])
        assert_allclose(c.censored, [0, 5, 1])
        assert_allclose(c.events, [0, 0, 0])

    def test_running_minimum(self):
        c = _clean([0, 1, 2, 3], [1.0, 0.7, 0.8, 0.75])
        assert_allclose(c.survival, [1.0, 0.7, 0.7, 0.7])
        assert np.all(np.diff(c.survival) <= 0)

    def test_survival_above_one_clamped(self):
        c = _clean([0, 1, 2], [1.0000000000000002, 1.05, 0.8])
        assert_allclose(c.survival, [1.0, 1.0, 0.8])
        assert c.se[0] == 0.0

    def test_first_point_below_one_is_kept(self):
        c = _clean([3, 6], [0.9, 0.8])
        assert_allclose(c.survival, [0.9, 0.8])

    def test_greenwood_se(self):
        c = _clean([0, 12], [1.0, 0.8], n=100)
        # S * sqrt((1 - S) / (n * S)) = 0.8 * sqrt(0.2 / 80)
        assert_allclose(c.se, [0.0, 0.04], atol=1e-12)
        assert_allclose(c.ci_lower, [1.0, 0.8 - 1.96 * 0.04])
        assert_allclose(c.ci_upper, [1.0, 0.8 + 1.96 * 0.04])

    def test_se_zero_outside_window(self):
        c = _clean([0, 1, 2], [0.995, 0.5, 0.005])
        assert c.se[0] == 0.0
        assert c.se[1] > 0.0
        assert c.se[2] == 0.0

    def test_ci_clipped_to_unit_interval(self):
        c = _clean([1, 2], [0.98, 0.02], n=2)
        assert np.all(c.ci_lower >= 0.0)
        assert np.all(c.ci_upper <= 1.0)

    def test_n_initial_carried(self):
        c = _clean([1], [0.5], n=37)
        assert c.n_initial == 37


class TestMedianSurvival:

    def test_interpolated(self):
        c = _clean([0, 10, 20], [1.0, 0.6, 0.4])
        assert_allclose(median_survival(c), 15.0)

    def test_exact_half(self):
        c = _clean([0, 10, 20], [1.0, 0.5, 0.3])
        assert_allclose(median_survival(c), 10.0)

    def test_not_reached(self):
        c = _clean([0, 10, 20], [1.0, 0.9, 0.7])
        assert median_survival(c) is None

    def test_first_point_below_half(self):
        c = _clean([4, 8], [0.4, 0.2])
        assert median_survival(c) == 4.0


class TestMarkers:

    def test_event_markers(self):
        c = _clean([0, 1, 2, 3, 4], [1.0, 0.9995, 0.9, 0.9, 0.5])
        markers = event_markers(c, DEFAULT_APPROXIMATION)
        assert markers == [("C1", 2.0, 0.9), ("C1", 4.0, 0.5)]

    def test_censor_markers_include_surviving_last_point(self):
        c = _clean([0, 1, 2, 3, 4], [1.0, 0.9995, 0.9, 0.9, 0.5],
                   censored=[1, 0, 2, 0, 0])
        markers = censor_markers(c, DEFAULT_APPROXIMATION)
        # Censoring at the first point is not drawn
        assert markers == [("C1", 2.0, 0.9), ("C1", 4.0, 0.5)]

    def test_no_final_marker_when_curve_reaches_zero(self):
        c = _clean([0, 1, 2], [1.0, 0.5, 0.0], censored=[0, 1, 0])
        markers = censor_markers(c, DEFAULT_APPROXIMATION)
        assert markers == [("C1", 1.0, 0.5)]

    def test_last_point_not_duplicated(self):
        c = _clean([0, 1], [1.0, 0.5], censored=[0, 3])
        markers = censor_markers(c, DEFAULT_APPROXIMATION)
        assert markers == [("C1", 1.0, 0.5)]


class TestEventReconstruction:

    def test_round_half_up(self):
        assert_array_equal(round_half_up([0.5, 1.5, 2.5, 2.4, 0.0]), [1, 2, 3, 2, 0])

    def test_estimated_events(self):
        c = _clean([0, 1, 2, 3], [1.0, 0.9, 0.875, 0.8745])
        # drops 0.1 -> 10, 0.025 -> 3, 0.0005 below threshold
        assert_allclose(estimated_events(c, DEFAULT_APPROXIMATION), [0, 10, 3, 0])

    def test_small_drop_counts_one_event(self):
        c = _clean([1], [0.997])
        assert_allclose(estimated_events(c, DEFAULT_APPROXIMATION), [1])

    def test_first_point_drops_from_one(self):
        c = _clean([6], [0.8])
        assert_allclose(estimated_events(c, DEFAULT_APPROXIMATION), [20])

    def test_events_on_grid(self):
        c = _clean([0, 5, 10], [1.0, 0.8, 0.6])
        grid = np.array([0, 3, 5, 7, 10, 12], dtype=np.float64)
        assert_allclose(events_on_grid(c, grid, DEFAULT_APPROXIMATION), [0, 0, 20, 0, 20, 0])

    def test_at_risk_uses_survival_strictly_before(self):
        c = _clean([0, 5, 10], [1.0, 0.8, 0.6], n=50)
        grid = np.array([0, 3, 5, 7, 10, 12], dtype=np.float64)
        assert_allclose(at_risk_on_grid(c, grid), [50, 50, 50, 40, 40, 30])


class TestSurvivalCurves:

    def test_solution(self):
        curves = [
            SurvivalCurve.from_points("C1", [0, 10, 20], [1.0, 0.6, 0.4],
                                      censored=[0, 2, 0]),
            SurvivalCurve.from_points("C2", [0, 10, 20], [1.0, 0.9, 0.8]),
        ]
        sol = survival_curves(curves, {"C1": 60})

        assert sol.subtypes == ("C1", "C2")
        assert_allclose(sol.median_survival["C1"], 15.0)
        assert sol.median_survival["C2"] is None
        assert sol.curve("C1").n_initial == 60
        assert sol.curve("C2").n_initial == 100
        assert ("C1", 10.0, 0.6) in sol.event_markers
        assert ("C1", 10.0, 0.6) in sol.censor_markers
        assert ("C2", 20.0, 0.8) in sol.censor_markers
        assert sol.backend_name == "cpu_curves"

    def test_default_group_size_warning(self):
        sol = survival_curves([{"subtype": "C1", "points": [(0, 1.0), (5, 0.5)]}])
        assert len(sol.warnings) == 1
        assert "C1" in sol.warnings[0]
        assert "100" in sol.warnings[0]

    def test_unknown_subtype(self):
        sol = survival_curves([{"subtype": "C1", "points": [(0, 1.0)]}])
        with pytest.raises(KeyError):
            sol.curve("C9")

    def test_empty_input(self):
        sol = survival_curves([])
        assert sol.curves == ()
        assert sol.median_survival == {}

    def test_summary(self):
        sol = survival_curves([{"subtype": "C1", "points": [(0, 1.0), (5, 0.5)]}])
        text = sol.summary()
        assert "Call: survival_curves()" in text
        assert "C1" in text
        assert "Warning:" in text
        assert repr(sol) == "CurveSolution(subtypes=['C1'])"

    def test_timing_sections(self):
        sol = survival_curves([{"subtype": "C1", "points": [(0, 1.0)]}])
        assert "total_seconds" in sol.timing
        assert "preprocess" in sol.timing
