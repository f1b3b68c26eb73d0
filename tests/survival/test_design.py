"""
Tests for SurvivalCurve / CurveDesign construction and validation.
"""

import dataclasses

import numpy as np
import pytest
from numpy.testing import assert_allclose

from subtypesurv.core.exceptions import DimensionError, ValidationError
from subtypesurv.survival import (
    DEFAULT_APPROXIMATION,
    CurveApproximation,
    CurveDesign,
    SurvivalCurve,
)


# Upstream JSON record shape
RECORD_C1 = {
    "subtype": "C1",
    "timePoints": [
        {"time": 0, "survival": 1.0},
        {"time": 12, "survival": 0.8, "events": 4},
        {"time": 24, "survival": 0.6, "censored": 2, "events": 3},
    ],
}


class TestFromPoints:

    def test_basic(self):
        curve = SurvivalCurve.from_points("C1", [0, 6, 12], [1.0, 0.9, 0.7])
        assert curve.subtype == "C1"
        assert curve.n_points == 3
        assert curve.time.dtype == np.float64
        assert curve.censored is None
        assert curve.events is None

    def test_optional_counts(self):
        curve = SurvivalCurve.from_points(
            "C1", [6, 12], [0.9, 0.7], censored=[0, 2], events=[3, 5],
        )
        assert_allclose(curve.censored, [0, 2])
        assert_allclose(curve.events, [3, 5])

    def test_unsorted_input_is_kept_as_given(self):
        curve = SurvivalCurve.from_points("C1", [12, 6], [0.7, 0.9])
        assert_allclose(curve.time, [12, 6])

    @pytest.mark.parametrize("subtype", ["", None, 3])
    def test_bad_subtype(self, subtype):
        with pytest.raises(ValidationError, match="subtype"):
            SurvivalCurve.from_points(subtype, [1], [0.5])

    def test_empty(self):
        with pytest.raises(ValidationError, match="at least one point"):
            SurvivalCurve.from_points("C1", [], [])

    def test_length_mismatch(self):
        with pytest.raises(DimensionError):
            SurvivalCurve.from_points("C1", [1, 2, 3], [0.9, 0.8])

    def test_negative_time(self):
        with pytest.raises(ValidationError, match="non-negative"):
            SurvivalCurve.from_points("C1", [-1, 2], [0.9, 0.8])

    def test_survival_above_one_is_accepted(self):
        curve = SurvivalCurve.from_points("C1", [0, 2], [1.0000000000000002, 0.8])
        assert curve.survival[0] > 1.0

    def test_negative_survival(self):
        with pytest.raises(ValidationError, match="non-negative"):
            SurvivalCurve.from_points("C1", [1, 2], [0.9, -0.1])

    def test_non_finite(self):
        with pytest.raises(ValidationError, match="non-finite"):
            SurvivalCurve.from_points("C1", [1, 2], [np.nan, 0.8])

    def test_fractional_censored(self):
        with pytest.raises(ValidationError, match="whole numbers"):
            SurvivalCurve.from_points("C1", [1, 2], [0.9, 0.8], censored=[0.5, 1])

    def test_censored_length_mismatch(self):
        with pytest.raises(DimensionError):
            SurvivalCurve.from_points("C1", [1, 2], [0.9, 0.8], events=[1])


class TestFromRecord:

    def test_time_points_record(self):
        curve = SurvivalCurve.from_record(RECORD_C1)
        assert curve.subtype == "C1"
        assert_allclose(curve.time, [0, 12, 24])
        assert_allclose(curve.survival, [1.0, 0.8, 0.6])
        # Missing per-point counts become 0 once any point supplies them
        assert_allclose(curve.censored, [0, 0, 2])
        assert_allclose(curve.events, [0, 4, 3])

    def test_points_as_pairs(self):
        curve = SurvivalCurve.from_record({"subtype": "C2", "points": [(0, 1.0), (5, 0.5)]})
        assert_allclose(curve.time, [0, 5])
        assert_allclose(curve.survival, [1.0, 0.5])
        assert curve.censored is None

    def test_missing_subtype(self):
        with pytest.raises(ValidationError, match="subtype"):
            SurvivalCurve.from_record({"timePoints": []})

    def test_missing_points(self):
        with pytest.raises(ValidationError, match="timePoints"):
            SurvivalCurve.from_record({"subtype": "C1"})

    @pytest.mark.parametrize("points", [5, 2.5, True])
    def test_points_not_iterable(self, points):
        with pytest.raises(ValidationError, match="sequence of points") as exc_info:
            SurvivalCurve.from_record({"subtype": "C1", "timePoints": points})
        assert exc_info.value.field == "timePoints"

    def test_point_missing_survival(self):
        with pytest.raises(ValidationError, match="survival"):
            SurvivalCurve.from_record({"subtype": "C1", "timePoints": [{"time": 1}]})

    def test_bad_point(self):
        with pytest.raises(ValidationError, match="point 0"):
            SurvivalCurve.from_record({"subtype": "C1", "timePoints": [3.0]})

    def test_not_a_mapping(self):
        with pytest.raises(ValidationError):
            SurvivalCurve.from_record([("C1", [])])


class TestCurveDesign:

    def test_default_group_sizes(self):
        design = CurveDesign.for_curves([RECORD_C1, {"subtype": "C2", "points": [(1, 0.5)]}])
        assert design.n_groups == 2
        assert design.subtypes == ("C1", "C2")
        assert design.group_sizes == (100, 100)
        assert design.defaulted == ("C1", "C2")

    def test_counts_applied(self):
        design = CurveDesign.for_curves(
            [RECORD_C1, {"subtype": "C2", "points": [(1, 0.5)]}],
            {"C1": 80, "C3": 12},
        )
        assert design.group_sizes == (80, 100)
        assert design.defaulted == ("C2",)

    def test_custom_default(self):
        approx = dataclasses.replace(DEFAULT_APPROXIMATION, default_group_size=40)
        design = CurveDesign.for_curves([RECORD_C1], approximation=approx)
        assert design.group_sizes == (40,)

    @pytest.mark.parametrize("count", [-5, 2.5, "many", "0"])
    def test_invalid_count(self, count):
        with pytest.raises(ValidationError, match="counts"):
            CurveDesign.for_curves([RECORD_C1], {"C1": count})

    @pytest.mark.parametrize("count", [0, 0.0, np.int64(0)])
    def test_zero_count_uses_default(self, count):
        design = CurveDesign.for_curves([RECORD_C1], {"C1": count})
        assert design.group_sizes == (100,)
        assert design.defaulted == ("C1",)

    def test_clamped_subtypes(self):
        record = {"subtype": "C2", "points": [(0, 1.0000000000000002), (5, 0.5)]}
        design = CurveDesign.for_curves([RECORD_C1, record])
        assert design.clamped_subtypes == ("C2",)

    def test_counts_must_be_mapping(self):
        with pytest.raises(ValidationError, match="mapping"):
            CurveDesign.for_curves([RECORD_C1], [100])

    def test_none_curves(self):
        design = CurveDesign.for_curves(None)
        assert design.n_groups == 0

    def test_rejects_other_types(self):
        with pytest.raises(ValidationError, match="SurvivalCurve"):
            CurveDesign.for_curves([("C1", [1], [0.5])])

    def test_duplicated_subtypes(self):
        design = CurveDesign.for_curves([RECORD_C1, RECORD_C1])
        assert design.duplicated_subtypes == ("C1",)
        assert design.defaulted == ("C1",)

    def test_rejects_bad_approximation(self):
        with pytest.raises(ValidationError, match="approximation"):
            CurveDesign.for_curves([RECORD_C1], approximation={"default_group_size": 10})


class TestCurveApproximation:

    def test_defaults(self):
        assert DEFAULT_APPROXIMATION.default_group_size == 100
        assert DEFAULT_APPROXIMATION.event_threshold == 0.001
        assert DEFAULT_APPROXIMATION.event_scale == 100.0
        assert DEFAULT_APPROXIMATION.greenwood_bounds == (0.01, 0.99)
        assert DEFAULT_APPROXIMATION.hr_survival_bounds == (0.05, 0.99)
        assert DEFAULT_APPROXIMATION.hr_max == 100.0
        assert DEFAULT_APPROXIMATION.se_floor_factor == 0.5
        assert DEFAULT_APPROXIMATION.z_critical == 1.96

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_APPROXIMATION.default_group_size = 50

    @pytest.mark.parametrize("kwargs", [
        {"default_group_size": 0},
        {"default_group_size": 10.5},
        {"event_scale": 0},
        {"z_critical": -1.96},
        {"greenwood_bounds": (0.5, 0.2)},
        {"hr_survival_bounds": (-0.1, 0.9)},
    ])
    def test_invalid_settings(self, kwargs):
        with pytest.raises(ValidationError):
            CurveApproximation(**kwargs)

    def test_as_info(self):
        info = DEFAULT_APPROXIMATION.as_info()
        assert info["default_group_size"] == 100
        assert info["hr_survival_bounds"] == (0.05, 0.99)
