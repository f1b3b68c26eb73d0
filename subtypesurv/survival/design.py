"""
SurvivalCurve / CurveDesign: immutable containers for subtype survival curves.

SurvivalCurve wraps one subtype's Kaplan-Meier step function as delivered by
the upstream subtype assignment pipeline. CurveDesign bundles the curves of
one analysis run with the initial at-risk count of every group.

Inputs are validated at construction time, and all downstream code trusts
clean data.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from subtypesurv.core.exceptions import ValidationError
from subtypesurv.core.validation import (
    check_1d,
    check_array,
    check_consistent_length,
    check_counts,
    check_finite,
    check_non_empty,
    check_non_negative,
    check_positive_count,
)
from subtypesurv.survival._approximation import DEFAULT_APPROXIMATION, CurveApproximation


def _point_array(values, name: str) -> NDArray:
    arr = check_array(values, name)
    check_1d(arr, name)
    check_finite(arr, name)
    return arr


def _is_zero(value) -> bool:
    return (
        not isinstance(value, bool)
        and isinstance(value, (int, float, np.integer, np.floating))
        and value == 0
    )


@dataclass(frozen=True)
class SurvivalCurve:
    """Immutable Kaplan-Meier curve of one subtype.

    Parameters
    ----------
    subtype : str
        Subtype identifier.
    time : NDArray
        Time of each point. Non-negative; any order.
    survival : NDArray
        Survival probability at each point. Non-negative; values above 1
        are kept as given and clamped to 1 during preprocessing.
    censored : NDArray or None
        Number censored at each point, if supplied.
    events : NDArray or None
        Number of events at each point, if supplied.
    """

    subtype: str
    time: NDArray
    survival: NDArray
    censored: NDArray | None
    events: NDArray | None

    @classmethod
    def from_points(
        cls,
        subtype: str,
        time,
        survival,
        *,
        censored=None,
        events=None,
    ) -> SurvivalCurve:
        """Create and validate a curve from parallel arrays.

        Raises
        ------
        ValidationError
            If the subtype is empty, the arrays are empty, non-finite or
            mismatched, or times or survival values are negative.
        """
        if not isinstance(subtype, str) or not subtype:
            raise ValidationError(
                f"subtype must be a non-empty string, got {subtype!r}",
                field="subtype",
            )

        time_arr = _point_array(time, f"{subtype}.time")
        surv_arr = _point_array(survival, f"{subtype}.survival")
        check_non_empty(time_arr, f"{subtype}.time")
        check_consistent_length(
            time_arr, surv_arr,
            names=(f"{subtype}.time", f"{subtype}.survival"),
        )
        check_non_negative(time_arr, f"{subtype}.time")
        check_non_negative(surv_arr, f"{subtype}.survival")

        optional = {}
        for name, values in (("censored", censored), ("events", events)):
            if values is None:
                optional[name] = None
                continue
            label = f"{subtype}.{name}"
            arr = _point_array(values, label)
            check_consistent_length(time_arr, arr, names=(f"{subtype}.time", label))
            check_counts(arr, label)
            optional[name] = arr

        return cls(
            subtype=subtype,
            time=time_arr,
            survival=surv_arr,
            censored=optional["censored"],
            events=optional["events"],
        )

    @classmethod
    def from_record(cls, record: Mapping) -> SurvivalCurve:
        """Create a curve from an upstream JSON record.

        Accepts ``{"subtype": ..., "timePoints": [...]}`` (``"points"`` is
        also accepted). Each point is either a mapping with ``time`` and
        ``survival`` keys and optional ``censored``/``events`` counts, or a
        ``(time, survival)`` pair.
        """
        if not isinstance(record, Mapping):
            raise ValidationError(
                f"curve record must be a mapping, got {type(record).__name__}"
            )
        if "subtype" not in record:
            raise ValidationError("curve record has no 'subtype' key", field="subtype")
        subtype = record["subtype"]

        points = record.get("timePoints", record.get("points"))
        if points is None:
            raise ValidationError(
                f"curve record {subtype!r} has no 'timePoints' or 'points' key",
                field="timePoints",
            )

        try:
            points = list(points)
        except TypeError as e:
            raise ValidationError(
                f"{subtype}: timePoints must be a sequence of points, "
                f"got {type(points).__name__}",
                field="timePoints",
            ) from e

        time, survival, censored, events = [], [], [], []
        for i, point in enumerate(points):
            if isinstance(point, Mapping):
                try:
                    time.append(point["time"])
                    survival.append(point["survival"])
                except KeyError as e:
                    raise ValidationError(
                        f"{subtype}: point {i} is missing key {e.args[0]!r}",
                        field=e.args[0],
                    ) from e
                censored.append(point.get("censored"))
                events.append(point.get("events"))
            elif isinstance(point, (Sequence, np.ndarray)) and len(point) == 2:
                time.append(point[0])
                survival.append(point[1])
                censored.append(None)
                events.append(None)
            else:
                raise ValidationError(
                    f"{subtype}: point {i} must be a mapping or a (time, survival) pair"
                )

        def _fill(values):
            if all(v is None for v in values):
                return None
            return [0 if v is None else v for v in values]

        return cls.from_points(
            subtype, time, survival,
            censored=_fill(censored),
            events=_fill(events),
        )

    @property
    def n_points(self) -> int:
        """Number of supplied points."""
        return len(self.time)


@dataclass(frozen=True)
class CurveDesign:
    """Validated curves and group sizes for one analysis run.

    Parameters
    ----------
    curves : tuple of SurvivalCurve
        Curves in supplied order. The first is the reference group.
    group_sizes : tuple of int
        Initial at-risk count per curve.
    defaulted : tuple of str
        Subtypes whose group size fell back to the default.
    approximation : CurveApproximation
        Heuristic constants used downstream.
    """

    curves: tuple[SurvivalCurve, ...]
    group_sizes: tuple[int, ...]
    defaulted: tuple[str, ...]
    approximation: CurveApproximation

    @classmethod
    def for_curves(
        cls,
        curves,
        counts: Mapping[str, int] | None = None,
        *,
        approximation: CurveApproximation = DEFAULT_APPROXIMATION,
    ) -> CurveDesign:
        """Create and validate an analysis design.

        Parameters
        ----------
        curves : sequence of SurvivalCurve or mapping, or None
            One curve per subtype. Mappings are parsed with
            ``SurvivalCurve.from_record``. None is treated as no curves.
        counts : mapping or None
            Subtype -> initial at-risk count. Missing subtypes and a count
            of 0 use ``approximation.default_group_size``.
        approximation : CurveApproximation
            Heuristic constants.

        Raises
        ------
        ValidationError
            If a curve or a count is invalid.
        """
        if not isinstance(approximation, CurveApproximation):
            raise ValidationError(
                f"approximation must be a CurveApproximation, "
                f"got {type(approximation).__name__}",
                field="approximation",
            )
        if counts is not None and not isinstance(counts, Mapping):
            raise ValidationError(
                f"counts must be a mapping of subtype to count, "
                f"got {type(counts).__name__}",
                field="counts",
            )

        parsed = []
        for item in curves if curves is not None else ():
            if isinstance(item, SurvivalCurve):
                parsed.append(item)
            elif isinstance(item, Mapping):
                parsed.append(SurvivalCurve.from_record(item))
            else:
                raise ValidationError(
                    f"curves must contain SurvivalCurve objects or records, "
                    f"got {type(item).__name__}",
                    field="curves",
                )

        sizes = []
        defaulted = []
        for curve in parsed:
            value = counts.get(curve.subtype) if counts is not None else None
            # A zero count means the upstream pipeline had no size for the group
            if value is None or _is_zero(value):
                sizes.append(approximation.default_group_size)
                if curve.subtype not in defaulted:
                    defaulted.append(curve.subtype)
            else:
                sizes.append(check_positive_count(value, f"counts[{curve.subtype!r}]"))

        return cls(
            curves=tuple(parsed),
            group_sizes=tuple(sizes),
            defaulted=tuple(defaulted),
            approximation=approximation,
        )

    @property
    def n_groups(self) -> int:
        """Number of curves."""
        return len(self.curves)

    @property
    def subtypes(self) -> tuple[str, ...]:
        """Subtype identifiers in supplied order."""
        return tuple(c.subtype for c in self.curves)

    @property
    def clamped_subtypes(self) -> tuple[str, ...]:
        """Subtypes with survival values above 1."""
        clamped = []
        for curve in self.curves:
            if np.any(curve.survival > 1.0) and curve.subtype not in clamped:
                clamped.append(curve.subtype)
        return tuple(clamped)

    @property
    def duplicated_subtypes(self) -> tuple[str, ...]:
        """Subtype identifiers that occur more than once."""
        seen = set()
        dupes = []
        for subtype in self.subtypes:
            if subtype in seen and subtype not in dupes:
                dupes.append(subtype)
            seen.add(subtype)
        return tuple(dupes)
