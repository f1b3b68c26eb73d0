"""
Approximation settings for curve-based survival statistics.

The engines only see aggregated Kaplan-Meier curves, so event counts,
at-risk counts and standard errors are reconstructed with fixed
heuristics. Every constant those heuristics use lives here so that a
result can be reproduced from its settings alone.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any

from subtypesurv.core.exceptions import ValidationError


@dataclass(frozen=True)
class CurveApproximation:
    """Constants used to reconstruct statistics from curve shape.

    Attributes
    ----------
    default_group_size : int
        Initial at-risk count for a subtype missing from the counts
        mapping. An assumption, not enrollment data.
    event_threshold : float
        Minimum survival drop between consecutive points that counts as
        an event.
    event_scale : float
        Estimated events per unit of survival drop.
    greenwood_bounds : tuple of float
        Open interval of S(t) where the Greenwood SE is computed; outside
        it the SE is 0.
    hr_survival_bounds : tuple of float
        Open interval both survivals must lie in for a hazard-ratio sample.
    hr_max : float
        Per-time hazard-ratio samples must lie in (0, hr_max).
    se_floor_factor : float
        Multiplier of sqrt(1/n_ref + 1/n_group) giving the minimum SE of
        a log hazard ratio.
    z_critical : float
        Normal quantile for two-sided confidence intervals.
    """

    default_group_size: int = 100
    event_threshold: float = 0.001
    event_scale: float = 100.0
    greenwood_bounds: tuple[float, float] = (0.01, 0.99)
    hr_survival_bounds: tuple[float, float] = (0.05, 0.99)
    hr_max: float = 100.0
    se_floor_factor: float = 0.5
    z_critical: float = 1.96

    def __post_init__(self) -> None:
        if (
            isinstance(self.default_group_size, bool)
            or not isinstance(self.default_group_size, int)
            or self.default_group_size <= 0
        ):
            raise ValidationError(
                f"default_group_size must be a positive integer, "
                f"got {self.default_group_size!r}",
                field="default_group_size",
            )
        for name in ("event_threshold", "event_scale", "hr_max",
                     "se_floor_factor", "z_critical"):
            value = getattr(self, name)
            if not value > 0:
                raise ValidationError(f"{name} must be positive, got {value}", field=name)
        for name in ("greenwood_bounds", "hr_survival_bounds"):
            lo, hi = getattr(self, name)
            if not 0 <= lo < hi <= 1:
                raise ValidationError(
                    f"{name} must satisfy 0 <= lower < upper <= 1, got ({lo}, {hi})",
                    field=name,
                )

    def as_info(self) -> dict[str, Any]:
        """Settings as a plain dict for Result.info."""
        return asdict(self)


DEFAULT_APPROXIMATION = CurveApproximation()
