"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from subtypesurv.survival import SurvivalCurve


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def exponential_curves(rng):
    """Two subtype curves with exponential survival and HR = 1.5.

    Reference hazard 0.05/month at 24 monthly points; the comparison
    subtype is S_ref(t) ** 1.5 at a random subset of those months.
    """
    time = np.arange(1, 25, dtype=np.float64)
    s_ref = np.exp(-0.05 * time)
    keep = np.sort(rng.choice(len(time), size=16, replace=False))
    return [
        SurvivalCurve.from_points("C1", time, s_ref),
        SurvivalCurve.from_points("C2", time[keep], s_ref[keep] ** 1.5),
    ]
