"""
subtypesurv: survival comparison of gene-expression molecular subtypes.

Works from aggregated Kaplan-Meier curves (time, survival) per subtype as
produced by an upstream subtype assignment pipeline, and provides

    - curve preprocessing (monotone curves, Greenwood bands, medians)
    - an approximate log-rank test across subtypes
    - approximate Cox PH hazard ratios against a reference subtype

Submodules:
    survival: Curve analyses and result formatting
    core: Result envelope, exceptions, validation, special functions
"""

__version__ = "0.1.0"

from subtypesurv import core
from subtypesurv import survival

__all__ = [
    "__version__",
    "core",
    "survival",
]
