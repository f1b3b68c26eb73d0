"""
Display formatting for survival test results.
"""

from __future__ import annotations


def _exponential(x: float, digits: int) -> str:
    # "5.00e-4" rather than Python's "5.00e-04"
    mantissa, exponent = f"{x:.{digits}e}".split("e")
    return f"{mantissa}e{int(exponent):+d}"


def format_pvalue(p: float) -> str:
    """Format a p-value for display.

    Examples
    --------
    >>> format_pvalue(0.00005)
    'p < 0.0001'
    >>> format_pvalue(0.0005)
    'p = 5.00e-4'
    >>> format_pvalue(0.005)
    'p = 0.0050'
    >>> format_pvalue(0.03)
    'p = 0.030'
    """
    if p < 0.0001:
        return "p < 0.0001"
    if p < 0.001:
        return f"p = {_exponential(p, 2)}"
    if p < 0.01:
        return f"p = {p:.4f}"
    return f"p = {p:.3f}"


def format_hr(hr: float, lower: float, upper: float) -> str:
    """Format a hazard ratio with its confidence interval.

    >>> format_hr(1.5, 1.1, 2.05)
    '1.50 (1.10–2.05)'
    """
    return f"{hr:.2f} ({lower:.2f}–{upper:.2f})"
