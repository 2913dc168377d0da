"""
Adaptive composite Simpson quadrature.

The sample count doubles (previous samples are reused) until two consecutive
estimates differ by at most ``rel_tol * max(|I|, b - a)``.  The difference of
the last two estimates is reported as the error estimate; Simpson's true
error is roughly a fifteenth of it.  The loop stops at ``max_subdivisions``
so pathological integrands always terminate.
"""

from dataclasses import dataclass
from typing import Callable, Optional, TypeVar, Union
import math

from ezdxf.math import Vec2

from planview_checker import config

T = TypeVar("T", float, Vec2)


@dataclass(frozen=True)
class IntegrationNonConvergent:
    """Caveat: the quadrature hit its subdivision cap before converging."""

    t: float                # upper integration bound (local arc-length, m)
    error_estimate: float
    subdivisions: int

    def __str__(self):
        return (f"integration to t={self.t:.6f} did not converge: "
                f"error estimate {self.error_estimate:.3e} after {self.subdivisions} subdivisions")


@dataclass(frozen=True)
class IntegrationResult:
    value: Union[float, Vec2]
    error_estimate: float
    subdivisions: int
    converged: bool

    def caveat(self, t: float) -> Optional[IntegrationNonConvergent]:
        if self.converged:
            return None
        return IntegrationNonConvergent(t=t, error_estimate=self.error_estimate,
                                        subdivisions=self.subdivisions)


def _magnitude(value) -> float:
    if isinstance(value, Vec2):
        return value.magnitude
    return abs(value)


def simpson(
    fn: Callable[[float], T],
    a: float,
    b: float,
    rel_tol: float = config.THRESHOLDS["spiral_rel_tolerance"],
    min_subdivisions: int = config.THRESHOLDS["spiral_min_subdivisions"],
    max_subdivisions: int = config.THRESHOLDS["spiral_max_subdivisions"],
) -> IntegrationResult:
    """Integrate ``fn`` (float- or Vec2-valued) over [a, b]."""
    span = b - a
    if span == 0.0:
        zero = fn(a) * 0.0
        return IntegrationResult(value=zero, error_estimate=0.0, subdivisions=0, converged=True)

    n = 2
    h = span / n
    ends = fn(a) + fn(b)
    odd = fn(a + h)                     # samples at odd indices
    even = odd * 0.0                    # samples at interior even indices
    estimate = (ends + odd * 4.0) * (h / 3.0)
    error = math.inf

    while n < max_subdivisions:
        n *= 2
        h = span / n
        even = even + odd
        odd = fn(a + h)
        for i in range(3, n, 2):
            odd = odd + fn(a + i * h)
        refined = (ends + odd * 4.0 + even * 2.0) * (h / 3.0)
        error = _magnitude(refined - estimate)
        estimate = refined
        scale = max(_magnitude(estimate), abs(span))
        if n >= min_subdivisions and error <= rel_tol * scale:
            return IntegrationResult(value=estimate, error_estimate=error,
                                     subdivisions=n, converged=True)

    return IntegrationResult(value=estimate, error_estimate=error,
                             subdivisions=n, converged=False)
