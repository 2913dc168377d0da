from abc import ABC, abstractmethod
from typing import Optional, Union
import math

from ezdxf.math import Vec2

from planview_checker import config
from planview_checker.logger import log_warning
from .integration import IntegrationNonConvergent, simpson
from .primitives import GeometryPrimitive, Poly3
from .units import Angle, Length, Pose, as_meters

# slack on the local parameter range, relative to max(1 m, length)
_PARAM_SLACK = 1e-9


class EvaluatedCurve(ABC):
    """
    Immutable parametric curve of one geometry record.
    ``t`` is the local arc-length (m or ``Length``) in [0, length].
    """

    def __init__(self, primitive: GeometryPrimitive):
        self._primitive = primitive
        self._start = primitive.start_pose
        self._length = primitive.length.meters

    @property
    def primitive(self) -> GeometryPrimitive:
        return self._primitive

    @property
    def length(self) -> Length:
        return self._primitive.length

    @property
    def caveat(self) -> Optional[IntegrationNonConvergent]:
        return None

    def _param(self, t: Union[Length, float]) -> float:
        t = as_meters(t)
        slack = _PARAM_SLACK * max(1.0, self._length)
        if t < -slack or t > self._length + slack:
            raise ValueError(f"t={t} outside [0, {self._length}]")
        return min(max(t, 0.0), self._length)

    @abstractmethod
    def position(self, t) -> Vec2:
        ...

    @abstractmethod
    def heading(self, t) -> Angle:
        ...

    @abstractmethod
    def curvature(self, t) -> float:
        ...

    def tangent(self, t) -> Vec2:
        return Vec2.from_angle(self.heading(t).radians)

    def pose(self, t) -> Pose:
        return Pose(self.position(t), self.heading(t))

    def start_pose(self) -> Pose:
        return self.pose(0.0)

    def end_pose(self) -> Pose:
        return self.pose(self._length)

    def __repr__(self):
        p = self._start.position
        return (f"{type(self).__name__}(s={self._primitive.s.meters}, "
                f"start=({p.x}, {p.y}), length={self._length})")


class LineCurve(EvaluatedCurve):
    def __init__(self, primitive: GeometryPrimitive):
        super().__init__(primitive)
        self._direction = self._start.direction()

    def position(self, t) -> Vec2:
        return self._start.position + self._direction * self._param(t)

    def heading(self, t) -> Angle:
        self._param(t)
        return self._start.heading

    def curvature(self, t) -> float:
        self._param(t)
        return 0.0


class ArcCurve(EvaluatedCurve):
    def __init__(self, primitive: GeometryPrimitive, curvature: float):
        if curvature == 0.0:
            raise ValueError("zero curvature arc must be evaluated as a line")
        super().__init__(primitive)
        self._k = curvature

    @property
    def radius(self) -> float:
        """Signed radius, negative for right turns."""
        return 1.0 / self._k

    @property
    def center(self) -> Vec2:
        return self._start.to_global(0.0, self.radius)

    def position(self, t) -> Vec2:
        t = self._param(t)
        sweep = self._k * t
        # 1 - cos(x) == 2 sin^2(x/2), stable for short arcs
        u = math.sin(sweep) / self._k
        v = 2.0 * math.sin(0.5 * sweep) ** 2 / self._k
        return self._start.to_global(u, v)

    def heading(self, t) -> Angle:
        return self._start.heading + Angle(self._k * self._param(t))

    def curvature(self, t) -> float:
        self._param(t)
        return self._k


class SpiralCurve(EvaluatedCurve):
    """
    Euler spiral, k(t) = k0 + (k1 - k0) * t / length.

    Position has no closed form; it is integrated from the unit tangent with
    adaptive Simpson quadrature (see ``integration.simpson``).  The end point
    is integrated once at construction.
    """

    def __init__(
        self,
        primitive: GeometryPrimitive,
        curv_start: float,
        curv_end: float,
        rel_tol: float = config.THRESHOLDS["spiral_rel_tolerance"],
        min_subdivisions: int = config.THRESHOLDS["spiral_min_subdivisions"],
        max_subdivisions: int = config.THRESHOLDS["spiral_max_subdivisions"],
    ):
        super().__init__(primitive)
        self._k0 = curv_start
        self._k1 = curv_end
        self._dk = (curv_end - curv_start) / self._length if self._length > 0 else 0.0
        self._rel_tol = rel_tol
        self._min_subdivisions = min_subdivisions
        self._max_subdivisions = max_subdivisions

        self._caveat = None
        if self._length == 0.0:
            self._end_position = self._start.position
        else:
            result = self._integrate(self._length)
            self._end_position = self._start.position + result.value
            self._caveat = result.caveat(self._length)
            if self._caveat is not None:
                log_warning(f"Spiral at s={primitive.s.meters}: {self._caveat}")

    @property
    def caveat(self) -> Optional[IntegrationNonConvergent]:
        return self._caveat

    def _heading_rad(self, t: float) -> float:
        return self._start.heading.radians + t * (self._k0 + 0.5 * self._dk * t)

    def _integrate(self, t: float):
        return simpson(
            lambda u: Vec2.from_angle(self._heading_rad(u)),
            0.0,
            t,
            rel_tol=self._rel_tol,
            min_subdivisions=self._min_subdivisions,
            max_subdivisions=self._max_subdivisions,
        )

    def position(self, t) -> Vec2:
        t = self._param(t)
        if t == 0.0:
            return self._start.position
        if t == self._length:
            return self._end_position
        result = self._integrate(t)
        if not result.converged:
            log_warning(f"Spiral at s={self._primitive.s.meters}: {result.caveat(t)}")
        return self._start.position + result.value

    def heading(self, t) -> Angle:
        return Angle(self._heading_rad(self._param(t)))

    def curvature(self, t) -> float:
        return self._k0 + self._dk * self._param(t)


class Poly3Curve(EvaluatedCurve):
    """
    Cubic lateral offset in the start frame, parameterized by the local
    longitudinal coordinate u = t, not by true arc-length.
    """

    def __init__(self, primitive: GeometryPrimitive, poly: Poly3,
                 rel_tol: float = config.THRESHOLDS["spiral_rel_tolerance"],
                 min_subdivisions: int = config.THRESHOLDS["spiral_min_subdivisions"],
                 max_subdivisions: int = config.THRESHOLDS["spiral_max_subdivisions"]):
        super().__init__(primitive)
        self._poly = poly
        result = simpson(
            lambda u: math.sqrt(1.0 + poly.slope(u) ** 2),
            0.0,
            self._length,
            rel_tol=rel_tol,
            min_subdivisions=min_subdivisions,
            max_subdivisions=max_subdivisions,
        )
        self._arc_length = result.value
        self._caveat = result.caveat(self._length)

    @property
    def caveat(self) -> Optional[IntegrationNonConvergent]:
        return self._caveat

    @property
    def arc_length(self) -> float:
        """True length of the polynomial over u in [0, length]."""
        return self._arc_length

    @property
    def arc_length_discrepancy(self) -> float:
        return self._arc_length - self._length

    def position(self, t) -> Vec2:
        u = self._param(t)
        return self._start.to_global(u, self._poly.offset(u))

    def heading(self, t) -> Angle:
        u = self._param(t)
        return self._start.heading + Angle(math.atan(self._poly.slope(u)))

    def curvature(self, t) -> float:
        u = self._param(t)
        slope = self._poly.slope(u)
        return self._poly.second_derivative(u) / (1.0 + slope * slope) ** 1.5
