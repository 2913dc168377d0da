"""
Geometry records of a road's plan view.

A record is a common header (start ``s``, start pose, length) plus exactly one
shape payload.  The shape set is closed: Line, Arc, Spiral, Poly3.
"""

from dataclasses import dataclass, field, fields
from typing import Union
import math

from .units import Length, Pose


def _require_finite(record) -> None:
    for f in fields(record):
        value = getattr(record, f.name)
        if not math.isfinite(value):
            raise ValueError(f"{type(record).__name__}.{f.name} is not finite: {value!r}")


@dataclass(frozen=True)
class Line:
    """Straight line."""


@dataclass(frozen=True)
class Arc:
    curvature: float    # 1/m, positive turns left

    def __post_init__(self):
        _require_finite(self)


@dataclass(frozen=True)
class Spiral:
    """Euler spiral: curvature changes linearly from start to end."""

    curv_start: float   # 1/m
    curv_end: float     # 1/m

    def __post_init__(self):
        _require_finite(self)


@dataclass(frozen=True)
class Poly3:
    """Lateral offset v(u) = a + b*u + c*u^2 + d*u^3 in the start frame."""

    a: float
    b: float
    c: float
    d: float

    def __post_init__(self):
        _require_finite(self)

    def offset(self, u: float) -> float:
        return self.a + u * (self.b + u * (self.c + u * self.d))

    def slope(self, u: float) -> float:
        return self.b + u * (2.0 * self.c + u * 3.0 * self.d)

    def second_derivative(self, u: float) -> float:
        return 2.0 * self.c + 6.0 * self.d * u


Shape = Union[Line, Arc, Spiral, Poly3]

SHAPE_TYPES = (Line, Arc, Spiral, Poly3)


@dataclass(frozen=True)
class GeometryPrimitive:
    s: Length
    start_pose: Pose
    length: Length
    shape: Shape = field(default_factory=Line)

    def __post_init__(self):
        if not isinstance(self.s, Length) or not isinstance(self.length, Length):
            raise TypeError("s and length must be Length values")
        if self.s < Length.zero():
            raise ValueError(f"s must be >= 0, got {self.s.meters}")
        if self.length < Length.zero():
            raise ValueError(f"length must be >= 0, got {self.length.meters}")
        if not isinstance(self.shape, SHAPE_TYPES):
            raise TypeError(f"unsupported geometry shape: {type(self.shape).__name__}")

    @classmethod
    def create(cls, s: float, x: float, y: float, hdg: float, length: float,
               shape: Shape = None) -> "GeometryPrimitive":
        """Build a record from plain OpenDRIVE-style numbers."""
        return cls(
            s=Length(s),
            start_pose=Pose.from_xyh(x, y, hdg),
            length=Length(length),
            shape=shape if shape is not None else Line(),
        )

    @property
    def s_end(self) -> Length:
        return self.s + self.length

    @property
    def kind(self) -> str:
        return type(self.shape).__name__.lower()
