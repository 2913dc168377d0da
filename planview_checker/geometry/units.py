"""
Unit-carrying scalars and the pose of the reference line.

``Length`` (meters) and ``Angle`` (radians) wrap a float and never mix with
raw numbers implicitly.  Points, vectors and rotations are ezdxf ``Vec2``.
"""

from dataclasses import dataclass
from typing import Tuple, Union
import math

from ezdxf.math import Vec2


def _checked(value, unit: str) -> float:
    if isinstance(value, _Scalar):
        raise TypeError(f"expected a plain number in {unit}, got {type(value).__name__}")
    v = float(value)
    if not math.isfinite(v):
        raise ValueError(f"non-finite value in {unit}: {value!r}")
    return v


class _Scalar:
    """Float with a fixed unit; arithmetic only with the same type."""

    __slots__ = ("_value",)
    unit = ""

    def __init__(self, value: float):
        self._value = _checked(value, self.unit)

    def __setattr__(self, name, value):
        if name != "_value" or hasattr(self, "_value"):
            raise AttributeError(f"{type(self).__name__} is immutable")
        object.__setattr__(self, name, value)

    def _same(self, other) -> bool:
        return type(other) is type(self)

    # --- arithmetic -----------------------------------------------------
    def __add__(self, other):
        if not self._same(other):
            return NotImplemented
        return type(self)(self._value + other._value)

    def __sub__(self, other):
        if not self._same(other):
            return NotImplemented
        return type(self)(self._value - other._value)

    def __mul__(self, factor):
        if isinstance(factor, _Scalar) or not isinstance(factor, (int, float)):
            return NotImplemented
        return type(self)(self._value * factor)

    __rmul__ = __mul__

    def __truediv__(self, other):
        # same-unit division gives a plain ratio
        if self._same(other):
            return self._value / other._value
        if isinstance(other, _Scalar) or not isinstance(other, (int, float)):
            return NotImplemented
        return type(self)(self._value / other)

    def __neg__(self):
        return type(self)(-self._value)

    def __abs__(self):
        return type(self)(abs(self._value))

    # --- comparisons ----------------------------------------------------
    def __eq__(self, other):
        if not self._same(other):
            return NotImplemented
        return self._value == other._value

    def __lt__(self, other):
        if not self._same(other):
            return NotImplemented
        return self._value < other._value

    def __le__(self, other):
        if not self._same(other):
            return NotImplemented
        return self._value <= other._value

    def __gt__(self, other):
        if not self._same(other):
            return NotImplemented
        return self._value > other._value

    def __ge__(self, other):
        if not self._same(other):
            return NotImplemented
        return self._value >= other._value

    def __hash__(self):
        return hash((type(self).__name__, self._value))

    def __repr__(self):
        return f"{type(self).__name__}({self._value!r})"

    def isclose(self, other, abs_tol: float = 1e-9) -> bool:
        if not self._same(other):
            raise TypeError(f"cannot compare {type(self).__name__} with {type(other).__name__}")
        return math.isclose(self._value, other._value, rel_tol=0.0, abs_tol=abs_tol)


class Length(_Scalar):
    __slots__ = ()
    unit = "m"

    @property
    def meters(self) -> float:
        return self._value

    @classmethod
    def zero(cls) -> "Length":
        return cls(0.0)


class Angle(_Scalar):
    __slots__ = ()
    unit = "rad"

    @property
    def radians(self) -> float:
        return self._value

    @property
    def degrees(self) -> float:
        return math.degrees(self._value)

    @classmethod
    def from_degrees(cls, degrees: float) -> "Angle":
        return cls(math.radians(degrees))

    def cos(self) -> float:
        return math.cos(self._value)

    def sin(self) -> float:
        return math.sin(self._value)

    def normalized(self) -> "Angle":
        """Same direction, wrapped into (-pi, pi]."""
        return Angle(wrap_to_pi(self._value))

    def difference(self, other: "Angle") -> "Angle":
        """Smallest signed rotation from ``other`` to ``self``."""
        return Angle(wrap_to_pi(self._value - other._value))


def wrap_to_pi(radians: float) -> float:
    wrapped = math.remainder(radians, 2.0 * math.pi)
    if wrapped <= -math.pi:
        wrapped += 2.0 * math.pi
    return wrapped


def as_meters(value: Union[Length, float]) -> float:
    """Accept a ``Length`` or a plain number of meters (local curve parameter)."""
    if isinstance(value, Length):
        return value.meters
    return _checked(value, Length.unit)


@dataclass(frozen=True)
class Pose:
    """Position plus tangent direction of the reference line."""

    position: Vec2
    heading: Angle

    def __post_init__(self):
        if not isinstance(self.heading, Angle):
            raise TypeError("heading must be an Angle")
        position = Vec2(self.position)
        if not (math.isfinite(position.x) and math.isfinite(position.y)):
            raise ValueError(f"non-finite position: {position}")
        object.__setattr__(self, "position", position)

    @classmethod
    def from_xyh(cls, x: float, y: float, hdg: float) -> "Pose":
        return cls(Vec2(float(x), float(y)), Angle(hdg))

    def direction(self) -> Vec2:
        return Vec2.from_angle(self.heading.radians)

    def to_global(self, u: float, v: float) -> Vec2:
        """Map the local (u along heading, v to the left) offset into the plane."""
        return self.position + Vec2(u, v).rotate(self.heading.radians)

    def gap_to(self, other: "Pose") -> Tuple[float, float]:
        """(position gap in m, absolute heading gap in rad)."""
        position_gap = self.position.distance(other.position)
        heading_gap = abs(self.heading.difference(other.heading).radians)
        return position_gap, heading_gap
