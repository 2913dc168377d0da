from dataclasses import dataclass
from typing import Tuple
import math

from .plan_view import PlanViewAssembler, ReferenceLine
from .primitives import GeometryPrimitive
from .units import Length


@dataclass(frozen=True)
class Road:
    """
    One road record: identification, declared reference line length and the
    geometry records of its plan view.
    """

    id: str
    length: Length
    plan_view: Tuple[GeometryPrimitive, ...] = ()
    name: str = ""
    junction: str = "-1"    # id of the junction this road connects, -1 for none

    def __post_init__(self):
        object.__setattr__(self, "plan_view", tuple(self.plan_view))
        if not isinstance(self.length, Length):
            object.__setattr__(self, "length", Length(self.length))

    @property
    def is_connecting_road(self) -> bool:
        return self.junction not in ("", "-1")

    def sum_length(self) -> Length:
        """Sum up the lengths of all geometry records."""
        return Length(math.fsum(g.length.meters for g in self.plan_view))

    def validate(self, assembler: PlanViewAssembler = None) -> ReferenceLine:
        assembler = assembler or PlanViewAssembler()
        return assembler.assemble(self.plan_view, self.length)
