"""
Plan view checks, run in order by the assembler.
"""

from .base import PlanViewCheck
from .arc_length_order_check import ArcLengthOrderCheck
from .continuity_check import ContinuityCheck
from .length_check import LengthCheck

__all__ = [
    "PlanViewCheck",
    "ArcLengthOrderCheck",
    "ContinuityCheck",
    "LengthCheck",
]
