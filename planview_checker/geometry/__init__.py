"""
Plan view geometry: reference line reconstruction and validation
"""

from .units import Angle, Length, Pose
from .primitives import Arc, GeometryPrimitive, Line, Poly3, Spiral
from .integration import IntegrationNonConvergent
from .curves import ArcCurve, EvaluatedCurve, LineCurve, Poly3Curve, SpiralCurve
from .evaluator import evaluate
from .errors import (
    DiscontinuousReferenceLine,
    LengthMismatch,
    NonMonotonicArcLength,
    PlanViewValidationError,
)
from .tolerances import ValidationTolerances
from .validation_report import ValidationReport
from .plan_view import PlanViewAssembler, ReferenceLine
from .road import Road

__all__ = [
    "Angle",
    "Length",
    "Pose",
    "Arc",
    "GeometryPrimitive",
    "Line",
    "Poly3",
    "Spiral",
    "IntegrationNonConvergent",
    "ArcCurve",
    "EvaluatedCurve",
    "LineCurve",
    "Poly3Curve",
    "SpiralCurve",
    "evaluate",
    "DiscontinuousReferenceLine",
    "LengthMismatch",
    "NonMonotonicArcLength",
    "PlanViewValidationError",
    "ValidationTolerances",
    "ValidationReport",
    "PlanViewAssembler",
    "ReferenceLine",
    "Road",
]
