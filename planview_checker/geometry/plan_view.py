"""
Plan view assembly: evaluate every geometry record of one road, then run the
ordered checks (s order, continuity, length accounting) over the curves.
"""

from bisect import bisect_right
import math
from typing import Iterator, List, Optional, Sequence, Union

from planview_checker import config
from planview_checker.logger import log_verbose
from .curves import EvaluatedCurve
from .errors import PlanViewValidationError
from .evaluator import evaluate
from .primitives import GeometryPrimitive
from .tolerances import ValidationTolerances
from .units import Length, Pose, as_meters
from .validation_report import ValidationReport


class ReferenceLine:
    """Validated sequence of curves for one road."""

    def __init__(self, curves: Sequence[EvaluatedCurve], total_length: Length):
        self.curves = tuple(curves)
        self.total_length = total_length
        self._starts = [c.primitive.s.meters for c in self.curves]

    def __len__(self) -> int:
        return len(self.curves)

    def __iter__(self) -> Iterator[EvaluatedCurve]:
        return iter(self.curves)

    def __getitem__(self, index: int) -> EvaluatedCurve:
        return self.curves[index]

    def start_pose(self) -> Pose:
        if not self.curves:
            raise ValueError("empty reference line has no start pose")
        return self.curves[0].start_pose()

    def end_pose(self) -> Pose:
        if not self.curves:
            raise ValueError("empty reference line has no end pose")
        return self.curves[-1].end_pose()

    def curve_at(self, s: Union[Length, float]) -> EvaluatedCurve:
        """Geometry covering road arc-length ``s`` (the later one at a shared boundary)."""
        s = as_meters(s)
        idx = bisect_right(self._starts, s) - 1
        if idx < 0:
            raise ValueError(f"s={s} is before the start of the reference line")
        return self.curves[idx]

    def pose_at(self, s: Union[Length, float]) -> Pose:
        curve = self.curve_at(s)
        return curve.pose(as_meters(s) - curve.primitive.s.meters)


class PlanViewAssembler:
    """
    Evaluate and validate the plan view of one road.

    With ``early_exit`` (default) validation stops at the first violation.
    Otherwise every violation of every check is collected; the first one is
    the same in both modes.
    """

    def __init__(
        self,
        tolerances: ValidationTolerances = None,
        checks: Optional[list] = None,
        early_exit: bool = True,
        verbose: bool = False,
    ):
        self.tolerances = tolerances or ValidationTolerances()
        self.early_exit = early_exit
        self.verbose = verbose
        if checks is None:
            # loaded by name to keep geometry importable without the checks package
            from planview_checker.utils import load_checks
            checks = load_checks(config.DEFAULT_CHECKS, {
                "position_tolerance": self.tolerances.position_tolerance,
                "heading_tolerance": self.tolerances.heading_tolerance,
                "length_tolerance": self.tolerances.length_tolerance,
                "verbose": verbose,
            })
        self.checks = checks

    def evaluate_all(self, primitives: Sequence[GeometryPrimitive]) -> List[EvaluatedCurve]:
        t = self.tolerances
        return [
            evaluate(
                p,
                rel_tol=t.integration_rel_tolerance,
                min_subdivisions=t.integration_min_subdivisions,
                max_subdivisions=t.integration_max_subdivisions,
            )
            for p in primitives
        ]

    def validate(
        self,
        primitives: Sequence[GeometryPrimitive],
        declared_length: Union[Length, float],
        output_msp=None,
        road_id: Optional[str] = None,
    ) -> ValidationReport:
        """Never raises for validation outcomes; returns a report."""
        if not isinstance(declared_length, Length):
            declared_length = Length(declared_length)

        curves = self.evaluate_all(primitives)
        violations: List[PlanViewValidationError] = []
        for check in self.checks:
            found = check.run(curves, declared_length, output_msp=output_msp, early_exit=self.early_exit)
            violations.extend(found)
            if found and self.early_exit:
                break

        if self.verbose:
            state = "OK" if not violations else f"{len(violations)} violation(s)"
            log_verbose(f"Road {road_id}: {len(curves)} geometries, {state}")

        return ValidationReport(curves, declared_length, violations,
                                tolerances=self.tolerances, road_id=road_id)

    def assemble(
        self,
        primitives: Sequence[GeometryPrimitive],
        declared_length: Union[Length, float],
    ) -> ReferenceLine:
        """Return the validated reference line or raise the first violation."""
        report = self.validate(primitives, declared_length)
        if not report.is_valid:
            raise report.first_violation
        total = Length(math.fsum(c.length.meters for c in report.curves))
        return ReferenceLine(report.curves, total)
