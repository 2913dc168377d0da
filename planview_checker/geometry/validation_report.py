from typing import List, Optional, Sequence
import csv
import math
from pathlib import Path

from .curves import EvaluatedCurve
from .errors import PlanViewValidationError
from .integration import IntegrationNonConvergent
from .tolerances import ValidationTolerances
from .units import Length


class ValidationReport:
    def __init__(self, curves: Sequence[EvaluatedCurve], declared_length: Length,
                 violations: List[PlanViewValidationError],
                 tolerances: ValidationTolerances = None, road_id: Optional[str] = None):
        self.curves = tuple(curves)
        self.declared_length = declared_length
        self.violations = violations
        self.tolerances = tolerances or ValidationTolerances()
        self.road_id = road_id

    @property
    def is_valid(self) -> bool:
        return not self.violations

    @property
    def first_violation(self) -> Optional[PlanViewValidationError]:
        return self.violations[0] if self.violations else None

    @property
    def caveats(self) -> List[IntegrationNonConvergent]:
        """Quadrature caveats of the evaluated curves (approximate, still usable)."""
        return [c.caveat for c in self.curves if c.caveat is not None]

    def computed_length(self) -> float:
        return math.fsum(c.length.meters for c in self.curves)

    def summary(self) -> dict:
        counts = {}
        for v in self.violations:
            counts[v.kind] = counts.get(v.kind, 0) + 1
        position_gaps = [v.position_gap for v in self.violations if hasattr(v, "position_gap")]
        heading_gaps = [v.heading_gap for v in self.violations if hasattr(v, "heading_gap")]
        return {
            "road_id": self.road_id,
            "valid": self.is_valid,
            "geometry_count": len(self.curves),
            "declared_length": self.declared_length.meters,
            "computed_length": self.computed_length(),
            "count": len(self.violations),
            "violation_counts": counts,
            "max_position_gap": max(position_gaps) if position_gaps else 0.0,
            "max_heading_gap_rad": max(heading_gaps) if heading_gaps else 0.0,
            "caveat_count": len(self.caveats),
        }

    def save_csv(self, path: Path):
        with path.open("w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow([
                "road_id", "kind", "index",
                "position_gap_m", "heading_gap_rad",
                "declared_length_m", "computed_length_m",
                "message",
            ])
            for v in self.violations:
                writer.writerow([
                    self.road_id if self.road_id is not None else "",
                    v.kind,
                    "" if v.index is None else v.index,
                    getattr(v, "position_gap", ""),
                    getattr(v, "heading_gap", ""),
                    getattr(v, "declared", ""),
                    getattr(v, "computed", ""),
                    str(v),
                ])
