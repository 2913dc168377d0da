from planview_checker.checks.base import PlanViewCheck
from planview_checker.config import THRESHOLDS
from planview_checker.geometry.errors import DiscontinuousReferenceLine
from planview_checker.logger import log_verbose


class ContinuityCheck(PlanViewCheck):
    """
    C0 check: each geometry must start at the evaluated end pose of the
    previous one, in position and in heading.
    """

    def __init__(self, position_tolerance: float = THRESHOLDS["position_tolerance"],
                 heading_tolerance: float = THRESHOLDS["heading_tolerance"],
                 verbose: bool = False):
        super().__init__(
            "DiscontinuousReferenceLine",
            f"Geometry gap > {position_tolerance}m or > {heading_tolerance}rad",
            verbose,
        )
        self.position_tolerance = position_tolerance
        self.heading_tolerance = heading_tolerance

    def run(self, curves, declared_length, output_msp=None, early_exit=True):
        if self.verbose:
            log_verbose(f"\n=== Checking continuity of {len(curves)} geometries ===")

        found = []
        for i in range(1, len(curves)):
            end = curves[i - 1].end_pose()
            start = curves[i].primitive.start_pose
            position_gap, heading_gap = end.gap_to(start)

            if position_gap > self.position_tolerance or heading_gap > self.heading_tolerance:
                violation = DiscontinuousReferenceLine(i, position_gap, heading_gap)
                self._record(violation, found, output_msp, start.position)
                if self.verbose:
                    log_verbose(f"      End of {i - 1}: ({end.position.x:.6f}, {end.position.y:.6f}) "
                                f"hdg {end.heading.radians:.9f}")
                    log_verbose(f"      Start of {i}: ({start.position.x:.6f}, {start.position.y:.6f}) "
                                f"hdg {start.heading.radians:.9f}")
                if early_exit:
                    break
            elif self.verbose and i <= 5:
                log_verbose(f"  Joint {i}: gap {position_gap:.3e}m / {heading_gap:.3e}rad (OK)")
        return found
