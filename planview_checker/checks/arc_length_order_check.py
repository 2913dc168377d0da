from planview_checker.checks.base import PlanViewCheck
from planview_checker.geometry.errors import NonMonotonicArcLength
from planview_checker.logger import log_verbose


class ArcLengthOrderCheck(PlanViewCheck):
    """Geometry records must be listed with non-decreasing s."""

    def __init__(self, verbose: bool = False):
        super().__init__("NonMonotonicArcLength", "s values in geometry not monotonic", verbose)

    def run(self, curves, declared_length, output_msp=None, early_exit=True):
        if self.verbose:
            log_verbose(f"\n=== Checking s order of {len(curves)} geometries ===")

        found = []
        for i in range(1, len(curves)):
            prev = curves[i - 1].primitive
            curr = curves[i].primitive
            # equal s values (zero-length runs) are legal
            if prev.s > curr.s:
                violation = NonMonotonicArcLength(i, prev.s.meters, curr.s.meters)
                self._record(violation, found, output_msp, curr.start_pose.position)
                if early_exit:
                    break
        return found
