import math

from planview_checker.checks.base import PlanViewCheck
from planview_checker.config import THRESHOLDS
from planview_checker.geometry.errors import LengthMismatch
from planview_checker.logger import log_verbose


class LengthCheck(PlanViewCheck):
    """Sum of geometry lengths must match the declared road length."""

    def __init__(self, tolerance: float = THRESHOLDS["length_tolerance"], verbose: bool = False):
        super().__init__("LengthMismatch", f"Road length off by more than {tolerance} (rel/abs)", verbose)
        self.tolerance = tolerance

    def run(self, curves, declared_length, output_msp=None, early_exit=True):
        computed = math.fsum(c.length.meters for c in curves)
        declared = declared_length.meters
        if self.verbose:
            log_verbose(f"\n=== Checking road length: declared {declared}, computed {computed} ===")

        found = []
        if not math.isclose(computed, declared, rel_tol=self.tolerance, abs_tol=self.tolerance):
            location = curves[-1].end_pose().position if curves else None
            self._record(LengthMismatch(declared, computed), found, output_msp, location)
        return found
