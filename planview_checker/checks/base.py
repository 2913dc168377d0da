from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from ezdxf.math import Vec2

from planview_checker.config import DEFAULT_ERROR_LAYER, ERROR_COLORS, ERROR_LAYERS, XDATA_APPID
from planview_checker.geometry.curves import EvaluatedCurve
from planview_checker.geometry.errors import PlanViewValidationError
from planview_checker.geometry.units import Length
from planview_checker.logger import log_verbose, log_warning


class PlanViewCheck(ABC):
    """
    Abstract base class for all plan view checks.
    """

    def __init__(self, name: str, description: str, verbose: bool = False):
        self.name = name
        self.description = description
        self.verbose = verbose
        self.error_count = 0

    @abstractmethod
    def run(self, curves: Sequence[EvaluatedCurve], declared_length: Length,
            output_msp: Any = None, early_exit: bool = True) -> List[PlanViewValidationError]:
        """
        Perform the check on the evaluated curves of one road.
        - curves: evaluated geometries in plan view order
        - declared_length: road length stated by the road record
        - output_msp: optional DXF modelspace for error markers
        - early_exit: stop at the first violation
        Returns the violations found (at most one when early_exit is set).
        """
        pass

    def get_error_count(self) -> int:
        """Get the number of errors found by this check"""
        return self.error_count

    def _record(self, violation: PlanViewValidationError, found: List[PlanViewValidationError],
                output_msp: Any, location: Optional[Vec2]) -> None:
        self.error_count += 1
        found.append(violation)
        if self.verbose:
            log_verbose(f"  *** ERROR: {violation} ***")
        if output_msp is not None and location is not None:
            self._mark_error(output_msp, location, str(violation))

    def _mark_error(self, msp, pt: Vec2, description: str = "") -> None:
        layer = ERROR_LAYERS.get(self.name, DEFAULT_ERROR_LAYER)
        color = ERROR_COLORS.get(self.name, 1)
        location = (pt.x, pt.y, 0.0)
        marker = msp.add_point(location, dxfattribs={'layer': layer, 'color': color})
        try:
            marker.set_xdata(
                XDATA_APPID,
                [
                    (1000, f"ERR_{self.name.upper()}_{self.error_count:04d}"),
                    (1000, description or self.description),
                    (1010, location),
                ]
            )
        except Exception as e:
            log_warning(f"Could not set extended data on {self.name} marker: {e}")
