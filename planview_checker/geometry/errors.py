"""Validation outcomes of a plan view. Raised by ``assemble``, collected by ``validate``."""

from typing import Optional


class PlanViewValidationError(ValueError):
    """Base class; ``index`` is the first offending geometry record, if any."""

    kind = "PlanViewValidationError"

    def __init__(self, message: str, index: Optional[int] = None):
        super().__init__(message)
        self.index = index

    def as_dict(self) -> dict:
        return {"kind": self.kind, "index": self.index, "message": str(self)}


class NonMonotonicArcLength(PlanViewValidationError):
    kind = "NonMonotonicArcLength"

    def __init__(self, index: int, s_previous: float, s_current: float):
        super().__init__(
            f"s values in geometry not monotonic at index {index}: "
            f"{s_current} follows {s_previous}",
            index,
        )
        self.s_previous = s_previous
        self.s_current = s_current


class DiscontinuousReferenceLine(PlanViewValidationError):
    kind = "DiscontinuousReferenceLine"

    def __init__(self, index: int, position_gap: float, heading_gap: float):
        super().__init__(
            f"geometry {index} does not start where geometry {index - 1} ends: "
            f"position gap {position_gap:.9g} m, heading gap {heading_gap:.9g} rad",
            index,
        )
        self.position_gap = position_gap
        self.heading_gap = heading_gap

    def as_dict(self) -> dict:
        return {**super().as_dict(), "position_gap": self.position_gap, "heading_gap": self.heading_gap}


class LengthMismatch(PlanViewValidationError):
    kind = "LengthMismatch"

    def __init__(self, declared: float, computed: float):
        super().__init__(
            f"declared road length {declared} differs from the sum of geometry lengths {computed}",
        )
        self.declared = declared
        self.computed = computed

    def as_dict(self) -> dict:
        return {**super().as_dict(), "declared": self.declared, "computed": self.computed}
