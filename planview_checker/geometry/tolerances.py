from dataclasses import dataclass

from planview_checker import config


@dataclass
class ValidationTolerances:
    # continuity (C0) between consecutive geometries
    position_tolerance: float = config.THRESHOLDS["position_tolerance"]    # m
    heading_tolerance: float = config.THRESHOLDS["heading_tolerance"]      # rad

    # road length accounting, relative and absolute
    length_tolerance: float = config.THRESHOLDS["length_tolerance"]

    # spiral / poly3 quadrature
    integration_rel_tolerance: float = config.THRESHOLDS["spiral_rel_tolerance"]
    integration_min_subdivisions: int = config.THRESHOLDS["spiral_min_subdivisions"]
    integration_max_subdivisions: int = config.THRESHOLDS["spiral_max_subdivisions"]

    def __post_init__(self):
        for name in ("position_tolerance", "heading_tolerance", "length_tolerance",
                     "integration_rel_tolerance"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")
        if self.integration_max_subdivisions < 2:
            raise ValueError("integration_max_subdivisions must be >= 2")
