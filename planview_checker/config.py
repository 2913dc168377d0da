# Layer names for each violation type
ERROR_LAYERS = {
    "NonMonotonicArcLength": "ERROR_S_ORDER",
    "DiscontinuousReferenceLine": "ERROR_DISCONTINUITY",
    "LengthMismatch": "ERROR_LENGTH_MISMATCH",
}


# DXF colors for each violation type
ERROR_COLORS = {
    "NonMonotonicArcLength": 2,         # Yellow
    "DiscontinuousReferenceLine": 1,    # Red
    "LengthMismatch": 6,                # Magenta
}

# Default tolerances
THRESHOLDS = {
    "position_tolerance": 1e-6,         # in meters
    "heading_tolerance": 1e-6,          # in radians
    "length_tolerance": 1e-6,           # relative and absolute
    "spiral_rel_tolerance": 1e-9,       # quadrature target
    "spiral_min_subdivisions": 16,
    "spiral_max_subdivisions": 65536,   # hard cap, guarantees termination
}

# Order in which the plan view checks run
DEFAULT_CHECKS = ["arc_length", "continuity", "length"]

# Default DXF version for output files
DXF_VERSION = 'R2010'

# Default layer for fallback/general errors
DEFAULT_ERROR_LAYER = "PLANVIEW_ERRORS"

# Application id for the extended data attached to markers
XDATA_APPID = "PLANVIEW_CHECKER"
