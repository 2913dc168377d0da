"""
Plan View Checker - reconstructs and validates road reference line geometry
"""

__version__ = "1.0.0"

from .config import THRESHOLDS, ERROR_LAYERS, ERROR_COLORS
from .main import main

__all__ = ["main", "ERROR_LAYERS", "ERROR_COLORS", "THRESHOLDS"]
