"""Escape-time fields and orbit periods of rectified quadratic maps."""

from .config import EngineConfig
from .field import JULIA, SELF_MAP, FractalField
from .formulas import FORMULAS, Formula, evaluate, get_formula
from .orbit import (
    ESCAPED,
    EXHAUSTED,
    PERIOD_FOUND,
    GridRecurrenceDetector,
    LinearRecurrenceDetector,
    Orbit,
    orbit_at,
    trace_orbit,
)
from .pyceltic import compute_field
from .viewport import Viewport

__all__ = [
    "EngineConfig",
    "ESCAPED",
    "EXHAUSTED",
    "FORMULAS",
    "Formula",
    "FractalField",
    "GridRecurrenceDetector",
    "JULIA",
    "LinearRecurrenceDetector",
    "Orbit",
    "PERIOD_FOUND",
    "SELF_MAP",
    "Viewport",
    "compute_field",
    "evaluate",
    "get_formula",
    "orbit_at",
    "trace_orbit",
]
