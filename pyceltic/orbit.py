"""Orbit tracing and first-recurrence period detection.

An orbit is the sequence ``z1 = f(seed, c), z2 = f(z1, c), ...``. Tracing
stops at the first of:

* a point within ``tolerance`` of an earlier point (``PERIOD_FOUND``),
* a point outside the escape disc (``ESCAPED``),
* ``max_orbit_steps`` points without either (``EXHAUSTED``).

The recurrence test runs before the escape test on each step. The reported
period is the 0-based step at which the recurrence was seen, i.e. how many
iterations it took to come back near an earlier state. It is not the minimal
algebraic period of the cycle.
"""

from dataclasses import dataclass
import math
from typing import Dict, List, Optional, Tuple

from loguru import logger

from .field import (
    ESCAPE_RADIUS,
    check_mode,
    check_positive_float,
    check_positive_int,
    seed_and_constant,
)
from .formulas import get_formula, norm_sq
from .viewport import Viewport

# Orbit classifications
ESCAPED = "escaped"
PERIOD_FOUND = "period_found"
EXHAUSTED = "exhausted"

TOLERANCE = 1e-4


@dataclass(frozen=True)
class Orbit:
    """Visited points of one trace and how the trace ended."""
    points: Tuple[complex, ...]
    status: str
    steps: int

    @property
    def period(self) -> Optional[int]:
        """First-recurrence index, or None if the orbit did not recur."""
        return self.steps if self.status == PERIOD_FOUND else None

    @property
    def visited(self) -> int:
        """Number of points generated, including the terminating one."""
        return len(self.points)

    @property
    def escaped(self) -> bool:
        return self.status == ESCAPED

    def __len__(self):
        return len(self.points)


# =============================================================================
# Recurrence detectors
# =============================================================================

class LinearRecurrenceDetector:
    """Compares each new point against every earlier one.

    Quadratic in the orbit length, which is fine for the few hundred to few
    thousand steps a trace is bounded by.
    """

    def __init__(self, tolerance: float = TOLERANCE):
        self.tolerance = tolerance
        self._points: List[complex] = []

    def reset(self):
        self._points = []

    def add(self, z: complex) -> bool:
        """Record ``z``; True if it lies within tolerance of an earlier point."""
        tolerance_sq = self.tolerance * self.tolerance
        found = any(norm_sq(z - p) < tolerance_sq for p in self._points)
        self._points.append(z)
        return found


class GridRecurrenceDetector:
    """Spatial hash with cells two tolerances wide.

    Any earlier point closer than the tolerance lies in the same or an
    adjacent cell, even after rounding of the cell index. Checking the 3x3
    neighbourhood with the same strict distance test therefore gives the
    same answers as the linear scan.
    """

    def __init__(self, tolerance: float = TOLERANCE):
        self.tolerance = tolerance
        self._cells: Dict[Tuple[int, int], List[complex]] = {}

    def reset(self):
        self._cells = {}

    def _key(self, z: complex) -> Optional[Tuple[int, int]]:
        size = 2 * self.tolerance
        qx, qy = z.real / size, z.imag / size
        if not (math.isfinite(qx) and math.isfinite(qy)):
            return None
        return math.floor(qx), math.floor(qy)

    def add(self, z: complex) -> bool:
        key = self._key(z)
        # Non-finite points are never within tolerance of anything
        if key is None:
            return False
        kx, ky = key
        tolerance_sq = self.tolerance * self.tolerance
        found = False
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                bucket = self._cells.get((kx + dx, ky + dy))
                if bucket and any(norm_sq(z - p) < tolerance_sq for p in bucket):
                    found = True
                    break
            if found:
                break
        self._cells.setdefault(key, []).append(z)
        return found


# =============================================================================
# Tracing
# =============================================================================

def trace_orbit(seed: complex, c: complex, formula: int, max_orbit_steps: int,
                escape_radius: float = ESCAPE_RADIUS,
                tolerance: float = TOLERANCE,
                detector=None) -> Orbit:
    """Iterate ``formula`` from ``seed`` and classify the resulting orbit.

    Args:
        seed: Starting value; it is not itself part of the orbit.
        c: Constant term passed to every application of the formula.
        formula: Formula number, 1-4.
        max_orbit_steps: Maximum number of points to generate.
        escape_radius: Magnitude beyond which the orbit has escaped.
        tolerance: Distance below which two points count as the same state.
        detector: Recurrence detector with ``reset()`` and ``add(z)``.
            Defaults to a fresh LinearRecurrenceDetector. A supplied
            detector is reset and keeps its own tolerance.

    Returns:
        An Orbit. ``steps`` is the step index of the terminating point for
        ESCAPED and PERIOD_FOUND (so ``len(points) == steps + 1``) and
        ``max_orbit_steps`` for EXHAUSTED.
    """
    func = get_formula(formula).func
    check_positive_int("max_orbit_steps", max_orbit_steps)
    check_positive_float("escape_radius", escape_radius)
    check_positive_float("tolerance", tolerance)
    if detector is None:
        detector = LinearRecurrenceDetector(tolerance)
    else:
        detector.reset()

    radius_sq = escape_radius * escape_radius
    z = complex(seed)
    c = complex(c)
    points = []
    status = EXHAUSTED
    steps = max_orbit_steps
    for step in range(max_orbit_steps):
        z = func(z, c)
        points.append(z)
        if detector.add(z):
            status, steps = PERIOD_FOUND, step
            break
        if not norm_sq(z) <= radius_sq:
            status, steps = ESCAPED, step
            break

    logger.debug(f"Orbit from {seed} (c={c}, formula {formula}): {status} at step {steps}")
    return Orbit(points=tuple(points), status=status, steps=steps)


def orbit_at(viewport: Viewport, gx: float, gy: float, mode: str,
             julia_c: Optional[complex], formula: int, max_orbit_steps: int,
             escape_radius: float = ESCAPE_RADIUS,
             tolerance: float = TOLERANCE,
             detector=None) -> Orbit:
    """Trace the orbit of grid cell (gx, gy), seeded the way the field is."""
    check_mode(mode, julia_c)
    seed, c = seed_and_constant(viewport.to_complex(gx, gy), mode, julia_c)
    return trace_orbit(seed, c, formula, max_orbit_steps,
                       escape_radius=escape_radius, tolerance=tolerance,
                       detector=detector)
