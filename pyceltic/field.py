"""Shared types for the escape-time field evaluators."""

from dataclasses import dataclass
import math
from typing import Optional, Tuple

import numpy as np

from .formulas import Formula, get_formula
from .viewport import Viewport

# Iteration modes
SELF_MAP = "self_map"
JULIA = "julia"

MODES = (SELF_MAP, JULIA)

ESCAPE_RADIUS = 2.0


@dataclass(frozen=True, eq=False)
class FractalField:
    """Per-cell escape counts for one evaluation of the whole grid.

    ``counts[gy, gx]`` is the 0-based index of the iteration at which the
    cell escaped, or ``max_iter`` if it never did.
    """
    counts: np.ndarray
    max_iter: int

    def __post_init__(self):
        # Read-only view; the caller's array keeps its own flags
        counts = self.counts.view()
        counts.setflags(write=False)
        object.__setattr__(self, "counts", counts)

    @property
    def width(self) -> int:
        return self.counts.shape[1]

    @property
    def height(self) -> int:
        return self.counts.shape[0]

    def escaped(self) -> np.ndarray:
        """Boolean mask of the cells that escaped within ``max_iter``."""
        return self.counts < self.max_iter

    def __eq__(self, other):
        if not isinstance(other, FractalField):
            return NotImplemented
        return self.max_iter == other.max_iter and np.array_equal(self.counts, other.counts)


def seed_and_constant(c_screen: complex, mode: str,
                      julia_c: Optional[complex]) -> Tuple[complex, complex]:
    """Initial value and constant term for a cell's parameter."""
    if mode == JULIA:
        return c_screen, julia_c
    return c_screen, c_screen


def check_mode(mode: str, julia_c: Optional[complex]) -> None:
    if mode not in MODES:
        raise ValueError(f"Unknown mode: {mode!r} (expected one of {', '.join(MODES)})")
    if mode == JULIA and julia_c is None:
        raise ValueError("julia_c is required in julia mode")


def check_positive_int(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")


def check_positive_float(name: str, value: float) -> None:
    if not isinstance(value, (int, float)) or not math.isfinite(value) or value <= 0:
        raise ValueError(f"{name} must be a positive finite number, got {value!r}")


def check_field_args(viewport: Viewport, mode: str, julia_c: Optional[complex],
                     formula: int, max_iter: int, escape_radius: float) -> Formula:
    """Validate the inputs of ``compute_field`` and resolve the formula."""
    if not isinstance(viewport, Viewport):
        raise ValueError(f"viewport must be a Viewport, got {type(viewport).__name__}")
    check_mode(mode, julia_c)
    check_positive_int("max_iter", max_iter)
    check_positive_float("escape_radius", escape_radius)
    return get_formula(formula)
