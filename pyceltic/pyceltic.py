"""Pure Python escape-time field evaluator.

Cells are evaluated one at a time with Python ``complex`` arithmetic. Rows
can be spread over a process pool; each row is computed independently and
written back at its own index, so the pooled result equals the sequential one.
"""

from concurrent.futures import ProcessPoolExecutor
import time
from typing import List, Optional

import numpy as np
from loguru import logger

from .field import (
    ESCAPE_RADIUS,
    FractalField,
    check_field_args,
    check_positive_int,
    seed_and_constant,
)
from .formulas import ScalarFormula, get_formula, norm_sq
from .viewport import Viewport


def escape_count(z: complex, c: complex, func: ScalarFormula, max_iter: int,
                 escape_radius: float = ESCAPE_RADIUS) -> int:
    """Iterate ``z = func(z, c)`` until it leaves the escape disc.

    Returns the 0-based index of the iteration whose result first exceeded
    ``escape_radius``, or ``max_iter`` if none did. The initial ``z`` is not
    tested. A NaN or infinite magnitude counts as escaped.
    """
    radius_sq = escape_radius * escape_radius
    for i in range(max_iter):
        z = func(z, c)
        if not norm_sq(z) <= radius_sq:
            return i
    return max_iter


def _compute_row(viewport: Viewport, gy: int, mode: str, julia_c: Optional[complex],
                 formula: int, max_iter: int, escape_radius: float) -> List[int]:
    func = get_formula(formula).func
    row = []
    for gx in range(viewport.width):
        z, c = seed_and_constant(viewport.to_complex(gx, gy), mode, julia_c)
        row.append(escape_count(z, c, func, max_iter, escape_radius))
    return row


def compute_field(viewport: Viewport, mode: str, julia_c: Optional[complex],
                  formula: int, max_iter: int,
                  escape_radius: float = ESCAPE_RADIUS,
                  workers: int = 1) -> FractalField:
    """Evaluate the escape count of every grid cell.

    Args:
        viewport: Grid size and mapping to the complex plane.
        mode: ``SELF_MAP`` or ``JULIA``.
        julia_c: Constant term in julia mode, ignored otherwise.
        formula: Formula number, 1-4.
        max_iter: Iteration bound; also the value of non-escaping cells.
        escape_radius: Magnitude beyond which an iterate has escaped.
        workers: Number of processes; 1 runs in the calling process.

    Returns:
        A new FractalField of shape (viewport.height, viewport.width).
    """
    formula_info = check_field_args(viewport, mode, julia_c, formula, max_iter, escape_radius)
    check_positive_int("workers", workers)
    if julia_c is not None:
        julia_c = complex(julia_c)

    logger.debug(
        f"Computing {viewport.width}x{viewport.height} field: formula {formula_info.number} "
        f"({formula_info.name}), mode={mode}, imax={max_iter}, workers={workers}"
    )
    t0 = time.perf_counter()

    counts = np.empty((viewport.height, viewport.width), dtype=np.int64)
    args = (mode, julia_c, formula_info.number, max_iter, escape_radius)
    if workers == 1:
        for gy in range(viewport.height):
            counts[gy] = _compute_row(viewport, gy, *args)
    else:
        rows = range(viewport.height)
        with ProcessPoolExecutor(max_workers=workers) as pool:
            futures = {
                gy: pool.submit(_compute_row, viewport, gy, *args) for gy in rows
            }
            for gy, future in futures.items():
                counts[gy] = future.result()

    logger.debug(f"Field done in {(time.perf_counter() - t0) * 1000:.1f}ms")
    return FractalField(counts=counts, max_iter=max_iter)
