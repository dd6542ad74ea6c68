"""Mapping between integer grid coordinates and the complex plane.

A grid cell (gx, gy) maps to::

    re = (gx + offset_x - width / 2) / zoom
    im = (gy + offset_y - height / 2) / zoom

so ``zoom`` is grid cells per unit of the complex plane and the offset is
measured in grid cells.
"""

from dataclasses import dataclass, replace
import math
import numbers


@dataclass(frozen=True)
class Viewport:
    """Affine window onto the complex plane for a fixed-size sample grid."""
    zoom: float = 250.0
    offset_x: float = 0.0
    offset_y: float = 0.0
    width: int = 800
    height: int = 600

    def __post_init__(self):
        if not math.isfinite(self.zoom) or self.zoom <= 0:
            raise ValueError(f"zoom must be a positive finite number, got {self.zoom!r}")
        for size in (self.width, self.height):
            if isinstance(size, bool) or not isinstance(size, numbers.Integral) or size <= 0:
                raise ValueError(
                    f"grid dimensions must be positive integers, got {self.width!r}x{self.height!r}"
                )

    def to_complex(self, gx: float, gy: float) -> complex:
        """Complex value under grid coordinate (gx, gy)."""
        return complex(
            (gx + self.offset_x - self.width / 2) / self.zoom,
            (gy + self.offset_y - self.height / 2) / self.zoom,
        )

    def to_grid(self, z: complex) -> tuple[float, float]:
        """Grid coordinate of a complex value; inverse of :meth:`to_complex`.

        The result is fractional in general. Renderers use it to place the
        orbit path and the Julia marker over the field.
        """
        return (
            z.real * self.zoom - self.offset_x + self.width / 2,
            z.imag * self.zoom - self.offset_y + self.height / 2,
        )

    def contains(self, gx: float, gy: float) -> bool:
        return 0 <= gx < self.width and 0 <= gy < self.height

    def with_zoom(self, zoom: float) -> "Viewport":
        """Same offset and grid, different zoom."""
        return replace(self, zoom=zoom)

    def zoomed_about(self, gx: float, gy: float, new_zoom: float) -> "Viewport":
        """Change the zoom while keeping the point under (gx, gy) fixed.

        Args:
            gx, gy: Grid coordinate that stays anchored (e.g. the cursor).
            new_zoom: Zoom after the change, must be positive.

        Returns:
            A new viewport whose ``to_complex(gx, gy)`` equals this one's.
        """
        before = self.to_complex(gx, gy)
        zoomed = self.with_zoom(new_zoom)
        after = zoomed.to_complex(gx, gy)
        return replace(
            zoomed,
            offset_x=self.offset_x - (after.real - before.real) * new_zoom,
            offset_y=self.offset_y - (after.imag - before.imag) * new_zoom,
        )

    def zoomed_by(self, gx: float, gy: float, factor: float) -> "Viewport":
        """Multiply the zoom by ``factor`` about (gx, gy).

        A factor above 1 zooms in, below 1 zooms out.
        """
        if not math.isfinite(factor) or factor <= 0:
            raise ValueError(f"zoom factor must be a positive finite number, got {factor!r}")
        return self.zoomed_about(gx, gy, self.zoom * factor)

    def panned(self, dx: float, dy: float) -> "Viewport":
        """Drag the view by (dx, dy) grid cells; content follows the drag."""
        return replace(self, offset_x=self.offset_x - dx, offset_y=self.offset_y - dy)
