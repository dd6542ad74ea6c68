"""Run-wide engine settings."""

from dataclasses import dataclass

from .field import ESCAPE_RADIUS, check_positive_float, check_positive_int
from .formulas import get_formula
from .orbit import TOLERANCE
from .viewport import Viewport

# Defaults of the interactive explorer
WIDTH = 800
HEIGHT = 600
MAX_ITER = 100
MAX_ORBIT_STEPS = 1000
ZOOM = 250.0
ZOOM_FACTOR = 1.2


@dataclass(frozen=True)
class EngineConfig:
    """Constants fixed for one run. Validated on construction."""
    width: int = WIDTH
    height: int = HEIGHT
    max_iter: int = MAX_ITER
    max_orbit_steps: int = MAX_ORBIT_STEPS
    escape_radius: float = ESCAPE_RADIUS
    tolerance: float = TOLERANCE
    formula: int = 1
    zoom: float = ZOOM
    zoom_factor: float = ZOOM_FACTOR

    def __post_init__(self):
        check_positive_int("width", self.width)
        check_positive_int("height", self.height)
        check_positive_int("max_iter", self.max_iter)
        check_positive_int("max_orbit_steps", self.max_orbit_steps)
        check_positive_float("escape_radius", self.escape_radius)
        check_positive_float("tolerance", self.tolerance)
        check_positive_float("zoom", self.zoom)
        check_positive_float("zoom_factor", self.zoom_factor)
        get_formula(self.formula)

    def viewport(self, offset_x: float = 0.0, offset_y: float = 0.0) -> Viewport:
        """Initial viewport for this configuration's grid and zoom."""
        return Viewport(zoom=self.zoom, offset_x=offset_x, offset_y=offset_y,
                        width=self.width, height=self.height)

    def wheel_zoom(self, viewport: Viewport, gx: float, gy: float, notches: int) -> Viewport:
        """Apply ``notches`` mouse-wheel steps of ``zoom_factor`` about (gx, gy).

        Positive notches zoom in, negative zoom out.
        """
        if notches == 0:
            return viewport
        factor = self.zoom_factor if notches > 0 else 1 / self.zoom_factor
        for _ in range(abs(notches)):
            viewport = viewport.zoomed_by(gx, gy, factor)
        return viewport
