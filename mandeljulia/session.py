"""Mutable explorer state, passed explicitly into every orchestration call."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

import numpy as np

from mandeljulia.colormaps import DEFAULT_TABLE_LENGTH, ColormapCache, get_colormap
from mandeljulia.dynamics import Formula, get_formula
from mandeljulia.escape import step_orbit
from mandeljulia.viewport import DEFAULT_DOMAIN, Domain, pixel_to_plane, plane_to_pixel, zoom

Point = Tuple[float, float]

MANDELBROT = "mandelbrot"
JULIA = "julia"
VIEWS = (MANDELBROT, JULIA)

def iterations_from_slider(position: int) -> int:
    """Map a slider position to an iteration cap.

    Positions 1-10 are linear, then each decade of positions steps by 10, 100
    and finally 1000 iterations.
    """
    if position < 1:
        raise ValueError("slider position must be >= 1")
    tier = min((position - 1) // 10, 3)
    return (position - 10 * tier) * 10 ** tier

def _check_view(view: str) -> str:
    if view not in VIEWS:
        raise ValueError(f"Unknown view: {view!r}. Expected one of {list(VIEWS)}")
    return view

def _default_domains() -> Dict[str, Domain]:
    return {view: DEFAULT_DOMAIN for view in VIEWS}

@dataclass
class Session:
    resolution: int = 400
    domains: Dict[str, Domain] = field(default_factory=_default_domains)
    z: Point = (0.0, 0.0)
    c: Point = (0.0, 0.0)
    formula: Formula = field(default_factory=lambda: get_formula("standard"))
    colormap: str = "dark_red"
    max_iterations: int = 100
    c_locked: bool = True
    table_length: int = DEFAULT_TABLE_LENGTH
    colormaps: ColormapCache = field(default_factory=ColormapCache, repr=False)

    def __post_init__(self) -> None:
        if self.resolution <= 0:
            raise ValueError("resolution must be > 0")
        self.formula = get_formula(self.formula)
        get_colormap(self.colormap)
        self.set_max_iterations(self.max_iterations)

    # -- views ---------------------------------------------------------------

    def is_julia(self, view: str) -> bool:
        return _check_view(view) == JULIA

    def fixed_point(self, view: str) -> Point:
        # only the Julia view holds its parameter fixed
        _check_view(view)
        return self.c

    def pointer(self, view: str) -> Point:
        return self.z if self.is_julia(view) else self.c

    def pointer_pixel(self, view: str) -> Point:
        return plane_to_pixel(self.pointer(view), self.domains[view], self.resolution)

    def plane_point(self, view: str, pixel: Point) -> Point:
        return pixel_to_plane(pixel, self.domains[_check_view(view)], self.resolution)

    def reset_view(self, view: str) -> None:
        self.domains[_check_view(view)] = DEFAULT_DOMAIN

    def reset(self) -> None:
        self.z = (0.0, 0.0)
        self.c = (0.0, 0.0)
        for view in VIEWS:
            self.reset_view(view)

    def zoom_view(self, view: str, factor: float) -> Domain:
        self.domains[view] = zoom(self.domains[_check_view(view)], factor, self.pointer(view))
        return self.domains[view]

    # -- pointers ------------------------------------------------------------

    def set_c(self, point: Point) -> None:
        self.c = (float(point[0]), float(point[1]))

    def set_z(self, point: Point) -> None:
        self.z = (float(point[0]), float(point[1]))

    def select_c(self, pixel: Point) -> Point:
        self.c_locked = True
        self.set_c(self.plane_point(MANDELBROT, pixel))
        return self.c

    def track_c(self, pixel: Point) -> bool:
        if self.c_locked:
            return False
        self.set_c(self.plane_point(MANDELBROT, pixel))
        return True

    def toggle_c_lock(self) -> bool:
        self.c_locked = not self.c_locked
        return self.c_locked

    def select_z(self, pixel: Point) -> Point:
        self.set_z(self.plane_point(JULIA, pixel))
        return self.z

    def step(self, steps: int = 1) -> Point:
        self.z = step_orbit(self.z, self.c, self.formula, steps)
        return self.z

    # -- selections ----------------------------------------------------------

    def set_formula(self, formula) -> None:
        self.formula = get_formula(formula)

    def set_colormap(self, name: str) -> None:
        get_colormap(name)
        self.colormap = name

    def set_max_iterations(self, max_iterations: int) -> None:
        if isinstance(max_iterations, bool) or int(max_iterations) != max_iterations or max_iterations <= 0:
            raise ValueError("max_iterations must be a positive integer")
        self.max_iterations = int(max_iterations)

    def lookup_table(self) -> np.ndarray:
        return self.colormaps.table_for(self.colormap, self.max_iterations, self.table_length)
