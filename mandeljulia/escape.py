from __future__ import annotations

from typing import List, Tuple

from mandeljulia.dynamics import Formula, divergence_xy, iterate_xy

Point = Tuple[float, float]

ORIGIN: Point = (0.0, 0.0)

def escape_time(z0: Point, c: Point, formula: Formula, max_iterations: int) -> int:
    """Return the step at which the orbit of ``z0`` under ``formula`` escapes, or 0.

    0 means the point stayed bounded within the budget (or the budget was < 2).
    Non-finite inputs give an undefined answer; callers must not pass them.
    """
    fid = int(formula.id)
    limit = formula.escape_radius_sq
    x, y = z0
    cx, cy = c
    n = 1
    while n < max_iterations:
        if abs(divergence_xy(fid, x, y)) >= limit:
            return n
        x, y = iterate_xy(fid, x, y, cx, cy)
        n += 1
    return 0

def view_arguments(point: Point, fixed: Point, is_julia: bool) -> Tuple[Point, Point]:
    """Return ``(z0, c)`` for a plane point of the Mandelbrot or Julia view."""
    if is_julia:
        return point, fixed
    return ORIGIN, point

def step_orbit(z: Point, c: Point, formula: Formula, steps: int = 1) -> Point:
    if steps < 0:
        raise ValueError("steps must be >= 0")
    for _ in range(steps):
        z = formula.iterate(z, c)
    return z

def orbit(z: Point, c: Point, formula: Formula, steps: int) -> List[Point]:
    if steps < 0:
        raise ValueError("steps must be >= 0")
    points = [z]
    for _ in range(steps):
        z = formula.iterate(z, c)
        points.append(z)
    return points
