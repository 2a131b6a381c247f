from __future__ import annotations

from typing import Tuple

import numpy as np

from mandeljulia.colormaps import colorize
from mandeljulia.dynamics import Formula
from mandeljulia.escape import escape_time, view_arguments
from mandeljulia.renderers.base import GridRenderer, check_request
from mandeljulia.util.logging_setup import get_logger
from mandeljulia.viewport import Domain, pixel_to_plane

Point = Tuple[float, float]

class CpuGridRenderer(GridRenderer):
    """Single-threaded reference backend. Blocks for resolution**2 * max_iterations in the worst case."""

    name = "cpu"

    def escape_counts(
        self,
        *,
        domain: Domain,
        formula: Formula,
        fixed: Point,
        is_julia: bool,
        max_iterations: int,
        resolution: int,
    ) -> np.ndarray:
        check_request(resolution)
        logger = get_logger()
        counts = np.zeros((resolution, resolution), dtype=np.int32)
        for y in range(resolution):
            row = counts[y]
            for x in range(resolution):
                z0, c = view_arguments(pixel_to_plane((x, y), domain, resolution), fixed, is_julia)
                row[x] = escape_time(z0, c, formula, max_iterations)
            if y % 50 == 0:
                logger.debug("[cpu] Rendered row %s/%s", y, resolution)
        return counts

    def render(
        self,
        *,
        domain: Domain,
        formula: Formula,
        fixed: Point,
        is_julia: bool,
        max_iterations: int,
        resolution: int,
        table: np.ndarray,
    ) -> np.ndarray:
        check_request(resolution, table)
        counts = self.escape_counts(
            domain=domain, formula=formula, fixed=fixed, is_julia=is_julia,
            max_iterations=max_iterations, resolution=resolution,
        )
        return colorize(counts, table, max_iterations)
