from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Tuple

import numpy as np
from PIL import Image

from mandeljulia.dynamics import Formula
from mandeljulia.viewport import Domain

Point = Tuple[float, float]

class GridRenderer(ABC):
    """Evaluates a square viewport into escape counts and RGBA pixels.

    Pixel (0, 0) is the top-left corner of the domain (maximum imaginary part).
    ``fixed`` is the parameter c for the Julia view; it is ignored for the
    Mandelbrot view, where every orbit starts at the origin.
    """

    name = "base"

    @abstractmethod
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
        """Return an int32 (resolution, resolution) grid of escape steps (0 = bounded)."""

    @abstractmethod
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
        """Return a uint8 (resolution, resolution, 4) RGBA grid, alpha fixed at 255."""

def check_request(resolution: int, table: Optional[np.ndarray] = None) -> None:
    if resolution <= 0:
        raise ValueError("resolution must be > 0")
    if table is not None and (table.ndim != 2 or table.shape[1] != 3 or len(table) < 2):
        raise ValueError("colormap table must have shape (n >= 2, 3)")

def to_image(grid: np.ndarray) -> Image.Image:
    return Image.fromarray(np.ascontiguousarray(grid), mode="RGBA")
