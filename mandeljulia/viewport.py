from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

Point = Tuple[float, float]

@dataclass(frozen=True)
class Domain:
    """Visible rectangle of the complex plane: [re_min, re_max] x [im_min, im_max]."""

    re_min: float
    re_max: float
    im_min: float
    im_max: float

    def __post_init__(self) -> None:
        bounds = (self.re_min, self.re_max, self.im_min, self.im_max)
        if not all(math.isfinite(b) for b in bounds):
            raise ValueError(f"Domain bounds must be finite: {bounds}")
        if not (self.re_min < self.re_max and self.im_min < self.im_max):
            raise ValueError(f"Domain intervals must satisfy min < max: {bounds}")

    @classmethod
    def from_intervals(cls, intervals: Sequence[Sequence[float]]) -> "Domain":
        if len(intervals) != 2 or any(len(iv) != 2 for iv in intervals):
            raise ValueError("Domain must be [[re_min, re_max], [im_min, im_max]].")
        (re_min, re_max), (im_min, im_max) = intervals
        return cls(float(re_min), float(re_max), float(im_min), float(im_max))

    def as_intervals(self) -> list:
        return [[self.re_min, self.re_max], [self.im_min, self.im_max]]

    @property
    def width(self) -> float:
        return self.re_max - self.re_min

    @property
    def height(self) -> float:
        return self.im_max - self.im_min

    @property
    def center(self) -> Point:
        return ((self.re_min + self.re_max) / 2, (self.im_min + self.im_max) / 2)

DEFAULT_DOMAIN = Domain(-2.0, 2.0, -2.0, 2.0)

def _check_resolution(resolution: int) -> None:
    if resolution <= 0:
        raise ValueError("resolution must be > 0")

def pixel_to_plane(pixel: Point, domain: Domain, resolution: int) -> Point:
    # pixel row 0 is the top of the view, i.e. the maximum imaginary part
    _check_resolution(resolution)
    px, py = pixel
    re = px / resolution * domain.width + domain.re_min
    im = (1 - py / resolution) * domain.height + domain.im_min
    return (re, im)

def plane_to_pixel(point: Point, domain: Domain, resolution: int) -> Point:
    _check_resolution(resolution)
    re, im = point
    px = (re - domain.re_min) / domain.width * resolution
    py = (1 - (im - domain.im_min) / domain.height) * resolution
    return (px, py)

def pixel_in_bounds(pixel: Point, resolution: int) -> bool:
    px, py = pixel
    return 0 <= px < resolution and 0 <= py < resolution

def zoom(domain: Domain, factor: float, center: Point) -> Domain:
    """Scale the spans of ``domain`` by ``factor`` around ``center``.

    factor < 1 zooms in, factor > 1 zooms out. The span is not bounded below, so
    repeated zooming in eventually runs out of float64 precision.
    """
    if factor <= 0:
        raise ValueError("factor must be > 0")
    half_w = domain.width * factor / 2
    half_h = domain.height * factor / 2
    cx, cy = center
    return Domain(cx - half_w, cx + half_w, cy - half_h, cy + half_h)
