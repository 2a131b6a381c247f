"""Colormaps: normalised escape count t in [0, 1] -> RGB.

Every colormap is vectorised over NumPy arrays and returns uint8 channels.
Renderers never call them per pixel; they read a precomputed lookup table.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from mandeljulia.errors import UnknownColormap
from mandeljulia.util.logging_setup import get_logger

DEFAULT_TABLE_LENGTH = 1000
BLACK = (0, 0, 0)
# channels never drop below this, so escaped points stay distinct from BLACK
CHANNEL_FLOOR = 24

ColormapFn = Callable[[np.ndarray], np.ndarray]

def _as_t(t) -> np.ndarray:
    return np.clip(np.asarray(t, dtype=np.float64), 0.0, 1.0)

def _to_rgb(r, g, b) -> np.ndarray:
    rgb = np.stack([r, g, b], axis=-1)
    return np.clip(np.rint(rgb), CHANNEL_FLOOR, 255).astype(np.uint8)

def aqua(t) -> np.ndarray:
    i = _as_t(t)
    return _to_rgb(
        255 * np.sin(np.pi * i),
        255 * np.sin(np.pi * (i + 1 / 3)),
        255 * np.sin(np.pi * (i + 2 / 3)),
    )

def dark_red(t) -> np.ndarray:
    return aqua(1.0 - _as_t(t))

def viridis(t) -> np.ndarray:
    i = _as_t(t)
    return _to_rgb(
        255 * np.power(np.sin(np.pi * i / 2), 1.5),
        255 * np.sqrt(i),
        255 * np.cos(np.pi * i / 2),
    )

def rainbow(t) -> np.ndarray:
    # contrast stretch t ** 0.7, then three phase-shifted sines
    arg = 6.0 * np.pi * np.power(_as_t(t), 0.7)
    return _to_rgb(
        255 * (0.5 + 0.5 * np.sin(arg)),
        255 * (0.5 + 0.5 * np.sin(arg + 2.0 * np.pi / 3.0)),
        255 * (0.5 + 0.5 * np.sin(arg + 4.0 * np.pi / 3.0)),
    )

COLORMAPS: Dict[str, ColormapFn] = {
    "aqua": aqua,
    "dark_red": dark_red,
    "viridis": viridis,
    "rainbow": rainbow,
}

def colormap_names() -> List[str]:
    return list(COLORMAPS)

def get_colormap(name: str) -> ColormapFn:
    try:
        return COLORMAPS[name]
    except (KeyError, TypeError):
        raise UnknownColormap(f"Unknown colormap: {name!r}. Expected one of {colormap_names()}") from None

def build_lookup_table(name: str, length: int = DEFAULT_TABLE_LENGTH) -> np.ndarray:
    if length < 2:
        raise ValueError("table length must be >= 2")
    fn = get_colormap(name)
    table = fn(np.linspace(0.0, 1.0, int(length)))
    table.setflags(write=False)
    return table

def table_index(iterations: int, max_iterations: int, length: int) -> int:
    idx = int(round(iterations / max(max_iterations, 1) * (length - 1)))
    return min(max(idx, 0), length - 1)

def lookup_color(table: np.ndarray, iterations: int, max_iterations: int) -> Tuple[int, int, int]:
    if iterations == 0:
        return BLACK
    r, g, b = table[table_index(iterations, max_iterations, len(table))]
    return (int(r), int(g), int(b))

def colorize(counts: np.ndarray, table: np.ndarray, max_iterations: int) -> np.ndarray:
    """Map an escape-count grid to RGBA; 0 (did not escape) is opaque black."""
    length = len(table)
    idx = np.rint(counts.astype(np.float64) / max(max_iterations, 1) * (length - 1))
    idx = np.clip(idx, 0, length - 1).astype(np.intp)
    out = np.empty(counts.shape + (4,), dtype=np.uint8)
    out[..., :3] = table[idx]
    out[..., :3][counts == 0] = 0
    out[..., 3] = 255
    return out

class ColormapCache:
    """Holds the active lookup table.

    A change of colormap, iteration cap or length builds a new array and swaps
    the reference; a table handed out earlier is never modified.
    """

    def __init__(self) -> None:
        self._key: Optional[Tuple[str, int, int]] = None
        self._table: Optional[np.ndarray] = None

    def table_for(self, name: str, max_iterations: int, length: int = DEFAULT_TABLE_LENGTH) -> np.ndarray:
        key = (name, int(max_iterations), int(length))
        if self._table is None or key != self._key:
            table = build_lookup_table(name, length)
            self._table, self._key = table, key
            get_logger().debug("Rebuilt colormap table name=%s cap=%s length=%s", name, max_iterations, length)
        return self._table

    def invalidate(self) -> None:
        self._key = None
        self._table = None
