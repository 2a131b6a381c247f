"""Fractal formulas as pure functions over (re, im) pairs.

The scalar helpers ``iterate_xy`` and ``divergence_xy`` take the integer
formula tag instead of a callable so the CUDA backend can compile them as
device functions unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Tuple, Union

from mandeljulia.errors import UnknownFormula

Point = Tuple[float, float]

STANDARD = 0
HYPERBOLIC = 1
CUBIC = 2
QUARTIC = 3
BURNING_SHIP = 4
TRICORN = 5

class FormulaId(IntEnum):
    STANDARD = STANDARD
    HYPERBOLIC = HYPERBOLIC
    CUBIC = CUBIC
    QUARTIC = QUARTIC
    BURNING_SHIP = BURNING_SHIP
    TRICORN = TRICORN

def iterate_xy(fid, x, y, cx, cy):
    if fid == HYPERBOLIC:
        return x * x + y * y + cx, 2.0 * x * y - cy
    elif fid == CUBIC:
        return x * x * x - 3.0 * x * y * y + cx, 3.0 * x * x * y - y * y * y + cy
    elif fid == QUARTIC:
        x2 = x * x
        y2 = y * y
        return x2 * x2 - 6.0 * x2 * y2 + y2 * y2 + cx, 4.0 * x2 * x * y - 4.0 * x * y2 * y + cy
    elif fid == BURNING_SHIP:
        return x * x - y * y + cx, abs(2.0 * x * y) + cy
    elif fid == TRICORN:
        return x * x - y * y + cx, -2.0 * x * y + cy
    return x * x - y * y + cx, 2.0 * x * y + cy

def divergence_xy(fid, x, y):
    # signed quadratic form for the conjugate-style maps; compared by absolute value
    if fid == HYPERBOLIC or fid == TRICORN:
        return x * x - y * y
    return x * x + y * y

_ESCAPE_RADII = {
    FormulaId.STANDARD: 2.0,
    FormulaId.HYPERBOLIC: 10.0,
    FormulaId.CUBIC: 2.0,
    FormulaId.QUARTIC: 2.0,
    FormulaId.BURNING_SHIP: 2.0,
    FormulaId.TRICORN: 2.0,
}

@dataclass(frozen=True)
class Formula:
    id: FormulaId
    escape_radius: float

    @property
    def name(self) -> str:
        return self.id.name.lower()

    @property
    def escape_radius_sq(self) -> float:
        return self.escape_radius * self.escape_radius

    def iterate(self, z: Point, c: Point) -> Point:
        return iterate_xy(int(self.id), z[0], z[1], c[0], c[1])

    def divergence_measure(self, z: Point) -> float:
        return divergence_xy(int(self.id), z[0], z[1])

FORMULAS: Dict[FormulaId, Formula] = {fid: Formula(fid, radius) for fid, radius in _ESCAPE_RADII.items()}

def formula_names() -> List[str]:
    return [fid.name.lower() for fid in FormulaId]

def get_formula(formula: Union[Formula, FormulaId, int, str]) -> Formula:
    if isinstance(formula, Formula):
        return formula
    if isinstance(formula, str):
        try:
            return FORMULAS[FormulaId[formula.strip().upper()]]
        except KeyError:
            raise UnknownFormula(f"Unknown formula: {formula!r}. Expected one of {formula_names()}") from None
    if isinstance(formula, bool) or not isinstance(formula, int):
        raise UnknownFormula(f"Unknown formula: {formula!r}")
    try:
        return FORMULAS[FormulaId(formula)]
    except ValueError:
        raise UnknownFormula(f"Unknown formula id: {formula!r}") from None
