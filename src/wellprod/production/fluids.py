# src/wellprod/production/fluids.py
from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Tuple


class FluidCategory(Enum):
    """Fluid types reported in the history extract, bound to their fluid code."""

    GAS = 2
    WATER = 6
    LIQUID_PETROLEUM_GAS = 16
    OIL = 51
    PROPANE = 53
    BUTANE = 54

    @property
    def code(self) -> int:
        return int(self.value)

    @property
    def column(self) -> str:
        return FLUID_COLUMNS[self]


# Enum iteration order is declaration order; unpivot relies on it.
FLUID_ORDER: Tuple[FluidCategory, ...] = tuple(FluidCategory)

FLUID_COLUMNS: Dict[FluidCategory, str] = {
    FluidCategory.GAS: "gas",
    FluidCategory.WATER: "water",
    FluidCategory.LIQUID_PETROLEUM_GAS: "lpg",
    FluidCategory.OIL: "oil",
    FluidCategory.PROPANE: "propane",
    FluidCategory.BUTANE: "butane",
}

FLUID_VOLUME_COLUMNS: Tuple[str, ...] = tuple(FLUID_COLUMNS[f] for f in FLUID_ORDER)

_BY_CODE: Dict[int, FluidCategory] = {f.code: f for f in FLUID_ORDER}


def category_for_code(code: object) -> Optional[FluidCategory]:
    """
    Return the category for a fluid code, or None for unmapped/absent codes.
    Accepts ints, floats with integral value, and numeric strings.
    """
    if code is None:
        return None
    try:
        f = float(code)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if f != f or not f.is_integer():
        return None
    return _BY_CODE.get(int(f))
