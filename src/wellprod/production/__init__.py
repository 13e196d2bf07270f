# src/wellprod/production/__init__.py
from __future__ import annotations

from .fluids import FLUID_ORDER, FLUID_VOLUME_COLUMNS, FluidCategory, category_for_code
from .unpivot import UnpivotStats, unpivot_frame, unpivot_mapping, unpivot_row

__all__ = [
    "FLUID_ORDER",
    "FLUID_VOLUME_COLUMNS",
    "FluidCategory",
    "category_for_code",
    "UnpivotStats",
    "unpivot_frame",
    "unpivot_mapping",
    "unpivot_row",
]
