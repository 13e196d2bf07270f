# src/wellprod/production/unpivot.py
from __future__ import annotations

from dataclasses import dataclass, field
from functools import reduce
from itertools import product
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from wellprod.production.fluids import FLUID_ORDER, FluidCategory, category_for_code


def _to_volume(v: Any) -> Optional[float]:
    if v is None:
        return None
    try:
        x = float(v)
    except (TypeError, ValueError):
        return None
    if x != x:  # NaN
        return None
    return x


# =============================================================================
# Row-wise fold
# =============================================================================

def unpivot_row(
    codes: Sequence[Any],
    volumes: Sequence[Any],
) -> Dict[FluidCategory, Optional[float]]:
    """
    Collapse one row's (code, volume) slot pairs into the six fluid categories.

    Slots are visited in column order and, within a slot, categories in
    declaration order. A matching slot overwrites the category's value, so when
    two slots carry the same code the later slot wins (no summation). Unmapped
    or absent codes contribute nothing. The result always has six keys; a
    category with no matching slot maps to None.
    """
    if len(codes) != len(volumes):
        raise ValueError(f"codes/volumes length mismatch: {len(codes)} != {len(volumes)}")

    slots = list(zip(codes, volumes))

    def step(acc: Tuple[Optional[float], ...], item) -> Tuple[Optional[float], ...]:
        (code, volume), cat = item
        if category_for_code(code) is not cat:
            return acc
        i = FLUID_ORDER.index(cat)
        return acc[:i] + (_to_volume(volume),) + acc[i + 1:]

    start: Tuple[Optional[float], ...] = (None,) * len(FLUID_ORDER)
    final = reduce(step, product(slots, FLUID_ORDER), start)
    return dict(zip(FLUID_ORDER, final))


def unpivot_mapping(row: Mapping[str, Any], slot_columns: Sequence[Tuple[str, str]]) -> Dict[FluidCategory, Optional[float]]:
    """unpivot_row over a dict-like row, given (code column, volume column) names."""
    codes = [row.get(c) for c, _ in slot_columns]
    volumes = [row.get(v) for _, v in slot_columns]
    return unpivot_row(codes, volumes)


# =============================================================================
# Columnar
# =============================================================================

@dataclass
class UnpivotStats:
    n_rows: int = 0
    n_slots_used: int = 0
    n_unmapped_slots: int = 0
    n_overwritten: int = 0
    unmapped_codes: Dict[int, int] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "n_rows": int(self.n_rows),
            "n_slots_used": int(self.n_slots_used),
            "n_unmapped_slots": int(self.n_unmapped_slots),
            "n_overwritten": int(self.n_overwritten),
            "unmapped_codes": {str(k): int(v) for k, v in sorted(self.unmapped_codes.items())},
        }


def unpivot_frame(
    df: pd.DataFrame,
    slot_columns: Sequence[Tuple[str, str]],
) -> Tuple[pd.DataFrame, UnpivotStats]:
    """
    Columnar unpivot with the same semantics as unpivot_row.

    Returns a frame (same index as df) with one float column per fluid category,
    named by FluidCategory.column, NaN where absent.
    """
    missing = [c for pair in slot_columns for c in pair if c not in df.columns]
    if missing:
        raise ValueError(f"Missing slot columns: {missing}")

    n = int(len(df))
    out: Dict[FluidCategory, np.ndarray] = {f: np.full(n, np.nan, dtype="float64") for f in FLUID_ORDER}
    seen: Dict[FluidCategory, np.ndarray] = {f: np.zeros(n, dtype=bool) for f in FLUID_ORDER}

    stats = UnpivotStats(n_rows=n)
    known = np.asarray([f.code for f in FLUID_ORDER], dtype="float64")

    for code_col, vol_col in slot_columns:
        codes = pd.to_numeric(df[code_col], errors="coerce").astype("float64").to_numpy()
        vols = pd.to_numeric(df[vol_col], errors="coerce").astype("float64").to_numpy()

        used = np.isfinite(codes)
        unmapped = used & ~np.isin(codes, known)
        stats.n_slots_used += int(used.sum())
        stats.n_unmapped_slots += int(unmapped.sum())
        if unmapped.any():
            vals, counts = np.unique(codes[unmapped], return_counts=True)
            for v, c in zip(vals.tolist(), counts.tolist()):
                key = int(v) if float(v).is_integer() else v
                stats.unmapped_codes[key] = stats.unmapped_codes.get(key, 0) + int(c)

        for cat in FLUID_ORDER:
            hit = codes == float(cat.code)
            if not hit.any():
                continue
            stats.n_overwritten += int((hit & seen[cat]).sum())
            out[cat] = np.where(hit, vols, out[cat])
            seen[cat] |= hit

    frame = pd.DataFrame({cat.column: out[cat] for cat in FLUID_ORDER}, index=df.index)
    return frame, stats
