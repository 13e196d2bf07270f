# src/wellprod/summary/pool.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import numpy as np
import pandas as pd

from wellprod.enrich.metadata import LOCATION_VALUE_COLUMNS

RADIUS_SCALE = 1000.0

# summed column -> (source volume column, radius column, offset added to min/2 for absent radii)
# Oil gets +1 and the gases do not. Existing maps depend on it.
SUMMARY_FLUIDS: Dict[str, Tuple[str, str, float]] = {
    "oil_prod": ("oil", "rad_oil", 1.0),
    "gas_prod": ("gas", "rad_gas", 0.0),
    "lgas_prod": ("lpg", "rad_lgas", 0.0),
}

SUMMARY_COLUMNS: Tuple[str, ...] = (
    ("uwi", "year_min", "year_max", "n_years", "horizontal")
    + tuple(SUMMARY_FLUIDS.keys())
    + LOCATION_VALUE_COLUMNS
    + tuple(v[1] for v in SUMMARY_FLUIDS.values())
)

SEQYEAR_ORDERS = ("input", "year")


@dataclass
class SummaryStats:
    pattern: str = ""
    n_rows: int = 0
    n_wells: int = 0
    n_absent_radii: Dict[str, int] = field(default_factory=dict)
    n_nonfinite_radii: Dict[str, int] = field(default_factory=dict)
    degenerate_range: Dict[str, bool] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "pattern": self.pattern,
            "n_rows": int(self.n_rows),
            "n_wells": int(self.n_wells),
            "n_absent_radii": {k: int(v) for k, v in self.n_absent_radii.items()},
            "n_nonfinite_radii": {k: int(v) for k, v in self.n_nonfinite_radii.items()},
            "degenerate_range": {k: bool(v) for k, v in self.degenerate_range.items()},
        }


# =============================================================================
# Filter + sequence index
# =============================================================================

def filter_pool(enriched: pd.DataFrame, pattern: str) -> pd.DataFrame:
    """Rows whose pool name contains pattern (literal, case-sensitive, unanchored)."""
    if "pool_name" not in enriched.columns:
        raise ValueError("Expected column 'pool_name'")
    hit = enriched["pool_name"].astype("string").str.contains(str(pattern), case=True, regex=False)
    return enriched[hit.fillna(False).astype(bool).to_numpy()].reset_index(drop=True)


def add_seqyear(filtered: pd.DataFrame, *, order: str = "input") -> pd.DataFrame:
    """
    Number each well's rows 1..n as `seqyear`.

    order="input" numbers rows in their current order (year order is NOT
    implied). order="year" first sorts each well's rows by fluid_year (stable),
    keeping wells in first-appearance order.
    """
    if order not in SEQYEAR_ORDERS:
        raise ValueError(f"order must be one of {SEQYEAR_ORDERS}, got {order!r}")

    df = filtered
    if order == "year" and len(df):
        first_seen = df.groupby("uwi", sort=False, dropna=False).ngroup()
        df = (
            df.assign(_well_rank=first_seen.to_numpy())
            .sort_values(["_well_rank", "fluid_year"], kind="mergesort")
            .drop(columns=["_well_rank"])
            .reset_index(drop=True)
        )
    else:
        df = df.copy()

    df["seqyear"] = df.groupby("uwi", sort=False, dropna=False).cumcount() + 1
    return df


# =============================================================================
# Per-well summary + radii
# =============================================================================

def normalize_radius(
    values: pd.Series,
    *,
    absent_offset: float = 0.0,
    zero_range_value: Optional[float] = None,
) -> pd.Series:
    """
    Min-max scale to [0, RADIUS_SCALE].

    Absent radii (absent input, or 0/0) are replaced by
    min(non-absent radii) / 2 + absent_offset.

    A zero range (one well, or all wells equal) is not guarded by default: the
    division yields NaN for every well and no finite radius survives. Pass
    zero_range_value to give every non-absent value that radius instead.
    """
    v = pd.to_numeric(values, errors="coerce").astype("float64")
    vmin = v.min()
    vmax = v.max()
    if zero_range_value is not None and vmax == vmin:
        rad = pd.Series(np.where(v.notna(), float(zero_range_value), np.nan), index=v.index)
    else:
        with np.errstate(divide="ignore", invalid="ignore"):
            rad = (v - vmin) / (vmax - vmin) * RADIUS_SCALE
    fill = rad.min() / 2.0 + float(absent_offset)
    return rad.where(rad.notna(), fill)


def summarize_wells(filtered: pd.DataFrame, *, zero_range_value: Optional[float] = None) -> pd.DataFrame:
    """
    One row per uwi, in first-appearance order.

    Production sums ignore absent values; a well with no values at all for a
    fluid sums to absent rather than zero. Coordinates are the per-well minimum.
    """
    if filtered.empty:
        return pd.DataFrame(columns=list(SUMMARY_COLUMNS))

    g = filtered.groupby("uwi", sort=False)

    out = pd.DataFrame(
        {
            "year_min": g["fluid_year"].min(),
            "year_max": g["fluid_year"].max(),
            "n_years": g["fluid_year"].size(),
            "horizontal": g["horizontal"].agg(lambda s: bool(s.eq(True).any())),
        }
    )
    for col, (src, _, _) in SUMMARY_FLUIDS.items():
        out[col] = g[src].sum(min_count=1)
    for c in LOCATION_VALUE_COLUMNS:
        out[c] = g[c].min()

    for col, (_, rad_col, offset) in SUMMARY_FLUIDS.items():
        out[rad_col] = normalize_radius(out[col], absent_offset=offset, zero_range_value=zero_range_value)

    out = out.reset_index()
    return out.loc[:, list(SUMMARY_COLUMNS)]


def filter_and_summarize(
    enriched: pd.DataFrame,
    pattern: str,
    *,
    seqyear_order: str = "input",
    zero_range_value: Optional[float] = None,
) -> Tuple[pd.DataFrame, pd.DataFrame, SummaryStats]:
    filtered = add_seqyear(filter_pool(enriched, pattern), order=seqyear_order)
    summary = summarize_wells(filtered, zero_range_value=zero_range_value)

    stats = SummaryStats(pattern=str(pattern), n_rows=int(len(filtered)), n_wells=int(len(summary)))
    for col, (_, rad_col, _) in SUMMARY_FLUIDS.items():
        summed = summary[col]
        rad = summary[rad_col].to_numpy(dtype="float64")
        stats.n_absent_radii[rad_col] = int(summed.isna().sum())
        stats.n_nonfinite_radii[rad_col] = int((~np.isfinite(rad)).sum())
        stats.degenerate_range[rad_col] = bool(summed.notna().any() and summed.max() == summed.min())

    return filtered, summary, stats
