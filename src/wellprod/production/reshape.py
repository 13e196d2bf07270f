# src/wellprod/production/reshape.py
from __future__ import annotations

from typing import List, Tuple

import pandas as pd

from wellprod.enrich.joins import JoinStats, left_join_counted
from wellprod.production.fluids import FLUID_VOLUME_COLUMNS
from wellprod.production.unpivot import UnpivotStats, unpivot_frame
from wellprod.specs.layouts import HISTORY_LAYOUT, PositionalLayout

PRODUCTION_KEY_COLUMNS: Tuple[str, ...] = ("well_identifier", "fluid_year")
PRODUCTION_COLUMNS: Tuple[str, ...] = PRODUCTION_KEY_COLUMNS + FLUID_VOLUME_COLUMNS
CONTROL_ATTR_COLUMNS: Tuple[str, ...] = ("well_name", "pool_code", "pool_name")


def reshape_history(
    history: pd.DataFrame,
    layout: PositionalLayout = HISTORY_LAYOUT,
) -> Tuple[pd.DataFrame, UnpivotStats]:
    """
    Wide history rows -> long production table.

    One output row per input row, in input order. Duplicate (well, year) keys
    are kept. Slot columns are dropped; the well identifier is passed through
    untouched (normalization happens after the control join).
    """
    for c in PRODUCTION_KEY_COLUMNS:
        if c not in history.columns:
            raise ValueError(f"Expected column '{c}' in {layout.label}")

    volumes, stats = unpivot_frame(history, layout.slot_columns())

    out = pd.DataFrame(
        {
            "well_identifier": history["well_identifier"].reset_index(drop=True),
            "fluid_year": pd.to_numeric(history["fluid_year"], errors="coerce").astype("Int64").reset_index(drop=True),
        }
    )
    for c in FLUID_VOLUME_COLUMNS:
        out[c] = volumes[c].to_numpy()

    return out.loc[:, list(PRODUCTION_COLUMNS)], stats


def join_control(
    production: pd.DataFrame,
    control: pd.DataFrame,
    *,
    dedupe: bool = False,
) -> Tuple[pd.DataFrame, JoinStats]:
    """
    Left-join control attributes (well name, pool code/name) on the raw well identifier.
    Production rows are never dropped.
    """
    keep: List[str] = [c for c in CONTROL_ATTR_COLUMNS if c in control.columns]
    return left_join_counted(
        production,
        control.loc[:, ["well_identifier"] + keep] if "well_identifier" in control.columns else control,
        "well_identifier",
        label="control",
        dedupe=dedupe,
    )
