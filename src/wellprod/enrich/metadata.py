# src/wellprod/enrich/metadata.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from wellprod.enrich.joins import JoinStats, left_join_counted
from wellprod.production.fluids import FLUID_VOLUME_COLUMNS
from wellprod.production.reshape import join_control
from wellprod.wells.uwi import normalize_uwi_series

LOCATION_VALUE_COLUMNS: Tuple[str, ...] = ("bh_long", "bh_lat", "bh_easting", "bh_northing")

ENRICHED_COLUMNS: Tuple[str, ...] = (
    ("uwi", "fluid_year", "well_name", "pool_code", "pool_name")
    + FLUID_VOLUME_COLUMNS
    + ("horizontal",)
    + LOCATION_VALUE_COLUMNS
)


@dataclass
class EnrichStats:
    n_production: int = 0
    n_enriched: int = 0
    joins: List[JoinStats] = field(default_factory=list)

    @property
    def n_fanout_rows(self) -> int:
        return int(sum(j.n_fanout_rows for j in self.joins))

    def as_dict(self) -> Dict[str, Any]:
        return {
            "n_production": int(self.n_production),
            "n_enriched": int(self.n_enriched),
            "n_fanout_rows": self.n_fanout_rows,
            "joins": {j.label: j.as_dict() for j in self.joins},
        }


def _horizontal_table(horizontal: Optional[pd.DataFrame]) -> pd.DataFrame:
    if horizontal is None:
        return pd.DataFrame({"uwi": pd.Series([], dtype=object), "horizontal": pd.Series([], dtype=bool)})
    if "uwi" not in horizontal.columns:
        raise ValueError("Horizontal-well table has no 'uwi' column")
    # presence of a row is the flag
    return pd.DataFrame({"uwi": horizontal["uwi"].to_numpy(), "horizontal": True})


def _location_table(locations: Optional[pd.DataFrame]) -> pd.DataFrame:
    cols = ["uwi", *LOCATION_VALUE_COLUMNS]
    if locations is None:
        return pd.DataFrame({c: pd.Series([], dtype=object if c == "uwi" else "float64") for c in cols})
    missing = [c for c in cols if c not in locations.columns]
    if missing:
        raise ValueError(f"Bottom-hole table missing columns: {missing}")
    out = locations.loc[:, cols].copy()
    for c in LOCATION_VALUE_COLUMNS:
        out[c] = pd.to_numeric(out[c], errors="coerce")
    return out


def enrich_production(
    production: pd.DataFrame,
    control: pd.DataFrame,
    horizontal: Optional[pd.DataFrame] = None,
    locations: Optional[pd.DataFrame] = None,
    *,
    dedupe_metadata: bool = False,
) -> Tuple[pd.DataFrame, EnrichStats]:
    """
    Attach control, horizontal-flag and bottom-hole metadata to production rows.

    Order matters:
      1) control joined on the raw well identifier
      2) well identifier -> uwi (raw identifier dropped)
      3) horizontal flags joined on uwi (True where listed, <NA> otherwise)
      4) bottom-hole coordinates joined on uwi

    All joins are left joins on exact key equality. Unless dedupe_metadata=True,
    repeated metadata keys multiply production rows (reported in EnrichStats).
    """
    stats = EnrichStats(n_production=int(len(production)))

    df, js = join_control(production, control, dedupe=dedupe_metadata)
    stats.joins.append(js)

    df.insert(0, "uwi", normalize_uwi_series(df["well_identifier"]).to_numpy())
    df = df.drop(columns=["well_identifier"])

    df, js = left_join_counted(df, _horizontal_table(horizontal), "uwi", label="horizontal", dedupe=dedupe_metadata)
    stats.joins.append(js)
    df["horizontal"] = df["horizontal"].astype("boolean")

    df, js = left_join_counted(df, _location_table(locations), "uwi", label="bottom_hole", dedupe=dedupe_metadata)
    stats.joins.append(js)

    for c in ENRICHED_COLUMNS:
        if c not in df.columns:
            df[c] = pd.NA
    stats.n_enriched = int(len(df))
    return df.loc[:, list(ENRICHED_COLUMNS)], stats
