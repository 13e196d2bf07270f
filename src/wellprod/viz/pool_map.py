# src/wellprod/viz/pool_map.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

import numpy as np
import pandas as pd

# NOTE:
# - matplotlib is imported inside plot_pool_map() so the pipeline and tests do
#   not need a plotting backend.

RADIUS_COLUMNS = ("rad_oil", "rad_gas", "rad_lgas")


def _fmt_volume(x: Any) -> str:
    try:
        v = float(x)
    except (TypeError, ValueError):
        return "n/a"
    if not np.isfinite(v):
        return "n/a"
    return f"{v:,.1f}"


def _fmt_year(x: Any) -> str:
    if x is None or pd.isna(x):
        return "?"
    return str(int(x))


def popup_text(row: Mapping[str, Any]) -> str:
    """Per-well annotation: UWI, year range and summed volumes."""
    return (
        f"UWI: {row.get('uwi', '')}\n"
        f"Years: {_fmt_year(row.get('year_min'))}-{_fmt_year(row.get('year_max'))}\n"
        f"Oil: {_fmt_volume(row.get('oil_prod'))}\n"
        f"Gas: {_fmt_volume(row.get('gas_prod'))}\n"
        f"Liquid gas: {_fmt_volume(row.get('lgas_prod'))}"
    )


def add_popups(summary: pd.DataFrame) -> pd.DataFrame:
    out = summary.copy()
    out["popup"] = [popup_text(r) for r in summary.to_dict(orient="records")]
    return out


def marker_areas(radius: pd.Series, *, max_marker_area: float = 400.0, min_marker_area: float = 4.0) -> np.ndarray:
    """Map radii in [0, 1000] to scatter marker areas; non-finite radii get the minimum."""
    r = pd.to_numeric(radius, errors="coerce").to_numpy(dtype="float64")
    a = np.clip(r / 1000.0, 0.0, 1.0) * float(max_marker_area)
    a = np.where(np.isfinite(a), a, 0.0)
    return np.maximum(a, float(min_marker_area))


def plot_pool_map(
    summary: pd.DataFrame,
    out_png: Path,
    *,
    radius_column: str = "rad_oil",
    max_marker_area: float = 400.0,
    title: Optional[str] = None,
    dpi: int = 200,
) -> Path:
    """
    One circle per well at (bh_long, bh_lat), area proportional to radius_column.
    Wells without a bottom-hole location are skipped.
    """
    if radius_column not in RADIUS_COLUMNS:
        raise ValueError(f"radius_column must be one of {RADIUS_COLUMNS}, got {radius_column!r}")

    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    lon = pd.to_numeric(summary["bh_long"], errors="coerce").to_numpy(dtype="float64")
    lat = pd.to_numeric(summary["bh_lat"], errors="coerce").to_numpy(dtype="float64")
    ok = np.isfinite(lon) & np.isfinite(lat)

    fig, ax = plt.subplots(figsize=(8, 8))
    try:
        if ok.any():
            areas = marker_areas(summary[radius_column], max_marker_area=max_marker_area)
            ax.scatter(lon[ok], lat[ok], s=areas[ok], alpha=0.5, edgecolors="k", linewidths=0.3)
        else:
            ax.text(0.5, 0.5, "No wells with bottom-hole locations", ha="center", va="center", transform=ax.transAxes)

        ax.set_xlabel("Longitude")
        ax.set_ylabel("Latitude")
        ax.set_title(title or f"Wells sized by {radius_column} (n={int(ok.sum())})")
        ax.grid(True, linewidth=0.3, alpha=0.5)

        out_png = Path(out_png)
        out_png.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(out_png, dpi=dpi, bbox_inches="tight")
    finally:
        plt.close(fig)
    return out_png
