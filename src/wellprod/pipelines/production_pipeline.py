# src/wellprod/pipelines/production_pipeline.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import pandas as pd

from wellprod.config.schema import RunConfig, SummaryConfig
from wellprod.enrich.metadata import ENRICHED_COLUMNS, EnrichStats, enrich_production
from wellprod.io.extracts import (
    read_bottom_hole_locations,
    read_control_extract,
    read_history_extract,
    read_horizontal_wells,
)
from wellprod.production.fluids import FLUID_VOLUME_COLUMNS
from wellprod.production.reshape import reshape_history
from wellprod.production.unpivot import UnpivotStats
from wellprod.summary.pool import SummaryStats, filter_and_summarize
from wellprod.utils.config import as_plain_dict
from wellprod.utils.manifest import write_manifest
from wellprod.viz.pool_map import add_popups, plot_pool_map

ENRICHED_CSV = "enriched.csv"
POOL_ROWS_CSV = "pool_rows.csv"
POOL_SUMMARY_CSV = "pool_summary.csv"
MANIFEST_JSON = "manifest.json"


def _say(verbose: bool, msg: str) -> None:
    if verbose:
        print(msg, flush=True)


def build_enriched_table(
    cfg: RunConfig,
    *,
    verbose: bool = False,
) -> Tuple[pd.DataFrame, UnpivotStats, EnrichStats, Dict[str, int]]:
    """
    Read the four inputs and produce the full enriched production table.
    Horizontal/bottom-hole inputs are optional (None path => every row unmatched).
    """
    io = cfg.io
    rd = cfg.read

    control = read_control_extract(io.control_path, delimiter=rd.control_delimiter, encoding=rd.encoding)
    _say(verbose, f"Control rows: {len(control)}")

    history = read_history_extract(io.history_path, delimiter=rd.history_delimiter, encoding=rd.encoding)
    _say(verbose, f"History rows: {len(history)}")

    horizontal: Optional[pd.DataFrame] = None
    if io.horizontal_path is not None:
        horizontal = read_horizontal_wells(io.horizontal_path)
        _say(verbose, f"Horizontal wells listed: {len(horizontal)}")

    locations: Optional[pd.DataFrame] = None
    if io.locations_path is not None:
        locations = read_bottom_hole_locations(io.locations_path)
        _say(verbose, f"Bottom-hole locations: {len(locations)}")

    production, unpivot_stats = reshape_history(history)
    _say(
        verbose,
        f"Reshaped: {len(production)} rows | unmapped slots: {unpivot_stats.n_unmapped_slots} "
        f"| overwritten slots: {unpivot_stats.n_overwritten}",
    )

    enriched, enrich_stats = enrich_production(
        production,
        control,
        horizontal,
        locations,
        dedupe_metadata=cfg.enrich.dedupe_metadata,
    )
    for j in enrich_stats.joins:
        _say(verbose, f"Join {j.label}: matched {j.n_matched}/{j.n_left} | fan-out rows {j.n_fanout_rows}")

    inputs = {
        "n_control": int(len(control)),
        "n_history": int(len(history)),
        "n_horizontal": 0 if horizontal is None else int(len(horizontal)),
        "n_locations": 0 if locations is None else int(len(locations)),
    }
    return enriched, unpivot_stats, enrich_stats, inputs


def read_enriched_csv(path: Path) -> pd.DataFrame:
    """Reload an enriched table written by run_pipeline with its column types."""
    df = pd.read_csv(path, dtype={"uwi": str, "well_name": str, "pool_code": str, "pool_name": str})
    missing = [c for c in ENRICHED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"{path}: not an enriched table, missing {missing}")
    df["fluid_year"] = pd.to_numeric(df["fluid_year"], errors="coerce").astype("Int64")
    for c in FLUID_VOLUME_COLUMNS + ("bh_long", "bh_lat", "bh_easting", "bh_northing"):
        df[c] = pd.to_numeric(df[c], errors="coerce").astype("float64")
    df["horizontal"] = df["horizontal"].map({True: True, "True": True, "true": True}).astype("boolean")
    return df.loc[:, list(ENRICHED_COLUMNS)]


def summarize_pool(
    enriched: pd.DataFrame,
    summary_cfg: SummaryConfig,
    out_dir: Path,
    *,
    verbose: bool = False,
) -> Tuple[pd.DataFrame, pd.DataFrame, SummaryStats, Dict[str, str]]:
    filtered, summary, stats = filter_and_summarize(
        enriched,
        summary_cfg.pool_search_term,
        seqyear_order=summary_cfg.seqyear_order,
        zero_range_value=summary_cfg.zero_range_value,
    )
    _say(verbose, f"Pool {summary_cfg.pool_search_term!r}: {stats.n_rows} rows, {stats.n_wells} wells")

    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    rows_csv = out_dir / POOL_ROWS_CSV
    summary_csv = out_dir / POOL_SUMMARY_CSV
    filtered.to_csv(rows_csv, index=False)
    add_popups(summary).to_csv(summary_csv, index=False)
    return filtered, summary, stats, {"pool_rows_csv": str(rows_csv), "pool_summary_csv": str(summary_csv)}


def run_pipeline(cfg: RunConfig, *, verbose: bool = False) -> Dict[str, Any]:
    """
    Full run. Writes into cfg.io.out_dir:
      - enriched.csv
      - pool_rows.csv, pool_summary.csv
      - pool_map.png (when cfg.map.enabled)
      - manifest.json (config, counts, data-quality stats, outputs)
    Returns the manifest.
    """
    out_dir = Path(cfg.io.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    enriched, unpivot_stats, enrich_stats, inputs = build_enriched_table(cfg, verbose=verbose)
    enriched_csv = out_dir / ENRICHED_CSV
    enriched.to_csv(enriched_csv, index=False)
    _say(verbose, f"Wrote: {enriched_csv}")

    _, summary, summary_stats, outputs = summarize_pool(enriched, cfg.summary, out_dir, verbose=verbose)
    outputs["enriched_csv"] = str(enriched_csv)

    if cfg.map.enabled:
        png = plot_pool_map(
            summary,
            out_dir / cfg.map.filename,
            radius_column=cfg.map.radius_column,
            max_marker_area=cfg.map.max_marker_area,
            title=f"{cfg.summary.pool_search_term or 'All pools'} ({cfg.map.radius_column})",
        )
        outputs["pool_map_png"] = str(png)

    manifest: Dict[str, Any] = {
        "config": as_plain_dict(cfg),
        "inputs": inputs,
        "unpivot": unpivot_stats.as_dict(),
        "enrich": enrich_stats.as_dict(),
        "summary": summary_stats.as_dict(),
        "outputs": outputs,
    }
    write_manifest(out_dir / MANIFEST_JSON, manifest)
    for k in sorted(outputs):
        _say(verbose, f"Wrote: {outputs[k]}")
    return manifest
