from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich import print

from wellprod.config.defaults import config_from_dict, default_config
from wellprod.config.schema import SummaryConfig
from wellprod.io.csv import ExtractError
from wellprod.io.extracts import read_history_extract
from wellprod.pipelines.production_pipeline import MANIFEST_JSON, read_enriched_csv, run_pipeline, summarize_pool
from wellprod.production.unpivot import unpivot_frame
from wellprod.specs.layouts import HISTORY_LAYOUT
from wellprod.summary.pool import SEQYEAR_ORDERS
from wellprod.utils.config import deep_merge, load_yaml
from wellprod.utils.manifest import write_manifest

app = typer.Typer(add_completion=False, help="Reshape, enrich and summarize well production extracts.")


def _fail(e: Exception) -> None:
    print(f"[bold red]Input error:[/bold red] {e}")
    raise typer.Exit(code=2)


def _check_order(order: Optional[str]) -> None:
    if order is not None and order not in SEQYEAR_ORDERS:
        print(f"[red]--seqyear-order must be one of {list(SEQYEAR_ORDERS)}[/red]")
        raise typer.Exit(code=2)


@app.command()
def run(
    config: Optional[Path] = typer.Option(None, "--config", help="YAML run config (CLI options override it)."),
    control: Optional[Path] = typer.Option(None, help="Headerless control extract."),
    history: Optional[Path] = typer.Option(None, help="Headerless tab-delimited history extract."),
    horizontal: Optional[Path] = typer.Option(None, help="CSV with 'Well Uwi Formatted'."),
    locations: Optional[Path] = typer.Option(None, help="CSV with UWI,BH_Long,BH_Lat,BH_Easting,BH_Northing."),
    out_dir: Optional[Path] = typer.Option(None, help="Output directory."),
    pool: Optional[str] = typer.Option(None, "--pool", help="Pool/formation search term (case-sensitive substring)."),
    seqyear_order: Optional[str] = typer.Option(None, help="'input' (row order) or 'year'."),
    dedupe_metadata: Optional[bool] = typer.Option(None, "--dedupe-metadata/--keep-duplicate-metadata"),
    map_png: Optional[bool] = typer.Option(None, "--map/--no-map", help="Write pool_map.png."),
    radius_column: Optional[str] = typer.Option(None, help="rad_oil | rad_gas | rad_lgas"),
    verbose: bool = typer.Option(True, "--verbose/--quiet"),
):
    """Full pipeline: extracts -> enriched table -> pool summary (+ optional map)."""
    _check_order(seqyear_order)

    cfg_dict: Dict[str, Any] = load_yaml(config) if config is not None else {}
    overrides: Dict[str, Any] = {
        "io": {
            "control_path": control,
            "history_path": history,
            "horizontal_path": horizontal,
            "locations_path": locations,
            "out_dir": out_dir,
        },
        "enrich": {"dedupe_metadata": dedupe_metadata},
        "summary": {"pool_search_term": pool, "seqyear_order": seqyear_order},
        "map": {"enabled": map_png, "radius_column": radius_column},
    }
    cfg = config_from_dict(deep_merge(cfg_dict, overrides), base=default_config())

    print("[bold]Running production pipeline...[/bold]")
    try:
        manifest = run_pipeline(cfg, verbose=verbose)
    except ExtractError as e:
        _fail(e)
        return

    print(json.dumps({"enrich": manifest["enrich"]["joins"], "summary": manifest["summary"]}, indent=2))
    print("[green]Wrote[/green]", Path(cfg.io.out_dir) / MANIFEST_JSON)


@app.command()
def summarize(
    enriched: Path = typer.Option(..., exists=True, dir_okay=False, help="enriched.csv from a previous run."),
    pool: str = typer.Option(..., "--pool", help="Pool/formation search term (case-sensitive substring)."),
    out_dir: Path = typer.Option(Path("out"), help="Output directory."),
    seqyear_order: str = typer.Option("input", help="'input' (row order) or 'year'."),
    zero_range_value: Optional[float] = typer.Option(None, help="Radius used when all wells have equal production."),
):
    """Re-run the pool filter/summary on an existing enriched table."""
    _check_order(seqyear_order)
    try:
        df = read_enriched_csv(enriched)
    except ValueError as e:
        _fail(e)
        return

    scfg = replace(SummaryConfig(), pool_search_term=pool, seqyear_order=seqyear_order, zero_range_value=zero_range_value)
    _, _, stats, outputs = summarize_pool(df, scfg, out_dir, verbose=True)
    write_manifest(out_dir / "summary_manifest.json", {"enriched_csv": str(enriched), "summary": stats.as_dict(), "outputs": outputs})
    print(json.dumps(stats.as_dict(), indent=2))


@app.command()
def profile(
    history: Path = typer.Option(..., help="Headerless tab-delimited history extract."),
    delimiter: str = typer.Option("\t", help="Field delimiter."),
):
    """Fluid-code usage of a history extract (mapped vs unmapped slots)."""
    try:
        df = read_history_extract(history, delimiter=delimiter)
    except ExtractError as e:
        _fail(e)
        return

    _, stats = unpivot_frame(df, HISTORY_LAYOUT.slot_columns())
    print(f"[bold]{history}[/bold]")
    print(f"Rows: {stats.n_rows} | wells: {df['well_identifier'].nunique()}")
    print(f"Years: {df['fluid_year'].min()}-{df['fluid_year'].max()}")
    print(f"Slots used: {stats.n_slots_used} | unmapped: {stats.n_unmapped_slots} | overwritten: {stats.n_overwritten}")
    if stats.unmapped_codes:
        print("Unmapped codes:", json.dumps(stats.as_dict()["unmapped_codes"]))


if __name__ == "__main__":
    app()
