from __future__ import annotations

from dataclasses import fields, is_dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

from .schema import EnrichConfig, IOConfig, MapConfig, ReadConfig, RunConfig, SummaryConfig

_PATH_KEYS = {"control_path", "history_path", "horizontal_path", "locations_path", "out_dir"}


def default_config(base: Optional[Path] = None) -> RunConfig:
    base = Path.cwd() if base is None else Path(base)
    return RunConfig(
        io=IOConfig(
            control_path=base / "data" / "control.txt",
            history_path=base / "data" / "history.txt",
            horizontal_path=base / "data" / "horizontal_wells.csv",
            locations_path=base / "data" / "bottom_hole_locations.csv",
            out_dir=base / "out",
        )
    )


def _apply(obj: Any, d: Dict[str, Any]) -> Any:
    """Replace known dataclass fields from d; unknown keys are ignored."""
    if not is_dataclass(obj) or not isinstance(d, dict):
        return obj
    names = {f.name for f in fields(obj)}
    kwargs: Dict[str, Any] = {}
    for k, v in d.items():
        if k not in names:
            continue
        if k in _PATH_KEYS:
            kwargs[k] = None if v in (None, "") else Path(str(v)).expanduser()
        else:
            kwargs[k] = v
    return replace(obj, **kwargs)


def config_from_dict(d: Dict[str, Any], *, base: Optional[RunConfig] = None) -> RunConfig:
    """
    Build a RunConfig from a nested mapping shaped like the YAML file:

      io: {control_path, history_path, horizontal_path, locations_path, out_dir}
      read: {control_delimiter, history_delimiter, encoding}
      enrich: {dedupe_metadata}
      summary: {pool_search_term, seqyear_order, zero_range_value}
      map: {enabled, radius_column, max_marker_area, filename}
    """
    cfg = default_config() if base is None else base
    d = d if isinstance(d, dict) else {}
    return RunConfig(
        io=_apply(cfg.io, d.get("io", {})),
        read=_apply(cfg.read, d.get("read", {})),
        enrich=_apply(cfg.enrich, d.get("enrich", {})),
        summary=_apply(cfg.summary, d.get("summary", {})),
        map=_apply(cfg.map, d.get("map", {})),
    )


__all__ = [
    "EnrichConfig",
    "IOConfig",
    "MapConfig",
    "ReadConfig",
    "RunConfig",
    "SummaryConfig",
    "config_from_dict",
    "default_config",
]
