# src/wellprod/utils/config.py
from __future__ import annotations

from dataclasses import fields, is_dataclass
from pathlib import Path
from typing import Any, Dict

import yaml

_IO_PATH_KEYS = ("control_path", "history_path", "horizontal_path", "locations_path", "out_dir")


def load_yaml(path: Path) -> Dict[str, Any]:
    """
    Load a run config YAML. Relative io.* paths are resolved against the
    directory holding the YAML file, so configs can live next to their data.
    """
    p = Path(path).expanduser()
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    obj = yaml.safe_load(p.read_text(encoding="utf-8"))
    cfg = obj if isinstance(obj, dict) else {}

    io = cfg.get("io")
    if isinstance(io, dict):
        base = p.resolve().parent
        for k in _IO_PATH_KEYS:
            v = io.get(k)
            if isinstance(v, str) and v.strip() and not Path(v).expanduser().is_absolute():
                io[k] = str(base / v)
    return cfg


def deep_get(d: Dict[str, Any], key: str, default: Any = None) -> Any:
    cur: Any = d
    for part in key.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Nested merge; override wins. None values in override do not clobber base."""
    out = dict(base)
    for k, v in override.items():
        if v is None:
            continue
        if isinstance(v, dict):
            prev = out.get(k)
            out[k] = deep_merge(prev if isinstance(prev, dict) else {}, v)
        else:
            out[k] = v
    return out


def as_plain_dict(x: Any) -> Any:
    """JSON-friendly copy of (nested) dataclasses, dicts, lists and paths."""
    if is_dataclass(x) and not isinstance(x, type):
        return {f.name: as_plain_dict(getattr(x, f.name)) for f in fields(x)}
    if isinstance(x, dict):
        return {str(k): as_plain_dict(v) for k, v in x.items()}
    if isinstance(x, (list, tuple)):
        return [as_plain_dict(v) for v in x]
    if isinstance(x, Path):
        return str(x)
    return x
