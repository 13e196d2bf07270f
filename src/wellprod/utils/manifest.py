# src/wellprod/utils/manifest.py
from __future__ import annotations

import json
import math
import os
import time
from pathlib import Path
from typing import Any, Dict


def _json_safe(x: Any) -> Any:
    # json.dumps would emit bare NaN/Infinity, which strict readers reject
    if isinstance(x, float) and not math.isfinite(x):
        return str(x)
    if isinstance(x, dict):
        return {str(k): _json_safe(v) for k, v in x.items()}
    if isinstance(x, (list, tuple)):
        return [_json_safe(v) for v in x]
    return x


def write_manifest(path: Path, payload: Dict[str, Any]) -> Path:
    """
    Atomic JSON write (tmp + replace) so readers never see a partial manifest.
    Adds a `written_at` unix timestamp.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    obj = dict(payload)
    obj["written_at"] = time.time()

    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(_json_safe(obj), indent=2, sort_keys=True), encoding="utf-8")
    os.replace(tmp, path)
    return path


def read_manifest(path: Path) -> Dict[str, Any]:
    obj = json.loads(Path(path).read_text(encoding="utf-8"))
    return obj if isinstance(obj, dict) else {"_raw": obj}
