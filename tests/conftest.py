from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pytest

from wellprod.specs.layouts import CONTROL_LAYOUT, HISTORY_LAYOUT

HISTORY_WIDTH = 170
CONTROL_WIDTH = 15


def _line(width: int, values: Dict[int, str], delimiter: str) -> str:
    fields = [""] * width
    for pos, v in values.items():
        fields[pos - 1] = v
    return delimiter.join(fields)


def history_line(
    well_id: str,
    year: int,
    slots: Sequence[Tuple[Optional[int], Optional[float]]],
    *,
    width: int = HISTORY_WIDTH,
) -> str:
    values: Dict[int, str] = {1: "H", 2: well_id, 3: str(year)}
    for sp, (code, vol) in zip(HISTORY_LAYOUT.slots, slots):
        if code is not None:
            values[sp.code.position] = str(code)
        if vol is not None:
            values[sp.volume.position] = str(vol)
    return _line(width, values, "\t")


def control_line(well_id: str, name: str, pool_code: str, pool_name: str, *, delimiter: str = "\t") -> str:
    pos = {c.name: c.position for c in CONTROL_LAYOUT.columns}
    return _line(
        CONTROL_WIDTH,
        {
            1: "C",
            pos["well_identifier"]: well_id,
            pos["well_name"]: name,
            pos["pool_code"]: pool_code,
            pos["pool_name"]: pool_name,
        },
        delimiter,
    )


@pytest.fixture
def write_lines(tmp_path: Path) -> Callable[[str, List[str]], Path]:
    def _write(name: str, lines: List[str]) -> Path:
        p = tmp_path / name
        p.write_text("\n".join(lines) + "\n", encoding="latin-1")
        return p

    return _write
