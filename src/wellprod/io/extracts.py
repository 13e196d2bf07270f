# src/wellprod/io/extracts.py
from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Optional

import numpy as np
import pandas as pd

from wellprod.io.csv import (
    ExtractError,
    count_fields,
    detect_delimiter,
    read_delimited_columns,
    read_header_csv,
    require_file,
)
from wellprod.specs.layouts import (
    CONTROL_LAYOUT,
    HISTORY_LAYOUT,
    HORIZONTAL_COLUMNS,
    LOCATION_COLUMNS,
    PositionalLayout,
)

_POOL_NAME_DROP = re.compile(r"[^A-Za-z0-9,;._\-\s]")
_WS = re.compile(r"\s+")


def sanitize_pool_name(names: pd.Series) -> pd.Series:
    """
    Keep letters, digits, `,;._-`; whitespace runs collapse to one space.
    Everything else is removed. Missing stays missing.
    """
    s = names.astype("string")
    s = s.str.replace(_POOL_NAME_DROP, "", regex=True)
    s = s.str.replace(_WS, " ", regex=True).str.strip()
    return s.astype(object)


def _coerce(df: pd.DataFrame, layout: PositionalLayout) -> pd.DataFrame:
    out = df.copy()
    for spec in layout.all_columns():
        col = out[spec.name]
        if spec.kind == "int":
            x = pd.to_numeric(col, errors="coerce").astype("float64")
            out[spec.name] = x.where(np.isfinite(x) & (x == x.round())).astype("Int64")
        elif spec.kind == "float":
            out[spec.name] = pd.to_numeric(col, errors="coerce").astype("float64")
        else:
            out[spec.name] = col.str.strip()
    return out


def read_positional_extract(
    path: Path | str,
    layout: PositionalLayout,
    *,
    delimiter: Optional[str] = None,
    encoding: str = "latin-1",
) -> pd.DataFrame:
    """
    Read the layout's columns from a headerless delimited extract.

    Raises ExtractError when the file is missing/unreadable/empty or when its
    first row is narrower than the highest position the layout references.
    Data-quality issues in individual values (non-numeric codes, blank slots)
    become NaN, never errors.
    """
    p = require_file(path, layout.label)
    try:
        delim = delimiter if delimiter else detect_delimiter(p, encoding=encoding)
        width = count_fields(p, delim, encoding=encoding)
    except OSError as e:
        raise ExtractError(layout.label, p, f"unreadable: {e}") from e

    if width == 0:
        raise ExtractError(layout.label, p, "file is empty")
    if width < layout.min_width:
        widest = max(layout.all_columns(), key=lambda c: c.position)
        raise ExtractError(
            layout.label,
            p,
            f"expected at least {layout.min_width} columns, found {width} "
            f"(position {widest.position} '{widest.name}', delimiter {delim!r})",
        )

    specs = layout.all_columns()
    try:
        raw = read_delimited_columns(
            p,
            [s.index for s in specs],
            [s.name for s in specs],
            delimiter=delim,
            encoding=encoding,
        )
    except (OSError, pd.errors.ParserError, UnicodeDecodeError) as e:
        raise ExtractError(layout.label, p, f"could not parse: {e}") from e

    return _coerce(raw, layout)


def read_control_extract(path: Path | str, *, delimiter: Optional[str] = None, encoding: str = "latin-1") -> pd.DataFrame:
    """well_identifier, well_name, pool_code, pool_name (pool name sanitized)."""
    df = read_positional_extract(path, CONTROL_LAYOUT, delimiter=delimiter, encoding=encoding)
    df["pool_name"] = sanitize_pool_name(df["pool_name"])
    return df


def read_history_extract(path: Path | str, *, delimiter: Optional[str] = "\t", encoding: str = "latin-1") -> pd.DataFrame:
    """well_identifier, fluid_year, fluid_code_1..8, fluid_volume_1..8."""
    return read_positional_extract(path, HISTORY_LAYOUT, delimiter=delimiter, encoding=encoding)


def _read_named(path: Path | str, label: str, columns: Dict[str, str], *, encoding: str) -> pd.DataFrame:
    p = require_file(path, label)
    try:
        df = read_header_csv(p, encoding=encoding)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ExtractError(label, p, f"could not parse: {e}") from e

    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ExtractError(label, p, f"missing column(s) {missing}; found {list(df.columns)}")

    out = df.loc[:, list(columns)].rename(columns=columns)
    out["uwi"] = out["uwi"].str.strip()
    return out


def read_horizontal_wells(path: Path | str, *, encoding: str = "utf-8-sig") -> pd.DataFrame:
    """uwi of every horizontal well (one row per listing; duplicates kept)."""
    return _read_named(path, "horizontal well list", HORIZONTAL_COLUMNS, encoding=encoding)


def read_bottom_hole_locations(path: Path | str, *, encoding: str = "utf-8-sig") -> pd.DataFrame:
    """uwi, bh_long, bh_lat, bh_easting, bh_northing (coordinates numeric, NaN if blank/garbled)."""
    df = _read_named(path, "bottom-hole locations", LOCATION_COLUMNS, encoding=encoding)
    for c in ("bh_long", "bh_lat", "bh_easting", "bh_northing"):
        df[c] = pd.to_numeric(df[c], errors="coerce")
    return df
