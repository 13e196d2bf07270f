from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from conftest import control_line, history_line
from wellprod.io.csv import ExtractError, detect_delimiter
from wellprod.io.extracts import (
    read_bottom_hole_locations,
    read_control_extract,
    read_history_extract,
    read_horizontal_wells,
    sanitize_pool_name,
)


def test_read_history_extract_positions(write_lines) -> None:
    p = write_lines(
        "history.txt",
        [
            history_line("0455051206000", 2019, [(51, 120.5), (2, 30.0), (None, None), (6, 4.0)]),
            history_line("0465051206000", 2020, []),
        ],
    )
    df = read_history_extract(p)

    assert df["well_identifier"].tolist() == ["0455051206000", "0465051206000"]
    assert df["fluid_year"].tolist() == [2019, 2020]
    assert df.loc[0, "fluid_code_1"] == 51
    assert df.loc[0, "fluid_volume_1"] == 120.5
    assert df.loc[0, "fluid_code_2"] == 2
    assert pd.isna(df.loc[0, "fluid_code_3"])
    assert df.loc[0, "fluid_code_4"] == 6
    assert df.loc[1, ["fluid_code_1", "fluid_volume_8"]].isna().all()


def test_read_history_extract_garbled_values_become_missing(write_lines) -> None:
    line = history_line("0455051206000", 2019, [(51, 1.0)])
    fields = line.split("\t")
    fields[53] = "X1"  # position 54: first fluid code
    fields[54] = "n/a"
    p = write_lines("history.txt", ["\t".join(fields)])
    df = read_history_extract(p)
    assert pd.isna(df.loc[0, "fluid_code_1"])
    assert pd.isna(df.loc[0, "fluid_volume_1"])


def test_read_history_extract_too_narrow_names_the_position(write_lines) -> None:
    p = write_lines("history.txt", [history_line("0455051206000", 2019, [], width=100)])
    with pytest.raises(ExtractError) as ei:
        read_history_extract(p)
    msg = str(ei.value)
    assert "history extract" in msg
    assert "167" in msg
    assert "fluid_volume_8" in msg


def test_missing_and_empty_files_raise(tmp_path: Path, write_lines) -> None:
    with pytest.raises(ExtractError, match="file not found"):
        read_history_extract(tmp_path / "nope.txt")

    empty = tmp_path / "empty.txt"
    empty.write_text("", encoding="latin-1")
    with pytest.raises(ExtractError, match="empty"):
        read_control_extract(empty)


def test_read_control_extract_sniffs_delimiter_and_sanitizes_pool(write_lines) -> None:
    p = write_lines(
        "control.csv",
        [
            control_line("0455051206000", "ACME HZ 6-12", "0123", "VIKING   A#", delimiter=","),
            control_line("0465051206000", "ACME 2", "0456", "MANNVILLE 'B'", delimiter=","),
        ],
    )
    assert detect_delimiter(p) == ","
    df = read_control_extract(p)
    assert list(df.columns) == ["well_identifier", "well_name", "pool_code", "pool_name"]
    assert df["pool_code"].tolist() == ["0123", "0456"]
    assert df["pool_name"].tolist() == ["VIKING A", "MANNVILLE B"]


def test_sanitize_pool_name_keeps_punctuation_set() -> None:
    out = sanitize_pool_name(pd.Series(["BASAL QTZ; A-B_1.0,X", "  GLAUC\tSS  ", None]))
    assert out.iloc[0] == "BASAL QTZ; A-B_1.0,X"
    assert out.iloc[1] == "GLAUC SS"
    assert pd.isna(out.iloc[2])


def test_read_horizontal_wells(tmp_path: Path) -> None:
    p = tmp_path / "horizontal.csv"
    p.write_text(
        "Well Uwi Formatted,Licence\n00/06-12-045-05W5/0,A1\n 00/07-12-045-05W5/0 ,A2\n",
        encoding="utf-8",
    )
    df = read_horizontal_wells(p)
    assert df.columns.tolist() == ["uwi"]
    assert df["uwi"].tolist() == ["00/06-12-045-05W5/0", "00/07-12-045-05W5/0"]


def test_read_bottom_hole_locations_numeric_and_missing_column(tmp_path: Path) -> None:
    p = tmp_path / "bh.csv"
    p.write_text(
        "UWI,BH_Long,BH_Lat,BH_Easting,BH_Northing\n"
        "00/06-12-045-05W5/0,-114.5,52.9,500000,5860000\n"
        "00/07-12-045-05W5/0,,bad,,\n",
        encoding="utf-8",
    )
    df = read_bottom_hole_locations(p)
    assert df.loc[0, "bh_long"] == -114.5
    assert df.loc[0, "bh_northing"] == 5860000.0
    assert df.loc[1, ["bh_long", "bh_lat", "bh_easting", "bh_northing"]].isna().all()

    bad = tmp_path / "bad.csv"
    bad.write_text("UWI,BH_Long\nX,1\n", encoding="utf-8")
    with pytest.raises(ExtractError, match="BH_Lat"):
        read_bottom_hole_locations(bad)
